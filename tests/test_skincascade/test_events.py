from __future__ import annotations

from skincascade.events import EventBus, ParentsChanged, SkinSaved


class TestEventBus:
    def test_typed_and_global_listeners(self) -> None:
        bus = EventBus()
        seen: list[str] = []
        bus.subscribe(SkinSaved, lambda e: seen.append(f"saved {e.skin_id}"))
        bus.on_all(lambda e: seen.append(f"all {type(e).__name__}"))
        bus.emit(SkinSaved(1))
        bus.emit(ParentsChanged(2))
        assert seen == ["all SkinSaved", "saved 1", "all ParentsChanged"]

    def test_listener_added_during_dispatch_waits_for_next_event(self) -> None:
        bus = EventBus()
        late: list[int] = []

        def register(event: SkinSaved) -> None:
            if not late:
                late.append(0)
                bus.subscribe(SkinSaved, lambda e: late.append(e.skin_id))

        bus.subscribe(SkinSaved, register)
        bus.emit(SkinSaved(1))
        assert late == [0]
        bus.emit(SkinSaved(2))
        assert late == [0, 2]
