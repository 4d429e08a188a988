"""Resolve a skin and its ancestors into the markup embedded in a page."""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from skincascade.errors import SkinGraphError
from skincascade.events import EventBus, ParentsChanged, SettingsChanged, SkinDeleted, SkinSaved
from skincascade.file_cache import FileCache
from skincascade.graph import SkinGraph
from skincascade.model.skin import DEFAULT_ROLES_TO_INCLUDE, Role, Skin
from skincascade.render.markup import single_block
from skincascade.style_cache import StyleCache

logger = logging.getLogger(__name__)

# Skins with these roles are never wrapped in the site skin.
_UNWRAPPED_ROLES = (Role.OVERRIDE, Role.SITE)


class CascadeResolver:
    """Turns a skin id into ``<link>``/``<style>`` markup.

    ``wrapper`` returns the skin that wraps every user skin (the configured
    default or the current site skin), or ``None``.
    """

    def __init__(
        self,
        graph: SkinGraph,
        file_cache: FileCache,
        *,
        wrapper: Callable[[], Skin | None] | None = None,
        cache: StyleCache | None = None,
    ) -> None:
        self.graph = graph
        self.file_cache = file_cache
        self._wrapper = wrapper or (lambda: None)
        self.cache = cache or StyleCache()

    def resolve(
        self, skin_id: int, roles_to_include: Iterable[Role | str] = DEFAULT_ROLES_TO_INCLUDE
    ) -> str:
        """Return the full markup for *skin_id*, site skin first.

        Results are memoised per (skin, role set) until invalidated.
        """
        roles = frozenset(Role(r) for r in roles_to_include)
        skin = self.graph.get(skin_id)
        return self.cache.get_or_compute(skin_id, roles, lambda: self._compute(skin, roles))

    def _compute(self, skin: Skin, roles: frozenset[Role]) -> str:
        style = ""
        if skin.effective_role not in _UNWRAPPED_ROLES:
            wrapper = self._wrapper()
            if wrapper is not None and wrapper.id != skin.id and wrapper.id in self.graph:
                style += self.resolve(wrapper.id, roles)
        style += self.style_block(skin, roles)
        return style

    def style_block(self, skin: Skin, roles: frozenset[Role]) -> str:
        """The skin's own cascade, from its cache files when it has them."""
        if skin.cached:
            try:
                return self.file_cache.read(skin, roles)
            except OSError:
                logger.exception("Could not read cache of skin %s", skin.id)
                return ""
        return self.live_block(skin, roles)

    def live_block(self, skin: Skin, roles: frozenset[Role]) -> str:
        assert skin.id is not None
        try:
            cascade = self.graph.cascade(skin.id)
        except SkinGraphError:
            logger.exception("Could not resolve ancestors of skin %s", skin.id)
            return ""
        blocks = (single_block(s, roles) for s in cascade)
        return "\n".join(block for block in blocks if block)

    # --- invalidation ---------------------------------------------------------

    def invalidate(self, skin_id: int, descendant_ids: Iterable[int] | None = None) -> None:
        """Forget memoised markup of *skin_id* and every skin inheriting from it.

        When the site wrapper is affected every entry goes.
        """
        if descendant_ids is None:
            descendant_ids = self.graph.descendants(skin_id) if skin_id in self.graph else ()
        affected = {skin_id, *descendant_ids}
        wrapper = self._wrapper()
        if wrapper is not None and wrapper.id in affected:
            self.cache.invalidate_all()
        else:
            self.cache.invalidate(affected)

    def subscribe(self, bus: EventBus) -> None:
        bus.subscribe(SkinSaved, lambda e: self.invalidate(e.skin_id))
        bus.subscribe(ParentsChanged, lambda e: self.invalidate(e.child_skin_id))
        bus.subscribe(SkinDeleted, lambda e: self.invalidate(e.skin_id, e.descendant_ids))
        bus.subscribe(SettingsChanged, lambda e: self.cache.invalidate_all())
