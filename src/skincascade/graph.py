"""In-memory skin inheritance graph: integer ids and ordered parent lists."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from skincascade.errors import AncestryTooDeepError, SkinCycleError, SkinNotFoundError
from skincascade.model.parent import SkinParent
from skincascade.model.skin import Skin

DEFAULT_MAX_DEPTH = 64


@dataclass
class SkinGraph:
    """Skins keyed by id plus, per child, its parent links sorted by position."""

    skins: dict[int, Skin] = field(default_factory=dict)
    parents: dict[int, list[SkinParent]] = field(default_factory=dict)
    max_depth: int = DEFAULT_MAX_DEPTH

    @classmethod
    def build(
        cls,
        skins: list[Skin] | tuple[Skin, ...],
        links: list[SkinParent] | tuple[SkinParent, ...],
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> SkinGraph:
        graph = cls(max_depth=max_depth)
        for skin in skins:
            graph.add(skin)
        for link in links:
            graph.link(link.child_skin_id, link.parent_skin_id, link.position)
        return graph

    # --- mutation -------------------------------------------------------------

    def add(self, skin: Skin) -> None:
        """Insert or replace a stored skin."""
        if skin.id is None:
            raise ValueError(f"Skin {skin.title!r} has no id")
        self.skins[skin.id] = skin

    def remove(self, skin_id: int) -> None:
        """Drop a skin together with every link that touches it."""
        self.skins.pop(skin_id, None)
        self.parents.pop(skin_id, None)
        for child_id, links in self.parents.items():
            self.parents[child_id] = [edge for edge in links if edge.parent_skin_id != skin_id]

    def link(self, child_id: int, parent_id: int, position: int) -> SkinParent:
        link = SkinParent(child_skin_id=child_id, parent_skin_id=parent_id, position=position)
        links = [edge for edge in self.parents.get(child_id, []) if edge.position != position]
        links.append(link)
        links.sort(key=lambda edge: edge.position)
        self.parents[child_id] = links
        return link

    def unlink(self, child_id: int, parent_id: int) -> None:
        links = self.parents.get(child_id, [])
        self.parents[child_id] = [edge for edge in links if edge.parent_skin_id != parent_id]

    def clear_parents(self, child_id: int) -> None:
        self.parents.pop(child_id, None)

    # --- queries --------------------------------------------------------------

    def get(self, skin_id: int) -> Skin:
        try:
            return self.skins[skin_id]
        except KeyError:
            raise SkinNotFoundError(skin_id) from None

    def __contains__(self, skin_id: int) -> bool:
        return skin_id in self.skins

    def ordered_parents(self, skin_id: int) -> list[Skin]:
        """Return the parent skins of *skin_id* by link position, lowest first."""
        return [self.get(edge.parent_skin_id) for edge in self.parents.get(skin_id, [])]

    def children(self, skin_id: int) -> list[Skin]:
        return [
            self.get(child_id)
            for child_id, links in self.parents.items()
            if any(edge.parent_skin_id == skin_id for edge in links)
        ]

    def iter_ancestors(self, skin_id: int) -> Iterator[Skin]:
        """Yield every ancestor of *skin_id* in cascade order.

        For each parent in position order: that parent's own ancestors, then
        the parent. Outermost ancestors come first, so the skin's own rules
        (appended by the caller) win. A skin reachable through two parents is
        yielded once per path. Each call returns a fresh iterator.
        """
        self.get(skin_id)
        # Explicit stack of (skin id, parent iterator) frames; the ids on the
        # stack form the current path for cycle detection.
        stack: list[tuple[int, Iterator[Skin]]] = [
            (skin_id, iter(self.ordered_parents(skin_id)))
        ]
        on_path = {skin_id}
        while stack:
            current_id, pending = stack[-1]
            parent = next(pending, None)
            if parent is None:
                stack.pop()
                on_path.discard(current_id)
                if stack:
                    yield self.get(current_id)
                continue
            assert parent.id is not None
            if parent.id in on_path:
                raise SkinCycleError([frame_id for frame_id, _ in stack] + [parent.id])
            if len(stack) > self.max_depth:
                raise AncestryTooDeepError(skin_id, self.max_depth)
            stack.append((parent.id, iter(self.ordered_parents(parent.id))))
            on_path.add(parent.id)

    def all_ancestors(self, skin_id: int) -> list[Skin]:
        return list(self.iter_ancestors(skin_id))

    def cascade(self, skin_id: int) -> list[Skin]:
        """Return the ancestors of *skin_id* followed by the skin itself."""
        return self.all_ancestors(skin_id) + [self.get(skin_id)]

    def descendants(self, skin_id: int) -> set[int]:
        """Return the ids of all skins that inherit from *skin_id* via DFS."""
        visited: set[int] = set()
        stack = [skin_id]
        while stack:
            current = stack.pop()
            for child in self.children(current):
                assert child.id is not None
                if child.id not in visited:
                    visited.add(child.id)
                    stack.append(child.id)
        visited.discard(skin_id)
        return visited
