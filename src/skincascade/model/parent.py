from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SkinParent:
    """Ordered edge from a child skin to one of its parents.

    Position 1 is applied first, so later parents win under the CSS cascade.
    """

    child_skin_id: int
    parent_skin_id: int
    position: int

    def __post_init__(self) -> None:
        if self.child_skin_id == self.parent_skin_id:
            raise ValueError(f"Skin {self.child_skin_id} cannot be its own parent")
        if self.position < 1:
            raise ValueError("Parent position must be 1 or greater")
