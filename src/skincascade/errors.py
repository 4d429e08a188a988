"""Error types raised by skincascade."""
from __future__ import annotations


class SkinError(Exception):
    """Base class for all skincascade errors."""


class SkinNotFoundError(SkinError, KeyError):
    """Raised when a skin id or title does not exist in the store."""

    def __init__(self, skin_ref: int | str) -> None:
        self.skin_ref = skin_ref
        super().__init__(f"No skin {skin_ref!r}")

    def __str__(self) -> str:
        return self.args[0]


class SheetRoleError(SkinError, ValueError):
    """Raised when a sheet role token cannot be decoded."""

    def __init__(self, token: str, reason: str) -> None:
        self.token = token
        super().__init__(f"Invalid sheet role {token!r}: {reason}")


class SkinGraphError(SkinError):
    """Base class for ancestry traversal failures."""


class SkinCycleError(SkinGraphError):
    """Raised when a skin turns up among its own ancestors."""

    def __init__(self, path: list[int]) -> None:
        self.path = path
        chain = " -> ".join(str(p) for p in path)
        super().__init__(f"Skin parent cycle: {chain}")


class AncestryTooDeepError(SkinGraphError):
    """Raised when an ancestor chain is longer than the configured limit."""

    def __init__(self, skin_id: int, max_depth: int) -> None:
        self.skin_id = skin_id
        self.max_depth = max_depth
        super().__init__(
            f"Ancestors of skin {skin_id} exceed the maximum depth of {max_depth}"
        )


class StoreError(SkinError):
    """Base class for persistence constraint violations."""


class DuplicateTitleError(StoreError):
    def __init__(self, title: str) -> None:
        self.title = title
        super().__init__(f"Skin title {title!r} must be unique")


class DuplicatePositionError(StoreError):
    def __init__(self, child_skin_id: int, position: int) -> None:
        self.child_skin_id = child_skin_id
        self.position = position
        super().__init__(
            f"Skin {child_skin_id} already has a parent at position {position}"
        )
