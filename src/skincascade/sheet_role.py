"""Sheet role tokens: filesystem-safe names for (role, media, IE condition).

A token looks like ``user_all.narrow_IE8_or_lower``. Media entries that are
not single alphanumeric words must have an entry in ``_MEDIA_TOKENS``.
"""

from __future__ import annotations

from dataclasses import dataclass

from skincascade.errors import SheetRoleError
from skincascade.model.skin import DEFAULT_MEDIA, DEFAULT_ROLE, IECondition, Media, Role, Skin

__all__ = ["SheetRole", "encode_sheet_role", "decode_sheet_role", "media_token"]

_MEDIA_TOKENS: dict[str, str] = {
    "max-width: 42em": "narrow",
    "max-width: 62em": "midsize",
}
_TOKEN_MEDIA: dict[str, Media] = {
    "narrow": Media.NARROW,
    "midsize": Media.MIDSIZE,
}
_MEDIA_SEPARATOR = "."


@dataclass(frozen=True)
class SheetRole:
    role: Role = DEFAULT_ROLE
    media: tuple[Media, ...] = DEFAULT_MEDIA
    ie_condition: IECondition | None = None

    @classmethod
    def for_skin(cls, skin: Skin) -> SheetRole:
        return cls(skin.effective_role, skin.effective_media, skin.ie_condition)

    @property
    def token(self) -> str:
        return encode_sheet_role(self.role, self.media, self.ie_condition)

    @property
    def media_attribute(self) -> str:
        return ", ".join(m.value for m in self.media)


def media_token(media: Media | str) -> str:
    for needle, token in _MEDIA_TOKENS.items():
        if needle in media:
            return token
    return str(media)


def encode_sheet_role(
    role: Role | str | None,
    media: tuple[Media, ...] | list[str] | None = None,
    ie_condition: IECondition | str | None = None,
) -> str:
    """Encode a sheet role as ``role_media_ie``.

    A missing role or media list falls back to the defaults; a missing IE
    condition leaves the last field empty.
    """
    media_part = _MEDIA_SEPARATOR.join(media_token(m) for m in (media or DEFAULT_MEDIA))
    return f"{role or DEFAULT_ROLE}_{media_part}_{ie_condition or ''}"


def decode_sheet_role(token: str) -> SheetRole:
    """Inverse of :func:`encode_sheet_role`.

    Only the first two underscores separate fields, so IE conditions such as
    ``IE8_or_lower`` come back intact.
    """
    parts = token.split("_", 2)
    if len(parts) != 3:
        raise SheetRoleError(token, "expected role_media_iecondition")
    role_part, media_part, ie_part = parts

    try:
        role = Role(role_part)
    except ValueError:
        raise SheetRoleError(token, f"unknown role {role_part!r}") from None

    if not media_part:
        raise SheetRoleError(token, "empty media list")
    media: list[Media] = []
    for entry in media_part.split(_MEDIA_SEPARATOR):
        if entry in _TOKEN_MEDIA:
            media.append(_TOKEN_MEDIA[entry])
            continue
        try:
            media.append(Media(entry))
        except ValueError:
            raise SheetRoleError(token, f"unknown media {entry!r}") from None

    ie_condition: IECondition | None = None
    if ie_part:
        try:
            ie_condition = IECondition(ie_part)
        except ValueError:
            raise SheetRoleError(token, f"unknown IE condition {ie_part!r}") from None

    return SheetRole(role=role, media=tuple(media), ie_condition=ie_condition)
