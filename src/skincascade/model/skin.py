from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from enum import StrEnum


class Role(StrEnum):
    USER = "user"
    OVERRIDE = "override"
    # system roles, never offered to users
    ADMIN = "admin"
    TRANSLATOR = "translator"
    SITE = "site"


class Media(StrEnum):
    ALL = "all"
    SCREEN = "screen"
    HANDHELD = "handheld"
    SPEECH = "speech"
    PRINT = "print"
    BRAILLE = "braille"
    EMBOSSED = "embossed"
    PROJECTION = "projection"
    TTY = "tty"
    TV = "tv"
    NARROW = "only screen and (max-width: 42em)"
    MIDSIZE = "only screen and (max-width: 62em)"


class IECondition(StrEnum):
    IE = "IE"
    IE5 = "IE5"
    IE6 = "IE6"
    IE7 = "IE7"
    IE8 = "IE8"
    IE9 = "IE9"
    IE8_OR_LOWER = "IE8_or_lower"


DEFAULT_ROLE = Role.USER
DEFAULT_ROLES_TO_INCLUDE: frozenset[Role] = frozenset({Role.USER, Role.OVERRIDE, Role.SITE})
DEFAULT_MEDIA: tuple[Media, ...] = (Media.ALL,)

_NON_WORD_RE = re.compile(r"[^\w]", re.ASCII)


@dataclass(frozen=True)
class WizardSettings:
    """Scalar style knobs that synthesise CSS when a skin has none of its own."""

    margin: float | None = None
    base_em: float | None = None
    font: str = ""
    background_color: str = ""
    paragraph_margin: float | None = None
    foreground_color: str = ""
    headercolor: str = ""
    accent_color: str = ""

    def is_set(self) -> bool:
        return any(
            getattr(self, f.name) not in (None, "") for f in fields(self)
        )


@dataclass(frozen=True)
class Skin:
    title: str
    id: int | None = None
    css: str = ""
    filename: str = ""
    description: str = ""
    media: tuple[Media, ...] = ()
    ie_condition: IECondition | None = None
    role: Role | None = None
    cached: bool = False
    public: bool = False
    official: bool = False
    rejected: bool = False
    featured: bool = False
    in_chooser: bool = False
    unusable: bool = False
    author_id: int | None = None
    icon_path: str = ""
    updated_at: str = ""
    wizard: WizardSettings = field(default_factory=WizardSettings)

    def __post_init__(self) -> None:
        if not self.title:
            raise ValueError("Skin title must be a non-empty string")
        # Enumerated fields accept their string values; anything else is rejected here.
        object.__setattr__(self, "media", tuple(Media(m) for m in self.media or ()))
        if self.role is not None:
            object.__setattr__(self, "role", Role(self.role) if self.role else None)
        if self.ie_condition is not None:
            object.__setattr__(
                self,
                "ie_condition",
                IECondition(self.ie_condition) if self.ie_condition else None,
            )

    @property
    def effective_role(self) -> Role:
        return self.role or DEFAULT_ROLE

    @property
    def effective_media(self) -> tuple[Media, ...]:
        return self.media or DEFAULT_MEDIA

    def media_attribute(self, separator: str = ", ") -> str:
        return separator.join(m.value for m in self.effective_media)

    @property
    def has_wizard_settings(self) -> bool:
        return self.wizard.is_set()

    @property
    def dirname(self) -> str:
        """Name of this skin's cache directory, e.g. ``skin_4_my_skin``."""
        if self.id is None:
            raise ValueError(f"Skin {self.title!r} has not been stored yet")
        return f"skin_{self.id}_{_NON_WORD_RE.sub('_', self.title)}".lower()
