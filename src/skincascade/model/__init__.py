from __future__ import annotations

from skincascade.model.parent import SkinParent
from skincascade.model.skin import (
    DEFAULT_MEDIA,
    DEFAULT_ROLE,
    DEFAULT_ROLES_TO_INCLUDE,
    IECondition,
    Media,
    Role,
    Skin,
    WizardSettings,
)

__all__ = [
    # enums
    "Role",
    "Media",
    "IECondition",
    "DEFAULT_ROLE",
    "DEFAULT_ROLES_TO_INCLUDE",
    "DEFAULT_MEDIA",
    # skin
    "WizardSettings",
    "Skin",
    # links
    "SkinParent",
]
