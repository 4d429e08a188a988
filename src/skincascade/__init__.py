"""skincascade: layered stylesheet skins resolved into page markup and cache files."""
from __future__ import annotations

from skincascade.config import SkinConfig
from skincascade.service import SkinService

__all__ = [
    "SkinConfig",
    "SkinService",
]
