from __future__ import annotations

from skincascade.store.db import Database
from skincascade.store.migrations import run_migrations
from skincascade.store.repositories import (
    SettingsRepository,
    SkinParentRepository,
    SkinRepository,
)

__all__ = [
    "Database",
    "run_migrations",
    "SkinRepository",
    "SkinParentRepository",
    "SettingsRepository",
]
