from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

PRODUCTION_LIKE_ENVIRONMENTS = ("staging", "production")


@dataclass(frozen=True)
class SkinConfig:
    db_path: str = "skins.db"
    public_root: str = "public"
    skin_path: str = "/stylesheets/skins/"  # URL path of cached skin directories
    site_skin_path: str = "/stylesheets/site/"  # URL path of imported site versions
    environment: str = "development"
    max_ancestor_depth: int = 64

    @property
    def skins_dir(self) -> Path:
        return Path(self.public_root) / self.skin_path.strip("/")

    @property
    def site_skins_dir(self) -> Path:
        return Path(self.public_root) / self.site_skin_path.strip("/")

    @property
    def is_production_like(self) -> bool:
        return self.environment in PRODUCTION_LIKE_ENVIRONMENTS
