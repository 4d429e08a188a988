from __future__ import annotations

import pytest

from skincascade.config import SkinConfig
from skincascade.service import SkinService


@pytest.fixture
def config(tmp_path) -> SkinConfig:
    public_root = tmp_path / "public"
    public_root.mkdir()
    return SkinConfig(db_path=":memory:", public_root=str(public_root))


@pytest.fixture
def service(config: SkinConfig) -> SkinService:
    """A service over a fresh in-memory database for each test."""
    svc = SkinService(config)
    svc.initialize()
    yield svc
    svc.close()
