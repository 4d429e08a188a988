from __future__ import annotations

from pathlib import Path

import pytest

from skincascade.config import SkinConfig
from skincascade.importer import (
    SheetDirectives,
    current_version,
    parse_directives,
    site_versions,
    version_title,
)
from skincascade.model.skin import IECondition, Media, Role, Skin
from skincascade.service import SkinService


def _write_version(site_dir: Path, version: str, files: dict[str, str]) -> Path:
    version_dir = site_dir / version
    version_dir.mkdir(parents=True, exist_ok=True)
    for name, body in files.items():
        (version_dir / name).write_text(body)
    return version_dir


# ---------------------------------------------------------------------------
# Directives
# ---------------------------------------------------------------------------


class TestParseDirectives:
    def test_defaults(self):
        assert parse_directives("body { color: red; }") == SheetDirectives()
        assert SheetDirectives().role is Role.SITE
        assert SheetDirectives().media == (Media.SCREEN,)

    def test_all_directives(self):
        line = "/* ROLE: override MEDIA: screen, print ENDMEDIA IE_CONDITION: IE8_or_lower */"
        directives = parse_directives(line)
        assert directives.role is Role.OVERRIDE
        assert directives.media == (Media.SCREEN, Media.PRINT)
        assert directives.ie_condition is IECondition.IE8_OR_LOWER

    def test_media_query_list(self):
        directives = parse_directives("/* MEDIA: only screen and (max-width: 42em) ENDMEDIA */")
        assert directives.media == (Media.NARROW,)

    def test_single_media_word(self):
        assert parse_directives("/* MEDIA: print */").media == (Media.PRINT,)

    def test_unknown_value_is_rejected(self):
        with pytest.raises(ValueError):
            parse_directives("/* ROLE: wizard */")


class TestVersions:
    def test_versions_sort_naturally(self, tmp_path):
        for name in ("1.9", "1.10", "1.2", "notes", "2.0"):
            (tmp_path / name).mkdir()
        assert site_versions(tmp_path) == ["1.2", "1.9", "1.10", "2.0"]
        assert current_version(tmp_path) == "2.0"

    def test_no_versions(self, tmp_path):
        assert current_version(tmp_path / "missing") is None

    def test_version_title(self):
        assert version_title("2.0") == "Archive 2.0"


# ---------------------------------------------------------------------------
# Import through the service
# ---------------------------------------------------------------------------


class TestSiteImport:
    def test_import_creates_components_and_umbrella(self, service: SkinService):
        _write_version(
            service.config.site_skins_dir,
            "2.0",
            {
                "10-zone_system.css": "/* ROLE: override */\n.z{}",
                "1-core.css": ".core{}",
                "2-narrow.css": "/* MEDIA: only screen and (max-width: 42em) ENDMEDIA */\n.n{}",
                "readme.txt": "ignored",
            },
        )
        (umbrella,) = service.import_site_skins()
        assert umbrella.title == "Archive 2.0"
        assert umbrella.role is Role.SITE
        assert umbrella.official

        parents = [service.get_skin(p.parent_skin_id) for p in service.parents.list_for_child(umbrella.id)]
        assert [p.title for p in parents] == [
            "Archive 2.0: (1) core",
            "Archive 2.0: (2) narrow",
            "Archive 2.0: (10) zone system",
        ]
        assert parents[0].filename == "/stylesheets/site/2.0/1-core.css"
        assert parents[1].media == (Media.NARROW,)
        assert parents[2].role is Role.OVERRIDE
        assert all(p.official and p.unusable for p in parents)

    def test_reimport_updates_in_place(self, service: SkinService):
        version_dir = _write_version(service.config.site_skins_dir, "2.0", {"1-core.css": ".a{}"})
        (first,) = service.import_site_skins()
        (version_dir / "1-core.css").write_text("/* MEDIA: print */\n.b{}")
        (second,) = service.import_site_skins()
        assert second.id == first.id
        core = service.find_skin("Archive 2.0: (1) core")
        assert core.media == (Media.PRINT,)
        assert len(service.list_skins()) == 2

    def test_current_site_skin_wraps_user_skins(self, service: SkinService):
        _write_version(service.config.site_skins_dir, "1.0", {"1-old.css": ".old{}"})
        _write_version(service.config.site_skins_dir, "2.0", {"1-core.css": ".core{}"})
        service.import_site_skins()
        assert service.current_site_skin().title == "Archive 2.0"

        mine = service.create_skin(Skin(title="Mine", css=".mine{}"))
        markup = service.style(mine.id)
        assert markup.index("/stylesheets/site/2.0/1-core.css") < markup.index(".mine{}")
        assert "1.0" not in markup

    def test_production_import_caches_umbrella(self, tmp_path):
        public_root = tmp_path / "public"
        config = SkinConfig(db_path=":memory:", public_root=str(public_root), environment="production")
        _write_version(config.site_skins_dir, "2.0", {"1-core.css": ".core{}"})
        with SkinService(config) as service:
            (umbrella,) = service.import_site_skins()
            assert umbrella.cached
            files = sorted(p.name for p in service.file_cache.directory(umbrella).iterdir())
            assert files == ["1_site_screen_.css"]
            assert (service.file_cache.directory(umbrella) / files[0]).read_text() == ".core{}"
