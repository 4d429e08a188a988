"""Import of the archive's own site skins from versioned directories.

Layout::

    <site dir>/
        2.0/
            1-core.css
            2-layout_narrow.css
            preview.png

Each ``<position>-<title>.css`` becomes an official skin; an umbrella skin
``Archive <version>`` inherits from all of them in file order. The first
line of a file may carry directives::

    /* ROLE: site MEDIA: screen, print ENDMEDIA IE_CONDITION: IE8_or_lower */
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING

from skincascade.model.skin import IECondition, Media, Role, Skin
from skincascade.naturalsort import dir_entries

if TYPE_CHECKING:
    from skincascade.service import SkinService

logger = logging.getLogger(__name__)

VERSION_RE = re.compile(r"^\d+\.\d+$")
SITE_FILE_RE = re.compile(r"^(\d+)-(.*)\.css")

_ROLE_RE = re.compile(r"ROLE: (\w+)")
_MEDIA_LIST_RE = re.compile(r"MEDIA: (.*?) ENDMEDIA")
_MEDIA_WORD_RE = re.compile(r"MEDIA: (\w+)")
_IE_RE = re.compile(r"IE_CONDITION: (\w+)")

PREVIEW_NAME = "preview.png"


@dataclass(frozen=True)
class SheetDirectives:
    role: Role = Role.SITE
    media: tuple[Media, ...] = (Media.SCREEN,)
    ie_condition: IECondition | None = None


def parse_directives(first_line: str) -> SheetDirectives:
    """Read ROLE, MEDIA and IE_CONDITION directives from a stylesheet's first line."""
    role = Role.SITE
    media: tuple[Media, ...] = (Media.SCREEN,)
    ie_condition: IECondition | None = None

    match = _ROLE_RE.search(first_line)
    if match:
        role = Role(match.group(1))
    match = _MEDIA_LIST_RE.search(first_line)
    if match:
        media = tuple(Media(m) for m in re.split(r",\s?", match.group(1)))
    else:
        match = _MEDIA_WORD_RE.search(first_line)
        if match:
            media = (Media(match.group(1)),)
    match = _IE_RE.search(first_line)
    if match:
        ie_condition = IECondition(match.group(1))
    return SheetDirectives(role=role, media=media, ie_condition=ie_condition)


def site_versions(site_dir: str | Path) -> list[str]:
    return dir_entries(site_dir, VERSION_RE)


def current_version(site_dir: str | Path) -> str | None:
    """The newest site version directory name, e.g. ``"2.0"``."""
    versions = site_versions(site_dir)
    return versions[-1] if versions else None


def version_title(version: str) -> str:
    return f"Archive {version}"


def _first_line(path: Path) -> str:
    with path.open(encoding="utf-8") as fh:
        return fh.readline()


class SiteSkinImporter:
    """Creates or refreshes one skin per site stylesheet plus a umbrella skin per version."""

    def __init__(self, service: SkinService) -> None:
        self._service = service
        self._config = service.config

    def load(self) -> list[Skin]:
        """Import every version under the public site skin directory; returns the umbrella skins.

        Component filenames are URL paths under ``site_skin_path``, so versions
        are only read from the matching directory below ``public_root``.
        """
        root = self._config.site_skins_dir
        umbrellas: list[Skin] = []
        for version in site_versions(root):
            version_dir = root / version
            if version_dir.is_dir():
                umbrellas.append(self.load_version(version_dir))
        return umbrellas

    def load_version(self, version_dir: Path) -> Skin:
        version = version_dir.name
        preview = version_dir / PREVIEW_NAME
        icon_path = str(preview) if preview.exists() else ""

        components: list[Skin] = []
        for skin_file in dir_entries(version_dir, SITE_FILE_RE):
            match = SITE_FILE_RE.match(skin_file)
            assert match is not None
            position = int(match.group(1))
            title = re.sub(r"[-_]", " ", match.group(2))
            directives = parse_directives(_first_line(version_dir / skin_file))
            components.append(
                self._upsert(
                    Skin(
                        title=f"{version_title(version)}: ({position}) {title}",
                        filename=f"{self._config.site_skin_path}{version}/{skin_file}",
                        description=(
                            f"Version {version} of the {title} component ({position}) "
                            "of the default archive site design."
                        ),
                        public=True,
                        official=True,
                        unusable=True,
                        media=directives.media,
                        role=directives.role,
                        ie_condition=directives.ie_condition,
                        icon_path=icon_path,
                    )
                )
            )

        umbrella = self._service.find_skin(version_title(version))
        if umbrella is None:
            umbrella = self._service.create_skin(
                Skin(
                    title=version_title(version),
                    css="",
                    description=f"Version {version} of the default Archive style.",
                    public=True,
                    official=True,
                    role=Role.SITE,
                    media=(Media.SCREEN,),
                    icon_path=icon_path,
                )
            )
        else:
            if umbrella.cached:
                umbrella = self._service.clear_cache(umbrella.id)
            umbrella = self._service.update_skin(
                replace(umbrella, official=True, icon_path=icon_path)
            )
        assert umbrella.id is not None
        self._service.set_parents(umbrella.id, [skin.id for skin in components])
        logger.info(
            "Imported site version %s with %d component skin(s)", version, len(components)
        )
        if self._config.is_production_like:
            umbrella = self._service.cache_skin(umbrella.id)
        return umbrella

    def _upsert(self, imported: Skin) -> Skin:
        existing = self._service.find_skin(imported.title)
        if existing is None:
            return self._service.create_skin(imported)
        return self._service.update_skin(
            replace(
                existing,
                filename=imported.filename,
                description=imported.description,
                public=True,
                official=True,
                unusable=True,
                media=imported.media,
                role=imported.role,
                ie_condition=imported.ie_condition,
                icon_path=imported.icon_path,
            )
        )
