"""Pre-built cascades: one directory of numbered CSS segment files per skin.

A segment file is named ``<n>_<sheet role token>.css``. Consecutive skins in
a cascade that share a sheet role are merged into one segment, so a skin's
whole cascade usually fits in a handful of files.
"""

from __future__ import annotations

import logging
import re
import shutil
import tempfile
import threading
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from skincascade.errors import SheetRoleError
from skincascade.model.skin import Role, Skin
from skincascade.naturalsort import dir_entries
from skincascade.render.markup import ie_comment, stylesheet_link
from skincascade.render.wizard import wizard_css
from skincascade.sheet_role import SheetRole, decode_sheet_role

logger = logging.getLogger(__name__)

SEGMENT_RE = re.compile(r"^(\d+)_(.*)\.css$")


@dataclass(frozen=True)
class CacheSegment:
    filename: str
    sequence: int
    sheet_role: SheetRole


def contributed_css(skin: Skin, public_root: str | Path) -> str:
    """Raw CSS a skin adds to a cascade: its file, else its CSS, else wizard output."""
    if skin.filename:
        path = Path(public_root) / skin.filename.lstrip("/")
        return path.read_text(encoding="utf-8")
    if skin.css:
        return skin.css
    return wizard_css(skin.wizard)


class FileCache:
    """Writes, lists and links the segment files of cached skins.

    Builds for the same skin id are serialised by a per-skin lock and written
    to a temporary sibling directory that replaces the live one only once
    every segment is on disk.
    """

    def __init__(
        self,
        skins_dir: str | Path,
        skin_path: str = "/stylesheets/skins/",
        public_root: str | Path = "public",
    ) -> None:
        self.skins_dir = Path(skins_dir)
        self.skin_path = skin_path if skin_path.endswith("/") else skin_path + "/"
        self.public_root = Path(public_root)
        self._locks: dict[int, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # --- paths ----------------------------------------------------------------

    def directory(self, skin: Skin) -> Path:
        return self.skins_dir / skin.dirname

    def url(self, skin: Skin, filename: str) -> str:
        return f"{self.skin_path}{skin.dirname}/{filename}"

    # --- writer ---------------------------------------------------------------

    def build(self, skin: Skin, cascade: Iterable[Skin]) -> list[Path]:
        """Write *cascade* (ancestors then *skin*) as segment files.

        Returns the paths of the written segments in order. Any error leaves
        the previously cached files in place.
        """
        target = self.directory(skin)
        with self._lock_for(skin):
            self.skins_dir.mkdir(parents=True, exist_ok=True)
            staging = Path(tempfile.mkdtemp(prefix=f".{target.name}-", dir=self.skins_dir))
            try:
                names = self._write_segments(staging, cascade)
                self._swap(staging, target)
            except BaseException:
                shutil.rmtree(staging, ignore_errors=True)
                raise
        logger.info("Cached skin %s into %d segment(s) at %s", skin.id, len(names), target)
        return [target / name for name in names]

    def _write_segments(self, directory: Path, cascade: Iterable[Skin]) -> list[str]:
        names: list[str] = []
        pending = ""
        last_token = ""
        for next_skin in cascade:
            token = SheetRole.for_skin(next_skin).token
            if token != last_token:
                if pending:
                    names.append(self._flush(directory, len(names) + 1, last_token, pending))
                    pending = ""
                last_token = token
            pending += contributed_css(next_skin, self.public_root)
        if pending:
            names.append(self._flush(directory, len(names) + 1, last_token, pending))
        return names

    @staticmethod
    def _flush(directory: Path, sequence: int, token: str, css: str) -> str:
        name = f"{sequence}_{token}.css"
        (directory / name).write_text(css, encoding="utf-8")
        return name

    @staticmethod
    def _swap(staging: Path, target: Path) -> None:
        if target.exists():
            retired = target.with_name(f".{target.name}-old-{uuid.uuid4().hex[:8]}")
            target.rename(retired)
            staging.rename(target)
            shutil.rmtree(retired)
        else:
            staging.rename(target)

    def clear(self, skin: Skin) -> None:
        """Remove the skin's cache directory; missing directories are fine."""
        target = self.directory(skin)
        with self._lock_for(skin):
            if target.exists():
                shutil.rmtree(target)
                logger.info("Cleared cache for skin %s at %s", skin.id, target)

    # --- reader ---------------------------------------------------------------

    def segments(self, skin: Skin) -> list[CacheSegment]:
        """Decoded segments of a cached skin in natural filename order.

        Files whose sheet role cannot be decoded are logged and skipped.
        """
        found: list[CacheSegment] = []
        for name in dir_entries(self.directory(skin), SEGMENT_RE):
            match = SEGMENT_RE.match(name)
            assert match is not None
            try:
                sheet_role = decode_sheet_role(match.group(2))
            except SheetRoleError as exc:
                logger.warning("Skipping cache segment %s of skin %s: %s", name, skin.id, exc)
                continue
            found.append(CacheSegment(name, int(match.group(1)), sheet_role))
        return found

    def read(self, skin: Skin, roles_to_include: Iterable[Role]) -> str:
        """Link markup for every cached segment whose role is included."""
        roles = set(roles_to_include)
        block = ""
        for segment in self.segments(skin):
            if segment.sheet_role.role not in roles:
                continue
            link = stylesheet_link(self.url(skin, segment.filename), segment.sheet_role.media_attribute)
            block += ie_comment(link, segment.sheet_role.ie_condition) + "\n"
        return block

    def _lock_for(self, skin: Skin) -> threading.Lock:
        if skin.id is None:
            raise ValueError(f"Skin {skin.title!r} has not been stored yet")
        with self._locks_guard:
            return self._locks.setdefault(skin.id, threading.Lock())
