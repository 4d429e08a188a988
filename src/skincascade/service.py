"""SkinService: wires the store, the in-memory graph, the resolver and the file cache."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from skincascade.config import SkinConfig
from skincascade.errors import SkinCycleError, SkinNotFoundError
from skincascade.events import EventBus, ParentsChanged, SettingsChanged, SkinDeleted, SkinSaved
from skincascade.file_cache import FileCache
from skincascade.graph import SkinGraph
from skincascade.importer import PREVIEW_NAME, SiteSkinImporter, current_version, version_title
from skincascade.model.parent import SkinParent
from skincascade.model.skin import DEFAULT_ROLES_TO_INCLUDE, Role, Skin
from skincascade.resolver import CascadeResolver
from skincascade.store.db import Database
from skincascade.store.migrations import run_migrations
from skincascade.store.repositories import (
    SettingsRepository,
    SkinParentRepository,
    SkinRepository,
)

logger = logging.getLogger(__name__)

DEFAULT_SKIN_TITLE = "Default"

# Fields whose change alters what a skin contributes to a cascade.
_CONTENT_FIELDS = ("title", "css", "filename", "media", "ie_condition", "role", "wizard")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SkinService:
    """Entry point for every skin operation.

    Writes go to the database first, then to the in-memory graph, then out as
    events so the resolver can drop memoised markup.
    """

    def __init__(self, config: SkinConfig, *, event_bus: EventBus | None = None) -> None:
        self.config = config
        self.event_bus = event_bus or EventBus()
        self._db: Database | None = None
        self._skins: SkinRepository | None = None
        self._parents: SkinParentRepository | None = None
        self._settings: SettingsRepository | None = None
        self._graph: SkinGraph | None = None
        self._file_cache: FileCache | None = None
        self._resolver: CascadeResolver | None = None

    def initialize(self) -> None:
        """Open the database, create tables and load the skin graph."""
        self._db = Database(self.config.db_path)
        self._db.connect()
        run_migrations(self._db)
        self._skins = SkinRepository(self._db)
        self._parents = SkinParentRepository(self._db)
        self._settings = SettingsRepository(self._db)
        self._graph = SkinGraph.build(
            self._skins.list_all(),
            self._parents.list_all(),
            max_depth=self.config.max_ancestor_depth,
        )
        self._file_cache = FileCache(
            self.config.skins_dir,
            skin_path=self.config.skin_path,
            public_root=self.config.public_root,
        )
        self._resolver = CascadeResolver(
            self._graph, self._file_cache, wrapper=self.site_wrapper
        )
        self._resolver.subscribe(self.event_bus)

    def close(self) -> None:
        if self._db:
            self._db.close()
            self._db = None

    def __enter__(self) -> SkinService:
        self.initialize()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # --- components -----------------------------------------------------------

    @property
    def skins(self) -> SkinRepository:
        assert self._skins is not None, "Service not initialized -- call initialize() first"
        return self._skins

    @property
    def parents(self) -> SkinParentRepository:
        assert self._parents is not None, "Service not initialized -- call initialize() first"
        return self._parents

    @property
    def settings(self) -> SettingsRepository:
        assert self._settings is not None, "Service not initialized -- call initialize() first"
        return self._settings

    @property
    def graph(self) -> SkinGraph:
        assert self._graph is not None, "Service not initialized -- call initialize() first"
        return self._graph

    @property
    def file_cache(self) -> FileCache:
        assert self._file_cache is not None, "Service not initialized -- call initialize() first"
        return self._file_cache

    @property
    def resolver(self) -> CascadeResolver:
        assert self._resolver is not None, "Service not initialized -- call initialize() first"
        return self._resolver

    # --- skins ----------------------------------------------------------------

    def get_skin(self, skin_id: int) -> Skin:
        skin = self.skins.get(skin_id)
        if skin is None:
            raise SkinNotFoundError(skin_id)
        return skin

    def find_skin(self, title: str, official: bool | None = None) -> Skin | None:
        return self.skins.find_by_title(title, official=official)

    def create_skin(self, skin: Skin) -> Skin:
        created = self.skins.create(replace(skin, id=None, cached=False, updated_at=_now()))
        assert created.id is not None
        self.graph.add(created)
        self.event_bus.emit(SkinSaved(created.id))
        return created

    def update_skin(self, skin: Skin) -> Skin:
        """Save edits to an existing skin.

        When the edit changes what the skin contributes, stale cache files of
        the skin and of every cached skin inheriting from it are cleared.
        """
        assert skin.id is not None, "Cannot update a skin without an id"
        previous = self.get_skin(skin.id)
        content_changed = any(
            getattr(previous, name) != getattr(skin, name) for name in _CONTENT_FIELDS
        )
        if content_changed and previous.cached:
            # The directory name follows the title, so clear under the old record.
            self.file_cache.clear(previous)
        skin = replace(skin, cached=previous.cached and not content_changed)
        updated = self.skins.update(replace(skin, updated_at=_now()))
        self.graph.add(updated)
        if content_changed:
            self._clear_descendant_caches(skin.id)
        self.event_bus.emit(SkinSaved(skin.id))
        return updated

    def delete_skin(self, skin_id: int) -> None:
        skin = self.get_skin(skin_id)
        descendants = frozenset(self.graph.descendants(skin_id))
        wrapper = self.site_wrapper()
        if skin.cached:
            self.file_cache.clear(skin)
        self._clear_descendant_caches(skin_id)
        self.skins.delete(skin_id)
        self.graph.remove(skin_id)
        if self.settings.get_default_skin_id() == skin_id:
            self.settings.set_default_skin_id(None)
        self.event_bus.emit(SkinDeleted(skin_id, descendants))
        if wrapper is not None and wrapper.id == skin_id:
            self.event_bus.emit(SettingsChanged("site_wrapper"))
        logger.info("Deleted skin %s (%s)", skin_id, skin.title)

    def list_skins(self) -> tuple[Skin, ...]:
        return self.skins.list_all()

    # --- parents --------------------------------------------------------------

    def set_parents(self, child_id: int, parent_ids: Iterable[int | None]) -> list[SkinParent]:
        """Replace the parents of *child_id* with *parent_ids* at positions 1..N."""
        self.get_skin(child_id)
        ids = [p for p in parent_ids if p is not None]
        for parent_id in ids:
            self._check_link(child_id, parent_id)
        self.parents.delete_for_child(child_id)
        self.graph.clear_parents(child_id)
        links: list[SkinParent] = []
        for position, parent_id in enumerate(ids, start=1):
            link = SkinParent(child_skin_id=child_id, parent_skin_id=parent_id, position=position)
            self.parents.add(link)
            self.graph.link(child_id, parent_id, position)
            links.append(link)
        self._parents_changed(child_id)
        return links

    def add_parent(self, child_id: int, parent_id: int, position: int | None = None) -> SkinParent:
        """Link *parent_id* under *child_id*; by default after the existing parents."""
        self.get_skin(child_id)
        self._check_link(child_id, parent_id)
        if position is None:
            existing = self.parents.list_for_child(child_id)
            position = existing[-1].position + 1 if existing else 1
        link = SkinParent(child_skin_id=child_id, parent_skin_id=parent_id, position=position)
        self.parents.add(link)
        self.graph.link(child_id, parent_id, position)
        self._parents_changed(child_id)
        return link

    def remove_parent(self, child_id: int, parent_id: int) -> None:
        self.parents.remove(child_id, parent_id)
        self.graph.unlink(child_id, parent_id)
        self._parents_changed(child_id)

    def _check_link(self, child_id: int, parent_id: int) -> None:
        parent = self.get_skin(parent_id)
        ancestor_ids = [a.id for a in self.graph.all_ancestors(parent_id)]
        if parent.id == child_id or child_id in ancestor_ids:
            raise SkinCycleError([child_id, parent_id, child_id])

    def _parents_changed(self, child_id: int) -> None:
        child = self.get_skin(child_id)
        if child.cached:
            self.clear_cache(child_id)
        self._clear_descendant_caches(child_id)
        self.event_bus.emit(ParentsChanged(child_id))

    def _clear_descendant_caches(self, skin_id: int) -> None:
        for descendant_id in self.graph.descendants(skin_id):
            if self.graph.get(descendant_id).cached:
                self.clear_cache(descendant_id)

    # --- rendering ------------------------------------------------------------

    def style(
        self, skin_id: int, roles_to_include: Iterable[Role | str] = DEFAULT_ROLES_TO_INCLUDE
    ) -> str:
        """Markup to embed in a page for *skin_id*."""
        return self.resolver.resolve(skin_id, roles_to_include)

    # --- file cache -----------------------------------------------------------

    def cache_skin(self, skin_id: int) -> Skin:
        """Write the skin's whole cascade to segment files and mark it cached.

        Cached skins become public and official. Errors propagate and leave
        the skin's flags as they were.
        """
        skin = self.get_skin(skin_id)
        self.file_cache.build(skin, self.graph.cascade(skin_id))
        self.skins.set_flags(skin_id, cached=True, public=True, official=True)
        return self._reload(skin_id)

    def clear_cache(self, skin_id: int) -> Skin:
        """Delete the skin's segment files and mark it uncached. Safe to repeat."""
        skin = self.get_skin(skin_id)
        self.file_cache.clear(skin)
        self.skins.set_flags(skin_id, cached=False)
        return self._reload(skin_id)

    def rebuild_cached(self) -> list[Skin]:
        """Rebuild the files of every cached skin."""
        return [self.cache_skin(skin.id) for skin in self.skins.list_cached()]

    def _reload(self, skin_id: int) -> Skin:
        skin = self.get_skin(skin_id)
        self.graph.add(skin)
        self.event_bus.emit(SkinSaved(skin_id))
        return skin

    # --- site skins -----------------------------------------------------------

    def default_skin(self) -> Skin:
        """The official ``Default`` skin, created on first use."""
        skin = self.find_skin(DEFAULT_SKIN_TITLE, official=True)
        if skin is not None:
            return skin
        version = current_version(self.config.site_skins_dir)
        preview_dir = self.config.site_skins_dir / version if version else self.config.site_skins_dir
        preview = Path(preview_dir) / PREVIEW_NAME
        return self.create_skin(
            Skin(
                title=DEFAULT_SKIN_TITLE,
                css="",
                public=True,
                official=True,
                role=Role.USER,
                icon_path=str(preview) if preview.exists() else "",
            )
        )

    def set_default_skin(self, skin_id: int | None) -> None:
        """Make *skin_id* the site-wide default that wraps user skins."""
        if skin_id is not None:
            self.get_skin(skin_id)
        self.settings.set_default_skin_id(skin_id)
        self.event_bus.emit(SettingsChanged(SettingsRepository.DEFAULT_SKIN_ID))

    def configured_default_skin(self) -> Skin | None:
        skin_id = self.settings.get_default_skin_id()
        return self.skins.get(skin_id) if skin_id is not None else None

    def current_site_skin(self) -> Skin | None:
        version = current_version(self.config.site_skins_dir)
        if version is None:
            return None
        return self.find_skin(version_title(version), official=True)

    def site_wrapper(self) -> Skin | None:
        """The skin wrapped around every user skin.

        A configured default that is not the plain ``Default`` skin wins;
        otherwise the current site version's umbrella skin, if imported.
        """
        configured = self.configured_default_skin()
        plain = self.find_skin(DEFAULT_SKIN_TITLE, official=True)
        if configured is not None and (plain is None or configured.id != plain.id):
            return configured
        return self.current_site_skin()

    def import_site_skins(self) -> list[Skin]:
        umbrellas = SiteSkinImporter(self).load()
        self.event_bus.emit(SettingsChanged("site_version"))
        return umbrellas
