from __future__ import annotations

import json
import sqlite3

from skincascade.errors import DuplicatePositionError, DuplicateTitleError
from skincascade.model.parent import SkinParent
from skincascade.model.skin import Skin, WizardSettings
from skincascade.store.db import Database

_SKIN_COLUMNS = (
    "title",
    "css",
    "filename",
    "description",
    "media",
    "ie_condition",
    "role",
    "cached",
    "public",
    "official",
    "rejected",
    "featured",
    "in_chooser",
    "unusable",
    "author_id",
    "icon_path",
    "updated_at",
    "margin",
    "base_em",
    "font",
    "background_color",
    "paragraph_margin",
    "foreground_color",
    "headercolor",
    "accent_color",
)

_FLAG_COLUMNS = {
    "cached",
    "public",
    "official",
    "rejected",
    "featured",
    "in_chooser",
    "unusable",
}


class SkinRepository:
    """Repository for Skin persistence."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def create(self, skin: Skin) -> Skin:
        """Insert a new skin and return it with its assigned id."""
        placeholders = ", ".join("?" for _ in _SKIN_COLUMNS)
        try:
            cursor = self._db.execute(
                f"INSERT INTO skins ({', '.join(_SKIN_COLUMNS)}) VALUES ({placeholders})",  # noqa: S608
                _skin_to_row(skin),
            )
        except sqlite3.IntegrityError as exc:
            raise DuplicateTitleError(skin.title) from exc
        self._db.commit()
        created = self.get(cursor.lastrowid)
        assert created is not None
        return created

    def update(self, skin: Skin) -> Skin:
        """Write every column of an existing skin."""
        assert skin.id is not None, "Cannot update a skin without an id"
        assignments = ", ".join(f"{c} = ?" for c in _SKIN_COLUMNS)
        try:
            self._db.execute(
                f"UPDATE skins SET {assignments} WHERE id = ?",  # noqa: S608
                (*_skin_to_row(skin), skin.id),
            )
        except sqlite3.IntegrityError as exc:
            raise DuplicateTitleError(skin.title) from exc
        self._db.commit()
        return skin

    def set_flags(self, skin_id: int, **flags: bool) -> None:
        """Update boolean flags such as ``cached`` or ``official``."""
        unknown = set(flags) - _FLAG_COLUMNS
        if unknown:
            raise ValueError(
                f"Fields {sorted(unknown)!r} not in allowed flags: {sorted(_FLAG_COLUMNS)}"
            )
        if not flags:
            return
        assignments = ", ".join(f"{name} = ?" for name in flags)
        self._db.execute(
            f"UPDATE skins SET {assignments} WHERE id = ?",  # noqa: S608
            (*(int(bool(v)) for v in flags.values()), skin_id),
        )
        self._db.commit()

    def delete(self, skin_id: int) -> None:
        """Delete a skin; its parent and child links go with it."""
        self._db.execute("DELETE FROM skins WHERE id = ?", (skin_id,))
        self._db.commit()

    def get(self, skin_id: int) -> Skin | None:
        """Retrieve a skin by ID, or None if not found."""
        row = self._db.fetch_one("SELECT * FROM skins WHERE id = ?", (skin_id,))
        if row is None:
            return None
        return _row_to_skin(row)

    def get_by_title(self, title: str) -> Skin | None:
        row = self._db.fetch_one("SELECT * FROM skins WHERE title = ?", (title,))
        if row is None:
            return None
        return _row_to_skin(row)

    def find_by_title(self, title: str, official: bool | None = None) -> Skin | None:
        skin = self.get_by_title(title)
        if skin is None or (official is not None and skin.official != official):
            return None
        return skin

    def list_all(self) -> tuple[Skin, ...]:
        return self._list("1 = 1", order="id ASC")

    def list_public(self) -> tuple[Skin, ...]:
        return self._list("public = 1")

    def list_approved(self) -> tuple[Skin, ...]:
        return self._list("public = 1 AND official = 1")

    def list_unapproved(self) -> tuple[Skin, ...]:
        return self._list("public = 1 AND official = 0 AND rejected = 0")

    def list_rejected(self) -> tuple[Skin, ...]:
        return self._list("public = 1 AND official = 0 AND rejected = 1")

    def list_cached(self) -> tuple[Skin, ...]:
        return self._list("cached = 1", order="id ASC")

    def list_in_chooser(self) -> tuple[Skin, ...]:
        return self._list("in_chooser = 1")

    def list_featured(self) -> tuple[Skin, ...]:
        return self._list("featured = 1", order="featured DESC, updated_at DESC")

    def list_usable(self) -> tuple[Skin, ...]:
        return self._list("unusable = 0")

    def list_approved_or_owned_by(self, user_id: int | None) -> tuple[Skin, ...]:
        """Approved skins, plus the skins *user_id* wrote."""
        if user_id is None:
            return self.list_approved()
        return self._list("(public = 1 AND official = 1) OR author_id = ?", (user_id,))

    def _list(
        self, where: str, params: tuple = (), order: str = "updated_at DESC"
    ) -> tuple[Skin, ...]:
        rows = self._db.fetch_all(
            f"SELECT * FROM skins WHERE {where} ORDER BY {order}",  # noqa: S608
            params,
        )
        return tuple(_row_to_skin(r) for r in rows)


class SkinParentRepository:
    """Repository for ordered parent links."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def add(self, link: SkinParent) -> None:
        try:
            self._db.execute(
                """INSERT INTO skin_parents (child_skin_id, parent_skin_id, position)
                   VALUES (?, ?, ?)""",
                (link.child_skin_id, link.parent_skin_id, link.position),
            )
        except sqlite3.IntegrityError as exc:
            if "FOREIGN KEY" in str(exc):
                raise
            raise DuplicatePositionError(link.child_skin_id, link.position) from exc
        self._db.commit()

    def remove(self, child_skin_id: int, parent_skin_id: int) -> None:
        self._db.execute(
            "DELETE FROM skin_parents WHERE child_skin_id = ? AND parent_skin_id = ?",
            (child_skin_id, parent_skin_id),
        )
        self._db.commit()

    def delete_for_child(self, child_skin_id: int) -> None:
        self._db.execute(
            "DELETE FROM skin_parents WHERE child_skin_id = ?", (child_skin_id,)
        )
        self._db.commit()

    def list_for_child(self, child_skin_id: int) -> tuple[SkinParent, ...]:
        """Links of *child_skin_id*, lowest position first."""
        rows = self._db.fetch_all(
            "SELECT * FROM skin_parents WHERE child_skin_id = ? ORDER BY position ASC",
            (child_skin_id,),
        )
        return tuple(_row_to_parent(r) for r in rows)

    def list_all(self) -> tuple[SkinParent, ...]:
        rows = self._db.fetch_all(
            "SELECT * FROM skin_parents ORDER BY child_skin_id ASC, position ASC"
        )
        return tuple(_row_to_parent(r) for r in rows)


class SettingsRepository:
    """Site-wide string settings."""

    DEFAULT_SKIN_ID = "default_skin_id"

    def __init__(self, db: Database) -> None:
        self._db = db

    def get(self, key: str, default: str | None = None) -> str | None:
        row = self._db.fetch_one("SELECT value FROM settings WHERE key = ?", (key,))
        if row is None:
            return default
        return row["value"]

    def set(self, key: str, value: str) -> None:
        self._db.execute(
            """INSERT INTO settings (key, value) VALUES (?, ?)
               ON CONFLICT(key) DO UPDATE SET value = excluded.value""",
            (key, value),
        )
        self._db.commit()

    def delete(self, key: str) -> None:
        self._db.execute("DELETE FROM settings WHERE key = ?", (key,))
        self._db.commit()

    def get_default_skin_id(self) -> int | None:
        value = self.get(self.DEFAULT_SKIN_ID)
        return int(value) if value else None

    def set_default_skin_id(self, skin_id: int | None) -> None:
        if skin_id is None:
            self.delete(self.DEFAULT_SKIN_ID)
        else:
            self.set(self.DEFAULT_SKIN_ID, str(skin_id))


# ---------------------------------------------------------------------------
# Row-to-dataclass conversion helpers
# ---------------------------------------------------------------------------


def _skin_to_row(skin: Skin) -> tuple:
    wizard = skin.wizard
    return (
        skin.title,
        skin.css,
        skin.filename,
        skin.description,
        json.dumps([m.value for m in skin.media]),
        skin.ie_condition.value if skin.ie_condition else "",
        skin.role.value if skin.role else "",
        int(skin.cached),
        int(skin.public),
        int(skin.official),
        int(skin.rejected),
        int(skin.featured),
        int(skin.in_chooser),
        int(skin.unusable),
        skin.author_id,
        skin.icon_path,
        skin.updated_at,
        wizard.margin,
        wizard.base_em,
        wizard.font,
        wizard.background_color,
        wizard.paragraph_margin,
        wizard.foreground_color,
        wizard.headercolor,
        wizard.accent_color,
    )


def _row_to_skin(row: sqlite3.Row) -> Skin:
    return Skin(
        id=row["id"],
        title=row["title"],
        css=row["css"],
        filename=row["filename"],
        description=row["description"],
        media=tuple(json.loads(row["media"])),
        ie_condition=row["ie_condition"] or None,
        role=row["role"] or None,
        cached=bool(row["cached"]),
        public=bool(row["public"]),
        official=bool(row["official"]),
        rejected=bool(row["rejected"]),
        featured=bool(row["featured"]),
        in_chooser=bool(row["in_chooser"]),
        unusable=bool(row["unusable"]),
        author_id=row["author_id"],
        icon_path=row["icon_path"],
        updated_at=row["updated_at"],
        wizard=WizardSettings(
            margin=row["margin"],
            base_em=row["base_em"],
            font=row["font"],
            background_color=row["background_color"],
            paragraph_margin=row["paragraph_margin"],
            foreground_color=row["foreground_color"],
            headercolor=row["headercolor"],
            accent_color=row["accent_color"],
        ),
    )


def _row_to_parent(row: sqlite3.Row) -> SkinParent:
    return SkinParent(
        child_skin_id=row["child_skin_id"],
        parent_skin_id=row["parent_skin_id"],
        position=row["position"],
    )
