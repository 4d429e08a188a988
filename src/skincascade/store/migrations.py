from __future__ import annotations

from skincascade.store.db import Database

SCHEMA = """
CREATE TABLE IF NOT EXISTS skins (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL UNIQUE,
    css TEXT NOT NULL DEFAULT '',
    filename TEXT NOT NULL DEFAULT '',
    description TEXT NOT NULL DEFAULT '',
    media TEXT NOT NULL DEFAULT '[]',
    ie_condition TEXT NOT NULL DEFAULT '',
    role TEXT NOT NULL DEFAULT '',
    cached INTEGER NOT NULL DEFAULT 0,
    public INTEGER NOT NULL DEFAULT 0,
    official INTEGER NOT NULL DEFAULT 0,
    rejected INTEGER NOT NULL DEFAULT 0,
    featured INTEGER NOT NULL DEFAULT 0,
    in_chooser INTEGER NOT NULL DEFAULT 0,
    unusable INTEGER NOT NULL DEFAULT 0,
    author_id INTEGER,
    icon_path TEXT NOT NULL DEFAULT '',
    updated_at TEXT NOT NULL DEFAULT '',
    margin REAL,
    base_em REAL,
    font TEXT NOT NULL DEFAULT '',
    background_color TEXT NOT NULL DEFAULT '',
    paragraph_margin REAL,
    foreground_color TEXT NOT NULL DEFAULT '',
    headercolor TEXT NOT NULL DEFAULT '',
    accent_color TEXT NOT NULL DEFAULT ''
);

CREATE TABLE IF NOT EXISTS skin_parents (
    child_skin_id INTEGER NOT NULL,
    parent_skin_id INTEGER NOT NULL,
    position INTEGER NOT NULL,
    PRIMARY KEY (child_skin_id, position),
    FOREIGN KEY (child_skin_id) REFERENCES skins(id) ON DELETE CASCADE,
    FOREIGN KEY (parent_skin_id) REFERENCES skins(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS skin_parents_parent ON skin_parents (parent_skin_id);

CREATE TABLE IF NOT EXISTS settings (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL DEFAULT ''
);
"""


def run_migrations(db: Database) -> None:
    """Create all tables."""
    db.connection.executescript(SCHEMA)
    db.commit()
