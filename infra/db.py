# infra/db.py
"""
sqlite3 document store for things, reviews and users.

Multilingual and list-valued fields are stored as JSON text. Revisions live
in the same table as current rows: an archived revision points at its
current row through ``old_rev_of``.
"""
from __future__ import annotations

import sqlite3
from typing import Optional

import settings
from util import debug

DDL = """
CREATE TABLE IF NOT EXISTS users (
  id TEXT PRIMARY KEY,
  display_name TEXT NOT NULL,
  is_trusted INTEGER DEFAULT 0,
  is_super_user INTEGER DEFAULT 0,
  prefers_rich_text_editor INTEGER DEFAULT 0,
  suppressed_notices TEXT DEFAULT '[]',
  registration_date TEXT
);
CREATE TABLE IF NOT EXISTS things (
  id TEXT PRIMARY KEY,
  urls TEXT DEFAULT '[]',
  label TEXT DEFAULT '{}',
  aliases TEXT DEFAULT '{}',
  description TEXT DEFAULT '{}',
  created_on TEXT,
  created_by TEXT,
  rev_id TEXT,
  rev_user TEXT,
  rev_date TEXT,
  rev_tags TEXT DEFAULT '[]',
  rev_deleted INTEGER DEFAULT 0,
  old_rev_of TEXT
);
CREATE INDEX IF NOT EXISTS things_old_rev_of ON things(old_rev_of);
CREATE TABLE IF NOT EXISTS reviews (
  id TEXT PRIMARY KEY,
  thing_id TEXT NOT NULL,
  title TEXT DEFAULT '{}',
  text TEXT DEFAULT '{}',
  html TEXT DEFAULT '{}',
  star_rating INTEGER,
  created_on TEXT,
  created_by TEXT,
  rev_id TEXT,
  rev_user TEXT,
  rev_date TEXT,
  rev_tags TEXT DEFAULT '[]',
  rev_deleted INTEGER DEFAULT 0,
  old_rev_of TEXT
);
CREATE INDEX IF NOT EXISTS reviews_thing_id ON reviews(thing_id);
CREATE INDEX IF NOT EXISTS reviews_old_rev_of ON reviews(old_rev_of);
"""


def ensure_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(DDL)
    conn.commit()


def get_conn(path: Optional[str] = None) -> sqlite3.Connection:
    path = path or settings.db_path()
    debug.db.debug("Opening %s", path)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    ensure_schema(conn)
    return conn
