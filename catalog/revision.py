# catalog/revision.py
"""
Shared storage and revision logic for things and reviews.

The current revision of a document keeps its id forever. Editing archives
a copy of the current row under a fresh id (``old_rev_of`` pointing back)
before the current row is overwritten, so the history is append-only.
"""
from __future__ import annotations

import datetime
import json
import sqlite3
import uuid
from typing import Any, Callable, Dict, List, Optional, Tuple

from catalog.errors import DocumentNotFound, RevisionDeletedError, RevisionStaleError

REV_FIELDS = ("rev_id", "rev_user", "rev_date", "rev_tags", "rev_deleted", "old_rev_of")


def now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


class Revisioned:
    table: str = ""
    data_fields: Tuple[str, ...] = ()
    # field -> factory for its empty value; these are stored as JSON text
    json_fields: Dict[str, Callable[[], Any]] = {}

    def __init__(self, conn: sqlite3.Connection, **data):
        self._conn = conn
        self.id: Optional[str] = data.get("id")
        for f in self.data_fields:
            default = self.json_fields[f]() if f in self.json_fields else None
            value = data.get(f)
            setattr(self, f, default if value is None else value)
        self.rev_id = data.get("rev_id")
        self.rev_user = data.get("rev_user")
        self.rev_date = data.get("rev_date")
        self.rev_tags = list(data.get("rev_tags") or [])
        self.rev_deleted = bool(data.get("rev_deleted"))
        self.old_rev_of = data.get("old_rev_of")

        self.user_can_edit = False
        self.user_can_delete = False
        self.user_is_creator = False

    # ---------------- (de)serialisation ----------------

    @classmethod
    def columns(cls) -> Tuple[str, ...]:
        return ("id",) + cls.data_fields + REV_FIELDS

    @classmethod
    def from_row(cls, conn: sqlite3.Connection, row: sqlite3.Row):
        data = dict(row)
        for f, factory in cls.json_fields.items():
            data[f] = json.loads(data[f]) if data.get(f) else factory()
        data["rev_tags"] = json.loads(data["rev_tags"]) if data.get("rev_tags") else []
        return cls(conn, **data)

    def to_row(self) -> Dict[str, Any]:
        row: Dict[str, Any] = {"id": self.id}
        for f in self.data_fields:
            value = getattr(self, f)
            row[f] = json.dumps(value) if f in self.json_fields else value
        row.update({
            "rev_id": self.rev_id,
            "rev_user": self.rev_user,
            "rev_date": self.rev_date,
            "rev_tags": json.dumps(self.rev_tags),
            "rev_deleted": 1 if self.rev_deleted else 0,
            "old_rev_of": self.old_rev_of,
        })
        return row

    def _write_row(self, row: Dict[str, Any]) -> None:
        cols = self.columns()
        placeholders = ",".join("?" for _ in cols)
        self._conn.execute(
            f"INSERT OR REPLACE INTO {self.table}({','.join(cols)}) VALUES({placeholders})",
            tuple(row[c] for c in cols),
        )

    # ---------------- lookups ----------------

    @classmethod
    def get(cls, conn: sqlite3.Connection, doc_id: str):
        row = conn.execute(f"SELECT * FROM {cls.table} WHERE id = ?", (doc_id,)).fetchone()
        if not row:
            raise DocumentNotFound(f"{cls.__name__} {doc_id} not found")
        return cls.from_row(conn, row)

    @classmethod
    def get_not_stale_or_deleted(cls, conn: sqlite3.Connection, doc_id: str):
        doc = cls.get(conn, doc_id)
        if doc.rev_deleted:
            raise RevisionDeletedError(f"{cls.__name__} {doc_id} has been deleted")
        if doc.old_rev_of:
            raise RevisionStaleError(f"{cls.__name__} {doc_id} is an outdated revision")
        return doc

    @classmethod
    def filter_current(cls, conn: sqlite3.Connection, where: str = "", params: tuple = (),
                       order_by: str = "created_on DESC") -> list:
        sql = f"SELECT * FROM {cls.table} WHERE old_rev_of IS NULL AND rev_deleted = 0"
        if where:
            sql += f" AND ({where})"
        sql += f" ORDER BY {order_by}"
        return [cls.from_row(conn, r) for r in conn.execute(sql, params).fetchall()]

    @classmethod
    def history(cls, conn: sqlite3.Connection, doc_id: str) -> list:
        """All revisions of a document, current revision first."""
        rows = conn.execute(
            f"""SELECT * FROM {cls.table} WHERE id = ? OR old_rev_of = ?
                ORDER BY (old_rev_of IS NOT NULL), rev_date DESC""",
            (doc_id, doc_id),
        ).fetchall()
        if not rows:
            raise DocumentNotFound(f"{cls.__name__} {doc_id} not found")
        return [cls.from_row(conn, r) for r in rows]

    # ---------------- revisions ----------------

    @classmethod
    def create_first_revision(cls, conn: sqlite3.Connection, user, tags: Optional[List[str]] = None, **data):
        """Return a new, unsaved document whose first revision belongs to `user`."""
        now = now_iso()
        data.setdefault("id", new_id())
        data.setdefault("created_on", now)
        data.setdefault("created_by", user.id)
        return cls(conn, rev_id=new_id(), rev_user=user.id, rev_date=now,
                   rev_tags=tags or ["create"], **data)

    def new_revision(self, user, tags: Optional[List[str]] = None):
        """
        Archive the current state and turn this object into a new revision
        by `user`. Nothing is committed until save().
        """
        archived = self.to_row()
        archived["id"] = new_id()
        archived["old_rev_of"] = self.id
        self._write_row(archived)

        self.rev_id = new_id()
        self.rev_user = user.id
        self.rev_date = now_iso()
        self.rev_tags = list(tags or ["edit"])
        return self

    def validate(self) -> None:
        pass

    def save(self):
        try:
            self.validate()
            self._write_row(self.to_row())
        except Exception:
            self._conn.rollback()
            raise
        self._conn.commit()
        return self

    def delete(self, user):
        """Mark the document deleted through a new revision (history is kept)."""
        self.new_revision(user, tags=["delete"])
        self.rev_deleted = True
        return self.save()

    # ---------------- permissions ----------------

    def populate_user_info(self, user) -> None:
        if not user:
            return
        self.user_is_creator = user.id == self.created_by
        self.user_can_edit = bool(user.is_super_user or user.is_trusted or self.user_is_creator)
        self.user_can_delete = bool(user.is_super_user or self.user_is_creator)

