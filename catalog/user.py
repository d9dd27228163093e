# catalog/user.py
"""
Users, as far as this application needs them: display name, the flags
that grant edit rights, and UI preferences. Sign-in itself is handled
elsewhere; requests carry the user id in the Flask session.
"""
from __future__ import annotations

import json
import sqlite3
from typing import List, Optional

from catalog.errors import DocumentNotFound
from catalog.revision import new_id, now_iso

# API name -> column
PREFERENCES = {
    "prefersRichTextEditor": "prefers_rich_text_editor",
}

NOTICES = ("language-notice-thing", "language-notice-review")


class User:
    def __init__(self, conn: sqlite3.Connection, *, id: str, display_name: str,
                 is_trusted: bool = False, is_super_user: bool = False,
                 prefers_rich_text_editor: bool = False,
                 suppressed_notices: Optional[List[str]] = None,
                 registration_date: Optional[str] = None):
        self._conn = conn
        self.id = id
        self.display_name = display_name
        self.is_trusted = bool(is_trusted)
        self.is_super_user = bool(is_super_user)
        self.prefers_rich_text_editor = bool(prefers_rich_text_editor)
        self.suppressed_notices = list(suppressed_notices or [])
        self.registration_date = registration_date

    @classmethod
    def get(cls, conn: sqlite3.Connection, user_id: str) -> "User":
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        if not row:
            raise DocumentNotFound(f"User {user_id} not found")
        data = dict(row)
        data["suppressed_notices"] = json.loads(data.get("suppressed_notices") or "[]")
        return cls(conn, **data)

    @classmethod
    def create(cls, conn: sqlite3.Connection, display_name: str, *,
               is_trusted: bool = False, is_super_user: bool = False) -> "User":
        user = cls(conn, id=new_id(), display_name=display_name, is_trusted=is_trusted,
                   is_super_user=is_super_user, registration_date=now_iso())
        return user.save()

    def save(self) -> "User":
        self._conn.execute(
            """INSERT OR REPLACE INTO users(id, display_name, is_trusted, is_super_user,
                   prefers_rich_text_editor, suppressed_notices, registration_date)
               VALUES(?,?,?,?,?,?,?)""",
            (self.id, self.display_name, int(self.is_trusted), int(self.is_super_user),
             int(self.prefers_rich_text_editor), json.dumps(self.suppressed_notices),
             self.registration_date),
        )
        self._conn.commit()
        return self

    def toggle_preference(self, preference_name: str) -> bool:
        """Flip a boolean preference (API name) and persist it. Returns the new value."""
        attr = PREFERENCES[preference_name]
        new_value = not getattr(self, attr)
        setattr(self, attr, new_value)
        self.save()
        return new_value

    def suppress_notice(self, notice_type: str) -> None:
        if notice_type not in self.suppressed_notices:
            self.suppressed_notices.append(notice_type)
            self.save()

    def has_suppressed(self, notice_type: str) -> bool:
        return notice_type in self.suppressed_notices
