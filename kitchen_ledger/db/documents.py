"""One JSON aggregate per user, stored in the user_data table.

Reads fetch the whole document.  Writes are either a full-document create
(first login) or a partial patch that replaces the given top-level keys.
Any SQLite failure on write is raised as StoreWriteError; nothing is retried.
"""

import json
import logging
import sqlite3
from typing import Optional

from kitchen_ledger.core.errors import StoreWriteError
from kitchen_ledger.db.database import get_connection

logger = logging.getLogger(__name__)


def load(user_id: int) -> Optional[dict]:
    """Return the stored document for user_id, or None if it doesn't exist yet."""
    conn = get_connection()
    try:
        row = conn.execute(
            "SELECT document FROM user_data WHERE user_id = ?", (user_id,)
        ).fetchone()
        return json.loads(row["document"]) if row else None
    finally:
        conn.close()


def create(user_id: int, document: dict) -> None:
    """Write the full document for a user who has none yet."""
    try:
        conn = get_connection()
        try:
            conn.execute(
                "INSERT INTO user_data (user_id, document) VALUES (?, ?)",
                (user_id, json.dumps(document)),
            )
            conn.commit()
        finally:
            conn.close()
    except sqlite3.Error as e:
        logger.exception("Creating document for user %s failed", user_id)
        raise StoreWriteError(str(e)) from e


def patch(user_id: int, changes: dict) -> None:
    """Replace the given top-level keys of the user's document in one transaction."""
    if not changes:
        return
    try:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT document FROM user_data WHERE user_id = ?", (user_id,)
            ).fetchone()
            if row is None:
                raise StoreWriteError(f"No document for user {user_id}")
            document = json.loads(row["document"])
            document.update(changes)
            conn.execute(
                "UPDATE user_data SET document = ?, updated_at = CURRENT_TIMESTAMP WHERE user_id = ?",
                (json.dumps(document), user_id),
            )
            conn.commit()
        finally:
            conn.close()
    except sqlite3.Error as e:
        logger.exception("Patching document for user %s failed", user_id)
        raise StoreWriteError(str(e)) from e
