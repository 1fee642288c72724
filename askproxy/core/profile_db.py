"""
Lightweight SQLite store for GitHub user profiles synced by the desktop client.

Table: github_users (github_id, login, name, avatar_url, email, first_synced_at,
last_synced_at). Upsert is keyed by github_id.
"""

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from askproxy.core.errors import ProfileStoreError
from askproxy.schemas.profile import GithubUserProfile

logger = logging.getLogger(__name__)

_TABLE = "github_users"


def _get_conn(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(str(db_path))


def init_db(db_path: Path) -> None:
    """Create the github_users table if it does not exist."""
    conn = _get_conn(db_path)
    try:
        conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {_TABLE} (
                github_id INTEGER PRIMARY KEY,
                login TEXT NOT NULL UNIQUE,
                name TEXT,
                avatar_url TEXT,
                email TEXT,
                first_synced_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                last_synced_at TIMESTAMP NOT NULL
            )
            """
        )
        conn.commit()
    finally:
        conn.close()


def upsert_profile(profile: GithubUserProfile, db_path: Path) -> None:
    """
    Insert the profile or update the existing row for its github_id.
    first_synced_at is kept from the first insert; last_synced_at is refreshed.
    Raises ProfileStoreError if the database operation fails.
    """
    now = datetime.now(timezone.utc).isoformat()
    try:
        init_db(db_path)
        conn = _get_conn(db_path)
        try:
            conn.execute(
                f"""
                INSERT INTO {_TABLE} (github_id, login, name, avatar_url, email, last_synced_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(github_id) DO UPDATE SET
                    login = excluded.login,
                    name = excluded.name,
                    avatar_url = excluded.avatar_url,
                    email = excluded.email,
                    last_synced_at = excluded.last_synced_at
                """,
                (profile.id, profile.login, profile.name, profile.avatar_url, profile.email, now),
            )
            conn.commit()
        finally:
            conn.close()
    except sqlite3.Error as e:
        logger.error("[profile_db:upsert_profile] failed github_id=%s: %s", profile.id, e)
        raise ProfileStoreError(f"Database operation failed: {e}") from e
    logger.info("[profile_db:upsert_profile] upserted github_id=%s login=%s", profile.id, profile.login)


def get_profile(github_id: int, db_path: Path) -> dict[str, Any] | None:
    """Return the stored row for github_id as a dict, or None."""
    init_db(db_path)
    conn = _get_conn(db_path)
    conn.row_factory = sqlite3.Row
    try:
        row = conn.execute(f"SELECT * FROM {_TABLE} WHERE github_id = ?", (github_id,)).fetchone()
        return dict(row) if row else None
    finally:
        conn.close()


def clear_all(db_path: Path) -> int:
    """Delete all rows. Returns the number of rows removed."""
    init_db(db_path)
    conn = _get_conn(db_path)
    try:
        cur = conn.execute(f"DELETE FROM {_TABLE}")
        conn.commit()
        logger.info("[profile_db] cleared %d profiles", cur.rowcount)
        return cur.rowcount
    finally:
        conn.close()
