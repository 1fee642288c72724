#!/usr/bin/env python3
"""
Create the GitHub profile SQLite table, optionally wiping existing rows or
seeding a demo profile.

Run from project root:

    python scripts/init_profile_db.py
    python scripts/init_profile_db.py --reset
    python scripts/init_profile_db.py --db data/profiles.db --seed-demo

The database path defaults to PROFILE_DB_PATH (env) or data/profiles.db.
"""

import argparse
import sys
from pathlib import Path

# Project root on path so "askproxy" resolves
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from askproxy.core.config import Settings
from askproxy.core.profile_db import clear_all, init_db, upsert_profile
from askproxy.schemas.profile import GithubUserProfile

DEMO_PROFILE = GithubUserProfile(
    id=12345,
    login="testuser",
    name="Test User",
    avatar_url="https://example.com/avatar.png",
    email="test@example.com",
)


def main() -> None:
    parser = argparse.ArgumentParser(description="Initialize the profile DB.")
    parser.add_argument("--db", type=Path, default=None, help="SQLite file (default: PROFILE_DB_PATH).")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Delete all existing profiles after creating the table.",
    )
    parser.add_argument("--seed-demo", action="store_true", help="Upsert one demo profile.")
    args = parser.parse_args()

    db_path = args.db or Settings.from_env().profile_db_path
    init_db(db_path)
    print(f"Table ready in {db_path}.")
    if args.reset:
        removed = clear_all(db_path)
        print(f"Cleared {removed} profiles.")
    if args.seed_demo:
        upsert_profile(DEMO_PROFILE, db_path)
        print(f"  upserted: {DEMO_PROFILE.login} ({DEMO_PROFILE.id})")


if __name__ == "__main__":
    main()
