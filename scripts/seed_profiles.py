"""
Seed a demo profile into `users` + `user_food_preferences`.

Usage
-----

    # default demo profile (John Doe), creating tables on first run
    python -m scripts.seed_profiles <USER_ID> --create-tables

    # default demo profile only
    python -m scripts.seed_profiles <USER_ID>

    # custom profile (PreferenceSet fields) in a JSON file
    python -m scripts.seed_profiles <USER_ID> --file path/to/profile.json
"""
from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
load_dotenv()

from core.models.preference_set import PreferenceSet
from services.db import User, create_tables, save_preference_lists, session_scope

# ────────────────────────────────────────────────────────────────────
_DEFAULT_PROFILE: dict[str, Any] = {
    "name": "John Doe",
    "email": "john.doe@example.com",
    "likes": ["Chinese", "Vegetarian"],
    "dislikes": ["Spicy", "Seafood"],
    "profile_picture": None,
}


async def _seed(user_id: int, prefs: PreferenceSet, create: bool = False) -> None:
    if create:
        await create_tables()
    async with session_scope() as db:
        user = await db.get(User, user_id)
        if user is None:
            user = User(id=user_id)
            db.add(user)
        user.name = prefs.name
        user.email = prefs.email
        user.profile_picture = prefs.profile_picture
        # commits both the user row and the lists
        await save_preference_lists(db, user_id, prefs)
    print(
        f"✓ seeded profile for user {user_id} "
        f"({len(prefs.likes)} likes, {len(prefs.dislikes)} dislikes)"
    )


def _load_json(path: Path) -> PreferenceSet:
    data = json.loads(path.read_text())
    if not isinstance(data, dict):
        raise ValueError("JSON file must contain a single profile object")
    return PreferenceSet.model_validate(data)


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("user_id", type=int, help="target user id")
    parser.add_argument(
        "--file",
        type=Path,
        help="optional JSON file with the profile to seed (overrides default)",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="create missing tables before seeding",
    )
    args = parser.parse_args()

    prefs = _load_json(args.file) if args.file else PreferenceSet(**_DEFAULT_PROFILE)
    asyncio.run(_seed(args.user_id, prefs, create=args.create_tables))


if __name__ == "__main__":
    main()
