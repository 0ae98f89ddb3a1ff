"""
Seed local users so the API can be exercised without the auth service.

    python -m pillarlog.scripts.seed_users
"""
import asyncio
from datetime import datetime, timezone

from sqlalchemy import select

from pillarlog.db.models import User
from pillarlog.db.session import SessionLocal
from pillarlog.services.friendship import generate_friend_code

# Default users to seed; adjust to your needs.
USERS = [
    {"id": 1, "username": "alice"},
    {"id": 2, "username": "bob"},
    {"id": 3, "username": "carol"},
]


async def main():
    async with SessionLocal() as db:
        for entry in USERS:
            existing = await db.scalar(select(User).where(User.username == entry["username"]))
            if existing:
                if not existing.friend_code:
                    existing.friend_code = generate_friend_code()
                    print(f"Assigned friend code to {entry['username']}")
                continue

            db.add(User(
                id=entry["id"],
                username=entry["username"],
                friend_code=generate_friend_code(),
                created_at=datetime.now(timezone.utc),
            ))
            print(f"Inserted user {entry['username']}")

        await db.commit()
    print("Done.")


if __name__ == "__main__":
    asyncio.run(main())
