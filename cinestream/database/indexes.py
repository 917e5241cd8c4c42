"""MongoDB index management for Cinestream."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorDatabase

USERS = "users"
MOVIES = "movies"


async def ensure_indexes(db: "AsyncIOMotorDatabase") -> None:
    """
    Create required indexes on MongoDB collections.

    Call this during application startup. The unique email index is what makes
    concurrent registrations with the same address fail cleanly.
    """
    await db[USERS].create_index("email", unique=True)
    await db[USERS].create_index("reset_password_token", sparse=True)

    await db[MOVIES].create_index([("created_at", -1)])
    await db[MOVIES].create_index("genre")
