from datetime import datetime
from typing import Optional

from pymongo import ReturnDocument

from cinestream.database.indexes import USERS
from cinestream.database.repository import MongoRepository
from cinestream.models.base import utcnow
from cinestream.models.user import User, normalize_email


class UserRepository(MongoRepository[User]):
    """Users collection: generic CRUD plus email lookup and reset-token state."""

    collection_name = USERS

    def __init__(self, collection):
        super().__init__(collection, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self.find_one({"email": normalize_email(email)})

    async def set_reset_token(self, user_id: str, token: str, expires: datetime) -> None:
        """Store a reset token, overwriting any earlier one for this user."""
        await self.collection.update_one(
            {"_id": self._require_object_id(user_id)},
            {"$set": {"reset_password_token": token, "reset_password_expires": expires}},
        )

    async def find_by_valid_token(self, token: str, now: Optional[datetime] = None) -> Optional[User]:
        now = now or utcnow()
        return await self.find_one({"reset_password_token": token, "reset_password_expires": {"$gt": now}})

    async def consume_reset_token(
        self,
        token: str,
        password_hash: str,
        now: Optional[datetime] = None,
    ) -> Optional[User]:
        """Swap in a new password hash if ``token`` is still valid.

        Matching, the password write and clearing the token happen in one
        ``find_one_and_update``, so a token can be redeemed at most once.
        Returns the updated user, or None when no unexpired token matched.
        """
        now = now or utcnow()
        doc = await self.collection.find_one_and_update(
            {"reset_password_token": token, "reset_password_expires": {"$gt": now}},
            {
                "$set": {
                    "password": password_hash,
                    "reset_password_token": None,
                    "reset_password_expires": None,
                    "updated_at": now,
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        return self._to_model(doc) if doc is not None else None
