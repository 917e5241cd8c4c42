from .client import CinestreamDB
from .indexes import MOVIES, USERS, ensure_indexes
from .repository import MongoRepository, to_bson, to_object_id

__all__ = [
    "CinestreamDB",
    "MOVIES",
    "MongoRepository",
    "USERS",
    "ensure_indexes",
    "to_bson",
    "to_object_id",
]
