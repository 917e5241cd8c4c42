from .movie_repository import MovieRepository
from .user_repository import UserRepository

__all__ = ["MovieRepository", "UserRepository"]
