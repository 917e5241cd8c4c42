from .auth import LoginPayload, MessageResponse, RegisterPayload, TokenResponse
from .base import CamelModel, DocumentModel, utcnow
from .movie import Movie, MovieCreate, MovieUpdate
from .password import ForgotPasswordPayload, ResetPasswordPayload, TokenCheckResponse
from .user import User, UserCreate, UserPublic, UserUpdate

__all__ = [
    "CamelModel",
    "DocumentModel",
    "ForgotPasswordPayload",
    "LoginPayload",
    "MessageResponse",
    "Movie",
    "MovieCreate",
    "MovieUpdate",
    "RegisterPayload",
    "ResetPasswordPayload",
    "TokenCheckResponse",
    "TokenResponse",
    "User",
    "UserCreate",
    "UserPublic",
    "UserUpdate",
    "utcnow",
]
