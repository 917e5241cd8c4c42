from .auth_controller import AuthController
from .crud_controller import CrudController
from .dependencies import make_require_user
from .errors import register_exception_handlers
from .movie_controller import MovieController
from .password_controller import PasswordController
from .user_controller import UserController

__all__ = [
    "AuthController",
    "CrudController",
    "MovieController",
    "PasswordController",
    "UserController",
    "make_require_user",
    "register_exception_handlers",
]
