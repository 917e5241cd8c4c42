from typing import TYPE_CHECKING, Any, Callable, Dict

from fastapi import Depends
from pydantic import BaseModel

from cinestream.controllers.crud_controller import CrudController
from cinestream.core.security import TokenData
from cinestream.models.user import UserCreate, UserPublic, UserUpdate
from cinestream.repositories.user_repository import UserRepository

if TYPE_CHECKING:
    from cinestream.services.auth_service import AuthService


class UserController(CrudController):
    """User CRUD (all routes authenticated) plus ``GET /users/profile``.

    Passwords are hashed before they reach the repository, and responses use
    ``UserPublic`` so hashes and reset tokens never leave the service.
    """

    def __init__(
        self,
        *,
        repository: Callable[[], UserRepository],
        auth_service: Callable[[], "AuthService"],
        require_user: Callable,
    ):
        self.get_auth_service = auth_service
        super().__init__(
            prefix="/users",
            repository=repository,
            create_model=UserCreate,
            update_model=UserUpdate,
            response_model=UserPublic,
            require_user=require_user,
            tags=["Users"],
        )

    async def prepare_create(self, payload: BaseModel) -> Dict[str, Any]:
        data = payload.model_dump()
        data["password"] = await self.get_auth_service().hash(data["password"])
        return data

    async def prepare_update(self, payload: BaseModel) -> Dict[str, Any]:
        data = payload.model_dump(exclude_unset=True)
        if data.get("password") is not None:
            data["password"] = await self.get_auth_service().hash(data["password"])
        else:
            data.pop("password", None)
        return data

    def register_extra_routes(self) -> None:
        require_user = self.require_user

        async def profile(user: TokenData = Depends(require_user)):
            return await self.get_auth_service().profile(user)

        self.router.add_api_route("/profile", profile, methods=["GET"], response_model=UserPublic)
