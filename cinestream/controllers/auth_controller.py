from typing import TYPE_CHECKING, Callable

from fastapi import APIRouter, status

from cinestream.models.auth import LoginPayload, MessageResponse, RegisterPayload, TokenResponse

if TYPE_CHECKING:
    from cinestream.services.auth_service import AuthService


class AuthController:
    """``/api/auth/register`` and ``/api/auth/login``."""

    def __init__(self, auth_service: Callable[[], "AuthService"], prefix: str = "/api/auth"):
        self.get_auth_service = auth_service
        self.router = APIRouter(prefix=prefix, tags=["Auth"])
        self.router.add_api_route(
            "/register",
            self.register,
            methods=["POST"],
            response_model=MessageResponse,
            status_code=status.HTTP_201_CREATED,
        )
        self.router.add_api_route("/login", self.login, methods=["POST"], response_model=TokenResponse)

    async def register(self, payload: RegisterPayload) -> MessageResponse:
        return await self.get_auth_service().register(payload)

    async def login(self, payload: LoginPayload) -> TokenResponse:
        return await self.get_auth_service().login(payload)
