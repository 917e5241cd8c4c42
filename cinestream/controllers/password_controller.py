from typing import TYPE_CHECKING, Callable

from fastapi import APIRouter

from cinestream.models.auth import MessageResponse
from cinestream.models.password import ForgotPasswordPayload, ResetPasswordPayload, TokenCheckResponse

if TYPE_CHECKING:
    from cinestream.services.password_reset_service import PasswordResetService


class PasswordController:
    """Forgot-password and reset routes under ``/password``."""

    def __init__(self, reset_service: Callable[[], "PasswordResetService"], prefix: str = "/password"):
        self.get_reset_service = reset_service
        self.router = APIRouter(prefix=prefix, tags=["Password"])
        self.router.add_api_route(
            "/forgot-password",
            self.forgot_password,
            methods=["POST"],
            response_model=MessageResponse,
        )
        self.router.add_api_route(
            "/reset-password/{token}",
            self.check_token,
            methods=["GET"],
            response_model=TokenCheckResponse,
        )
        self.router.add_api_route(
            "/reset-password/{token}",
            self.reset_password,
            methods=["POST"],
            response_model=MessageResponse,
        )

    async def forgot_password(self, payload: ForgotPasswordPayload) -> MessageResponse:
        return await self.get_reset_service().request_reset(payload.email)

    async def check_token(self, token: str) -> TokenCheckResponse:
        return await self.get_reset_service().check_token(token)

    async def reset_password(self, token: str, payload: ResetPasswordPayload) -> MessageResponse:
        return await self.get_reset_service().consume_reset(token, payload.new_password)
