import secrets
from datetime import timedelta
from html import escape

from starlette.concurrency import run_in_threadpool

from cinestream.core.exceptions import InvalidOrExpiredTokenError
from cinestream.core.logger import get_logger
from cinestream.core.security import hash_password
from cinestream.core.settings import CinestreamSettings
from cinestream.models.auth import MessageResponse
from cinestream.models.base import utcnow
from cinestream.models.password import TokenCheckResponse
from cinestream.repositories.user_repository import UserRepository
from cinestream.services.mailer import SendGridMailer

logger = get_logger("password_reset")

FORGOT_PASSWORD_MESSAGE = "If that address is registered, an email with reset instructions has been sent"
RESET_SUCCESS_MESSAGE = "Password updated successfully"
RESET_SUBJECT = "Password recovery"


class PasswordResetService:
    """Forgot-password flow: issue a single-use, time-limited token by mail, then redeem it."""

    def __init__(self, user_repo: UserRepository, mailer: SendGridMailer, settings: CinestreamSettings):
        self.user_repo = user_repo
        self.mailer = mailer
        self.settings = settings

    def reset_url(self, token: str) -> str:
        return self.settings.RESET_URL_TEMPLATE.format(token=token)

    async def request_reset(self, email: str) -> MessageResponse:
        """Issue a reset token and mail the link.

        Unknown addresses get the same response as known ones.

        Raises:
            EmailDeliveryError: The mail could not be sent. The stored token stays
                pending; a retry overwrites it with a fresh one.
        """
        user = await self.user_repo.get_by_email(email)
        if user is None:
            logger.info("reset_requested_unknown_email")
            return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)

        token = secrets.token_hex(self.settings.RESET_TOKEN_BYTES)
        expires = utcnow() + timedelta(seconds=self.settings.RESET_TOKEN_TTL)
        await self.user_repo.set_reset_token(user.id, token, expires)

        url = escape(self.reset_url(token), quote=True)
        html = (
            "<p>You asked to reset your password.</p>"
            f'<p>Click here: <a href="{url}">{url}</a></p>'
            f"<p>The link expires in {self.settings.RESET_TOKEN_TTL // 60} minutes.</p>"
        )
        await self.mailer.send(user.email, RESET_SUBJECT, html)
        logger.info("reset_requested", user_id=user.id)
        return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)

    async def consume_reset(self, token: str, new_password: str) -> MessageResponse:
        """Set a new password if ``token`` is valid, invalidating the token.

        Raises:
            InvalidOrExpiredTokenError: Unknown, already used, or expired token.
        """
        if not token or await self.user_repo.find_by_valid_token(token) is None:
            logger.warning("reset_token_rejected")
            raise InvalidOrExpiredTokenError()
        password_hash = await run_in_threadpool(hash_password, new_password, self.settings.BCRYPT_ROUNDS)
        user = await self.user_repo.consume_reset_token(token, password_hash)
        if user is None:
            logger.warning("reset_token_rejected")
            raise InvalidOrExpiredTokenError()
        logger.info("password_reset", user_id=user.id)
        return MessageResponse(message=RESET_SUCCESS_MESSAGE)

    async def check_token(self, token: str) -> TokenCheckResponse:
        """Report whether ``token`` could currently be redeemed. Never consumes it."""
        user = await self.user_repo.find_by_valid_token(token) if token else None
        if user is None:
            raise InvalidOrExpiredTokenError()
        return TokenCheckResponse(valid=True)
