from starlette.concurrency import run_in_threadpool

from cinestream.core.exceptions import ConflictError, InvalidCredentialsError, NotFoundError, UnauthorizedError
from cinestream.core.logger import get_logger
from cinestream.core.security import (
    TokenData,
    create_access_token,
    decode_token,
    dummy_hash,
    hash_password,
    verify_password,
)
from cinestream.core.settings import CinestreamSettings
from cinestream.models.auth import LoginPayload, MessageResponse, RegisterPayload, TokenResponse
from cinestream.models.user import UserPublic
from cinestream.repositories.user_repository import UserRepository

logger = get_logger("auth")


class AuthService:
    def __init__(self, user_repo: UserRepository, settings: CinestreamSettings):
        self.user_repo = user_repo
        self.settings = settings

    async def hash(self, password: str) -> str:
        return await run_in_threadpool(hash_password, password, self.settings.BCRYPT_ROUNDS)

    async def register(self, payload: RegisterPayload) -> MessageResponse:
        existing = await self.user_repo.get_by_email(payload.email)
        if existing:
            raise ConflictError("Email already registered")

        data = payload.model_dump()
        data["password"] = await self.hash(payload.password)
        # The unique email index still rejects a concurrent duplicate with ConflictError
        user = await self.user_repo.create(data)

        logger.info("user_registered", user_id=user.id)
        return MessageResponse(message="Registration successful")

    async def login(self, payload: LoginPayload) -> TokenResponse:
        user = await self.user_repo.get_by_email(payload.email)
        hashed = user.password if user is not None else dummy_hash(self.settings.BCRYPT_ROUNDS)
        matches = await run_in_threadpool(verify_password, payload.password, hashed)
        valid = user is not None and matches
        if not valid:
            logger.warning("login_failed")
            raise InvalidCredentialsError()

        token = create_access_token(
            user.id,
            user.email,
            secret=self.settings.JWT_SECRET.get_secret_value(),
            algorithm=self.settings.JWT_ALGORITHM,
            expires_in=self.settings.JWT_EXPIRES_IN,
        )
        logger.info("user_logged_in", user_id=user.id)
        return TokenResponse(token=token)

    def verify_token(self, token: str) -> TokenData:
        """Decode a bearer token, raising UnauthorizedError on any defect."""
        if not token:
            raise UnauthorizedError()
        return decode_token(
            token,
            secret=self.settings.JWT_SECRET.get_secret_value(),
            algorithm=self.settings.JWT_ALGORITHM,
        )

    async def profile(self, token_data: TokenData) -> UserPublic:
        try:
            user = await self.user_repo.read(token_data.user_id)
        except NotFoundError:
            raise UnauthorizedError("User no longer exists")
        return user.to_public()
