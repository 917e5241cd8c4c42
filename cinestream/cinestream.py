"""Cinestream Service - movie catalogue, users, auth and password reset over MongoDB."""

from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, Optional, Sequence
from urllib.parse import urlparse

import uvicorn
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cinestream.controllers import (
    AuthController,
    MovieController,
    PasswordController,
    UserController,
    make_require_user,
    register_exception_handlers,
)
from cinestream.core.config import Config
from cinestream.core.logger import setup_logger
from cinestream.core.middleware import RequestLoggingMiddleware
from cinestream.core.settings import get_cinestream_config, get_settings
from cinestream.database.client import CinestreamDB
from cinestream.database.indexes import MOVIES, USERS, ensure_indexes
from cinestream.repositories.movie_repository import MovieRepository
from cinestream.repositories.user_repository import UserRepository
from cinestream.services.auth_service import AuthService
from cinestream.services.mailer import SendGridMailer
from cinestream.services.password_reset_service import PasswordResetService


class CinestreamService:
    """
    HTTP service wiring config, logging, MongoDB, services and controllers into one FastAPI app.

    Args:
        url: Public URL of the service; defaults to ``CINESTREAM.URL``.
        enable_db: When False no MongoDB client is created. Tests use this and
            assign ``_user_repo`` / ``_movie_repo`` directly.
        config: Config to use instead of the cached ``get_cinestream_config()``.
        mailer: Mailer to use instead of one built from the SendGrid settings.

    Raises:
        ConfigurationError: ``enable_db`` is set but ``MONGO_URI`` is empty.

    Example:
        .. code-block:: python

            service = CinestreamService()
            uvicorn.run(service.app, host="0.0.0.0", port=8080)
    """

    def __init__(
        self,
        *,
        url: Optional[str] = None,
        enable_db: bool = True,
        config: Optional[Config] = None,
        mailer: Optional[SendGridMailer] = None,
    ):
        self._config = config if config is not None else get_cinestream_config()
        self.settings = get_settings(self._config)
        self.url = url or self.settings.URL
        self.name = "CinestreamService"

        self.logger = setup_logger(
            "cinestream",
            log_dir=self.settings.LOG_DIR,
            logger_level=self.settings.LOG_LEVEL,
            stream_level=self.settings.LOG_LEVEL,
            structlog_json=self.settings.LOG_JSON,
        )

        self.db_enabled = enable_db
        self.db: Optional[CinestreamDB] = (
            CinestreamDB(self.settings.MONGO_URI, self.settings.MONGO_DB) if enable_db else None
        )

        # Repositories and services (created lazily, inside the running loop)
        self._user_repo: Optional[UserRepository] = None
        self._movie_repo: Optional[MovieRepository] = None
        self._mailer: Optional[SendGridMailer] = mailer
        self._auth_service: Optional[AuthService] = None
        self._password_service: Optional[PasswordResetService] = None

        self.app = FastAPI(
            title="Cinestream",
            summary="Cinestream Backend Service",
            description="REST API for movies, users, authentication and password recovery",
            debug=self.settings.DEBUG,
            lifespan=self._lifespan,
        )

        # Middleware
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=self.settings.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        self.app.add_middleware(
            RequestLoggingMiddleware,
            service_name=self.name,
            add_request_id_header=True,
            logger=self.logger,
        )
        register_exception_handlers(self.app, self.logger)

        self.require_user = make_require_user(lambda: self.auth_service)

        # Register endpoints
        self._register_system_endpoints()
        self._register_controllers()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        if self.db is not None:
            await self.db.connect()
            await ensure_indexes(self.db.db)
            self.logger.info("database_connected", database=self.settings.MONGO_DB)
        try:
            yield
        finally:
            if self.db is not None:
                await self.db.disconnect()
                self.logger.info("database_disconnected")

    # -------------------------------------------------------------------------
    # Lazy accessors
    # -------------------------------------------------------------------------

    @property
    def user_repo(self) -> UserRepository:
        if self._user_repo is None:
            self._user_repo = UserRepository(self._collection(USERS))
        return self._user_repo

    @property
    def movie_repo(self) -> MovieRepository:
        if self._movie_repo is None:
            self._movie_repo = MovieRepository(self._collection(MOVIES))
        return self._movie_repo

    @property
    def mailer(self) -> SendGridMailer:
        if self._mailer is None:
            self._mailer = SendGridMailer(
                api_key=self.settings.SENDGRID_API_KEY.get_secret_value(),
                sender=self.settings.MAIL_FROM,
                url=self.settings.SENDGRID_URL,
                timeout=self.settings.MAIL_TIMEOUT,
            )
        return self._mailer

    @property
    def auth_service(self) -> AuthService:
        if self._auth_service is None:
            self._auth_service = AuthService(self.user_repo, self.settings)
        return self._auth_service

    @property
    def password_service(self) -> PasswordResetService:
        if self._password_service is None:
            self._password_service = PasswordResetService(self.user_repo, self.mailer, self.settings)
        return self._password_service

    def _collection(self, name: str):
        if self.db is None:
            raise RuntimeError(f"Database is disabled; cannot open collection '{name}'")
        return self.db.collection(name)

    # -------------------------------------------------------------------------
    # Endpoint registration
    # -------------------------------------------------------------------------

    def add_endpoint(
        self,
        path: str,
        func: Callable,
        *,
        methods: Sequence[str] = ("GET",),
        **route_kwargs: Any,
    ) -> None:
        """Register a single route on the app."""
        self.app.add_api_route(path, func, methods=list(methods), **route_kwargs)

    def include_router(self, router: APIRouter) -> None:
        self.app.include_router(router)

    def _register_system_endpoints(self) -> None:
        self.add_endpoint("/status", self.status, methods=["GET"])

    def _register_controllers(self) -> None:
        self.include_router(AuthController(lambda: self.auth_service).router)
        self.include_router(PasswordController(lambda: self.password_service).router)
        self.include_router(
            UserController(
                repository=lambda: self.user_repo,
                auth_service=lambda: self.auth_service,
                require_user=self.require_user,
            ).router
        )
        self.include_router(MovieController(repository=lambda: self.movie_repo, require_user=self.require_user).router)

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    async def status(self) -> Dict[str, str]:
        """Report liveness and whether MongoDB is connected."""
        if self.db is None:
            database = "disabled"
        else:
            database = "connected" if self.db.is_connected else "disconnected"
        return {"status": "Available", "database": database}

    # -------------------------------------------------------------------------
    # Launch
    # -------------------------------------------------------------------------

    @classmethod
    def launch(cls, *, url: Optional[str] = None, **kwargs) -> None:
        """Build the service and serve it with uvicorn until interrupted."""
        service = cls(url=url, **kwargs)
        parsed = urlparse(service.url)
        port = parsed.port or service.settings.PORT
        service.logger.info("service_starting", url=service.url)
        uvicorn.run(service.app, host=service.settings.HOST, port=port, log_config=None)
