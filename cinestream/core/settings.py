"""Configuration for the Cinestream service.

Environment variables use the CINESTREAM__ prefix
(e.g. ``CINESTREAM__MONGO_URI=mongodb://mongo:27017``). A ``.env`` file in the
working directory is loaded first, so the same keys can live there.
"""

from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, SecretStr, field_validator

from cinestream.core.config import Config


class CinestreamSettings(BaseModel):
    """Cinestream service configuration settings."""

    # Service
    URL: str = "http://localhost:8080"
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    # MongoDB (no default URI: it must be supplied before startup)
    MONGO_URI: str = ""
    MONGO_DB: str = "cinestream"

    # Auth / JWT
    JWT_SECRET: SecretStr = SecretStr("dev-secret-key")
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_IN: int = 60 * 60  # seconds
    BCRYPT_ROUNDS: int = Field(10, ge=10, le=16)

    # Password reset
    RESET_TOKEN_BYTES: int = Field(32, ge=32)
    RESET_TOKEN_TTL: int = 60 * 60  # seconds
    RESET_URL_TEMPLATE: str = "http://localhost:5173/#/reset-password?token={token}"

    # Outbound mail (SendGrid v3 REST API)
    SENDGRID_API_KEY: SecretStr = SecretStr("")
    SENDGRID_URL: str = "https://api.sendgrid.com/v3/mail/send"
    MAIL_FROM: str = "no-reply@cinestream.local"
    MAIL_TIMEOUT: float = 10.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None
    LOG_JSON: bool = True  # False: human-readable console output
    DEBUG: bool = False

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


_config: Optional[Config] = None


def get_cinestream_config() -> Config:
    """Get the Cinestream configuration singleton.

    Configuration is loaded once and cached. Supports environment variable
    overrides using the CINESTREAM__ prefix.

    Examples:
        ```bash
        export CINESTREAM__MONGO_URI=mongodb://mongo:27017
        export CINESTREAM__JWT_SECRET=change-me
        ```

        ```python
        config = get_cinestream_config()
        print(config.CINESTREAM.PORT)  # 8080
        ```

    Returns:
        Config instance with a CINESTREAM section containing all settings.
    """
    global _config
    if _config is None:
        load_dotenv()
        _config = Config.load(defaults={"CINESTREAM": CinestreamSettings().model_dump()})
    return _config


def get_settings(config: Optional[Config] = None) -> CinestreamSettings:
    """Validate the CINESTREAM section into a typed settings object."""
    config = config if config is not None else get_cinestream_config()
    return CinestreamSettings.model_validate(config.CINESTREAM.to_dict())


def reset_cinestream_config() -> None:
    """Reset the config cache. Useful for testing."""
    global _config
    _config = None
