from .config import Config, SettingsLike
from .logger import get_logger, setup_logger
from .security import (
    TokenData,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from .settings import CinestreamSettings, get_cinestream_config, get_settings, reset_cinestream_config

__all__ = [
    "CinestreamSettings",
    "Config",
    "SettingsLike",
    "TokenData",
    "create_access_token",
    "decode_token",
    "get_cinestream_config",
    "get_logger",
    "get_settings",
    "hash_password",
    "reset_cinestream_config",
    "setup_logger",
    "verify_password",
]
