from cinestream.cinestream import CinestreamService
from cinestream.core.settings import get_cinestream_config, reset_cinestream_config

__all__ = ["CinestreamService", "get_cinestream_config", "reset_cinestream_config"]
