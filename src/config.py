"""
Configuration management for the article board.
Loads environment variables and provides access to configuration settings.
"""
import logging
import os
from typing import Optional
from dotenv import load_dotenv

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 30 << 20
DEFAULT_MAX_TITLE_BYTES = 75
DEFAULT_MAX_MESSAGE_BYTES = 999999


class Config:
    """Configuration settings loaded from environment variables."""

    def __init__(self):
        """Initialize configuration by loading environment variables."""
        load_dotenv()

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get a configuration value by key.

        Args:
            key: Configuration key name
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        return os.getenv(key, default)

    def _get_int(self, key: str, default: int) -> int:
        """Read an integer setting, falling back to the default when malformed."""
        raw = os.getenv(key)
        if raw is None or raw == "":
            return default
        try:
            return int(raw)
        except ValueError:
            logger.warning("Invalid integer for %s: %r, using default %d", key, raw, default)
            return default

    @property
    def data_dir(self) -> str:
        """Directory holding the persisted article index."""
        return os.getenv("ARTICLE_DATA_DIR", "data")

    @property
    def articles_dir(self) -> str:
        """Directory holding one sub-directory per rendered article."""
        return os.getenv("ARTICLES_DIR", "articles")

    @property
    def storage_type(self) -> str:
        """Article index backend: 'local' or 'memory'."""
        return os.getenv("ARTICLE_STORAGE_TYPE", "local").lower()

    @property
    def server_host(self) -> str:
        """Get server bind host."""
        return os.getenv("SERVER_HOST", "127.0.0.1")

    @property
    def server_port(self) -> int:
        """Get server bind port."""
        return self._get_int("SERVER_PORT", 7070)

    @property
    def max_upload_bytes(self) -> int:
        """Ceiling for both the request body and a single uploaded file."""
        return self._get_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)

    @property
    def max_title_bytes(self) -> int:
        """Get the maximum title length in UTF-8 bytes."""
        return self._get_int("MAX_TITLE_BYTES", DEFAULT_MAX_TITLE_BYTES)

    @property
    def max_message_bytes(self) -> int:
        """Get the maximum message length in UTF-8 bytes."""
        return self._get_int("MAX_MESSAGE_BYTES", DEFAULT_MAX_MESSAGE_BYTES)
