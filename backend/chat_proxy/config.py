import logging
import sys

from pydantic_settings import BaseSettings
from typing import Optional


def setup_logging():
    """Configure application logging."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # Set third-party loggers to WARNING to reduce noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# Initialize logging on import
setup_logging()

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # Upstream credential (server-side only, never sent to clients)
    openai_api_key: Optional[str] = None

    # Upstream completion API
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4.1-mini"
    temperature: float = 0.7

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Timeout settings (seconds)
    provider_timeout: int = 60

    # Uploaded image cap (bytes)
    max_upload_bytes: int = 12 * 1024 * 1024
    # Per-field cap for multipart text fields such as "messages" (bytes)
    max_form_field_bytes: int = 20 * 1024 * 1024

    # Wildcard is for local development; set the app origin in production
    cors_allow_origin: str = "*"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def is_configured(self) -> bool:
        """Check whether the upstream credential is present."""
        return bool(self.openai_api_key)


def warn_if_unconfigured():
    """Log a startup warning when OPENAI_API_KEY is missing.

    The server still starts; every chat request is answered with a 500
    until the key is provided.
    """
    if not settings.is_configured():
        logger.warning("=" * 60)
        logger.warning("OPENAI_API_KEY environment variable is not set!")
        logger.warning("=" * 60)
        logger.warning("Chat requests will fail until the key is configured.")
        logger.warning("Please set OPENAI_API_KEY in your .env file:")
        logger.warning("    OPENAI_API_KEY=sk-...")
        logger.warning("=" * 60)


settings = Settings()
