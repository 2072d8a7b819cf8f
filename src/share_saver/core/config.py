import logging
from dataclasses import dataclass
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="SHARE_SAVER_")

    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False
    log_level: str = "INFO"

    storage_root: Optional[str] = None
    locations: List[str] = []

    chunk_size: int = 8192
    probe_timeout: Optional[float] = None
    max_upload_size: int = 50 * 1024 * 1024

    http_proxy: Optional[str] = None


def get_settings() -> Settings:
    return Settings()


@dataclass
class LoggingConfig:
    """Logging setup shared by the server and the CLI."""

    debug: bool = False
    log_level: str = "INFO"

    def setup_logging(self) -> None:
        level = logging.DEBUG if self.debug else getattr(
            logging, self.log_level.upper(), logging.INFO
        )

        logger = logging.getLogger("share_saver")
        logger.setLevel(level)

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name."""
    return logging.getLogger(f"share_saver.{name}")
