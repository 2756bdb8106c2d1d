# core/config.py
import os
import logging
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _env_bool(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///openshelf.db")

    # Open Library
    openlibrary_base_url: str = os.getenv("OPENLIBRARY_BASE_URL", "https://openlibrary.org")
    openlibrary_covers_url: str = os.getenv("OPENLIBRARY_COVERS_URL", "https://covers.openlibrary.org")
    openlibrary_timeout: float = float(os.getenv("OPENLIBRARY_TIMEOUT", "5"))

    # Images
    image_dir: str = os.getenv("IMAGE_DIR", "data/images")
    download_images: bool = _env_bool("DOWNLOAD_IMAGES")

    # Concurrency
    enrich_workers: int = int(os.getenv("ENRICH_WORKERS", "8"))

    # Security
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Attach a stream handler to the root logger if none is configured yet."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel((level or settings.log_level).upper())
