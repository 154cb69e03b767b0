"""Configuration management."""

import os
from dataclasses import dataclass, field

try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass  # python-dotenv is optional

from .extractor import DEFAULT_FALLBACK_MIN_LENGTH, DEFAULT_MAX_MARKUP_CHARS

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


@dataclass
class StoreConfig:
    """Feed store configuration."""
    backend: str = "sqlite"          # "sqlite" or "dynamodb"
    db_path: str = "feeds.db"
    table_name: str = "photo_feeds"
    region: str = "us-east-1"


@dataclass
class FetchConfig:
    """Album page fetch configuration."""
    timeout: float = 20.0
    user_agent: str = DEFAULT_USER_AGENT
    max_markup_chars: int = DEFAULT_MAX_MARKUP_CHARS


@dataclass
class ExtractionConfig:
    """Photo URL extraction configuration."""
    fallback_min_length: int = DEFAULT_FALLBACK_MIN_LENGTH


@dataclass
class AppConfig:
    """Complete application configuration."""
    store: StoreConfig = field(default_factory=StoreConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)


def _int_env(key: str, default: int) -> int:
    value = os.getenv(key, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {value!r}")


def _float_env(key: str, default: float) -> float:
    value = os.getenv(key, "").strip()
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {value!r}")


def load_config() -> AppConfig:
    """
    Load configuration from environment variables.

    Raises:
        ValueError: If a value is present but invalid.
    """
    backend = os.getenv("FEED_STORE_BACKEND", "sqlite").strip().lower()
    if backend not in ("sqlite", "dynamodb"):
        raise ValueError(f"FEED_STORE_BACKEND must be 'sqlite' or 'dynamodb', got {backend!r}")

    return AppConfig(
        store=StoreConfig(
            backend=backend,
            db_path=os.getenv("FEED_DB_PATH", "feeds.db"),
            table_name=os.getenv("DYNAMODB_TABLE_FEEDS", "photo_feeds"),
            region=os.getenv("AWS_REGION", "us-east-1"),
        ),
        fetch=FetchConfig(
            timeout=_float_env("ALBUM_FETCH_TIMEOUT", 20.0),
            user_agent=os.getenv("ALBUM_USER_AGENT", DEFAULT_USER_AGENT),
            max_markup_chars=_int_env("MAX_MARKUP_CHARS", DEFAULT_MAX_MARKUP_CHARS),
        ),
        extraction=ExtractionConfig(
            fallback_min_length=_int_env("FALLBACK_MIN_URL_LENGTH", DEFAULT_FALLBACK_MIN_LENGTH),
        ),
    )
