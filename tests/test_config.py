"""Tests for configuration loading."""

import pytest

from photo_frame_feeds.config import DEFAULT_USER_AGENT, load_config

CONFIG_VARS = [
    "FEED_STORE_BACKEND", "FEED_DB_PATH", "DYNAMODB_TABLE_FEEDS", "AWS_REGION",
    "ALBUM_FETCH_TIMEOUT", "ALBUM_USER_AGENT", "MAX_MARKUP_CHARS", "FALLBACK_MIN_URL_LENGTH",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in CONFIG_VARS:
        monkeypatch.delenv(var, raising=False)


def test_defaults():
    config = load_config()

    assert config.store.backend == "sqlite"
    assert config.store.db_path == "feeds.db"
    assert config.store.table_name == "photo_feeds"
    assert config.fetch.timeout == 20.0
    assert config.fetch.user_agent == DEFAULT_USER_AGENT
    assert config.fetch.max_markup_chars == 5_000_000
    assert config.extraction.fallback_min_length == 40


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("FEED_STORE_BACKEND", "DynamoDB")
    monkeypatch.setenv("DYNAMODB_TABLE_FEEDS", "frames")
    monkeypatch.setenv("AWS_REGION", "eu-west-1")
    monkeypatch.setenv("ALBUM_FETCH_TIMEOUT", "5.5")
    monkeypatch.setenv("MAX_MARKUP_CHARS", "1000")
    monkeypatch.setenv("FALLBACK_MIN_URL_LENGTH", "60")

    config = load_config()

    assert config.store.backend == "dynamodb"
    assert config.store.table_name == "frames"
    assert config.store.region == "eu-west-1"
    assert config.fetch.timeout == 5.5
    assert config.fetch.max_markup_chars == 1000
    assert config.extraction.fallback_min_length == 60


def test_invalid_values_raise(monkeypatch):
    monkeypatch.setenv("MAX_MARKUP_CHARS", "lots")
    with pytest.raises(ValueError, match="MAX_MARKUP_CHARS"):
        load_config()


def test_unknown_backend_raises(monkeypatch):
    monkeypatch.setenv("FEED_STORE_BACKEND", "redis")
    with pytest.raises(ValueError, match="FEED_STORE_BACKEND"):
        load_config()
