"""Test configuration for pytest."""

import importlib.util
import random
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator, Optional

import pytest

from photo_frame_feeds.errors import AlbumUnreachable
from photo_frame_feeds.fetcher import PageFetcher
from photo_frame_feeds.store import SqliteFeedStore

PROJECT_ROOT = Path(__file__).parent.parent

HOST = "https://lh3.googleusercontent.com"


def share_link(n: int) -> str:
    """A share-link base URL with a distinct id per n."""
    return f"{HOST}/pw/AP1GczN{n:03d}xQm7Lr0wKpZt4HcVbY9sDfG8jUe2oI6aR5nTqW"


def long_id_link(n: int) -> str:
    return f"{HOST}/AF1QipM{n:03d}kLsP3dTx9YvBn2WqRz8HcJf5GuEo7Ia"


def album_markup(*urls: str) -> str:
    """Wrap photo URLs the way an album page embeds them."""
    items = ",".join(f'["{url}=w{200 + i}-h{300 + i}-no",{200 + i},{300 + i}]' for i, url in enumerate(urls))
    return f'<html><head><title>Trip</title></head><body><script>var data = [{items}];</script></body></html>'


class FakeFetcher(PageFetcher):
    """Serves fixed markup, or fails like an unreachable album."""

    def __init__(self, markup: str = "", status: Optional[int] = None):
        self.markup = markup
        self.status = status
        self.requested = []

    def fetch(self, url: str) -> str:
        self.requested.append(url)
        if self.status is not None:
            raise AlbumUnreachable(upstream_status=self.status)
        return self.markup


def load_lambda_handler(name: str):
    """Import lambda-functions/<name>/handler.py as a module."""
    path = PROJECT_ROOT / "lambda-functions" / name / "handler.py"
    spec = importlib.util.spec_from_file_location(f"{name.replace('-', '_')}_handler", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def store(tmp_path: Path) -> Generator[SqliteFeedStore, None, None]:
    """Create a throwaway SQLite feed store."""
    feed_store = SqliteFeedStore(str(tmp_path / "feeds.db"))
    yield feed_store
    feed_store.close()


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def three_photo_markup() -> str:
    return album_markup(share_link(1), share_link(2), share_link(3))
