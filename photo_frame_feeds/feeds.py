"""Feed lifecycle operations for one token's collection.

Every operation reads the whole collection, changes it and writes it back.
There is no locking: concurrent writers to the same token overwrite each
other and the last write wins.
"""

import logging
import random
import uuid
from datetime import datetime
from typing import Any, List, Optional

from .config import ExtractionConfig, FetchConfig
from .errors import FeedNotFound, MissingAlbumUrl, NoPhotosFound
from .extractor import extract_photo_urls
from .fetcher import PageFetcher
from .models import (
    DEFAULT_FEED_NAME,
    Feed,
    format_timestamp,
    parse_interval,
    parse_size_profile,
    utc_now,
)
from .rotation import pick_photo, rotate
from .sizing import resize_all
from .store import FeedStore, load_feeds, save_feeds

logger = logging.getLogger(__name__)


def _find_feed(feeds: List[Feed], feed_id: Optional[str]) -> Feed:
    for feed in feeds:
        if feed.id == feed_id:
            return feed
    raise FeedNotFound()


def list_feeds(store: FeedStore, token: Optional[str]) -> List[Feed]:
    """Return the token's feeds in creation order."""
    return load_feeds(store, token)


def create_feed(
    store: FeedStore,
    fetcher: PageFetcher,
    token: Optional[str],
    album_url: Optional[str],
    name: Optional[str] = None,
    interval: Any = None,
    size: Any = None,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
    extraction: Optional[ExtractionConfig] = None,
    fetch_config: Optional[FetchConfig] = None,
) -> Feed:
    """
    Create a feed from a shared album and append it to the token's collection.

    Nothing is stored unless the album yields at least one photo.

    Args:
        store: Feed store.
        fetcher: Album page fetcher.
        token: Partition key of the collection.
        album_url: Shared album URL.
        name: Display name, defaults to "Unnamed Feed".
        interval: Rotation interval (seconds or label), defaults to one hour.
        size: Size profile key, defaults to portrait.

    Returns:
        The new feed.

    Raises:
        MissingAlbumUrl: If album_url is empty.
        UnknownSizeProfile: If size is not a known profile.
        AlbumUnreachable: If the album page cannot be fetched.
        NoPhotosFound: If no photo URLs could be extracted.
        StoreUnavailable: If the collection cannot be read or written.
    """
    album_url = (album_url or "").strip()
    if not album_url:
        raise MissingAlbumUrl()

    profile = parse_size_profile(size)
    extraction = extraction or ExtractionConfig()
    fetch_config = fetch_config or FetchConfig()

    logger.info(f"Creating feed from album {album_url} ({profile.value})")
    markup = fetcher.fetch(album_url)
    base_urls = extract_photo_urls(
        markup,
        min_length=extraction.fallback_min_length,
        max_chars=fetch_config.max_markup_chars,
    )
    if not base_urls:
        raise NoPhotosFound()

    photos = resize_all(base_urls, profile)
    now = now or utc_now()
    feed = Feed(
        id=str(uuid.uuid4()),
        name=name or DEFAULT_FEED_NAME,
        album_url=album_url,
        interval=parse_interval(interval),
        size=profile.value,
        photos=photos,
        current_photo=pick_photo(photos, rng),
        last_update=format_timestamp(now),
        photo_count=len(photos),
    )

    feeds = load_feeds(store, token)
    feeds.append(feed)
    save_feeds(store, token, feeds)
    logger.info(f"Created feed {feed.id} with {feed.photo_count} photos")
    return feed


def update_feed(
    store: FeedStore,
    token: Optional[str],
    feed_id: Optional[str],
    name: Optional[str] = None,
    interval: Any = None,
    size: Any = None,
    rng: Optional[random.Random] = None,
) -> Feed:
    """
    Edit a feed's name, interval or size profile.

    Empty values leave the field unchanged. A new size profile re-sizes the
    stored photo URLs (the album is not fetched again) and picks a new
    current photo from them.
    """
    feeds = load_feeds(store, token)
    feed = _find_feed(feeds, feed_id)

    if name:
        feed.name = name
    if interval:
        feed.interval = parse_interval(interval, default=feed.interval)
    if size:
        profile = parse_size_profile(size)
        if profile.value != feed.size:
            feed.size = profile.value
            feed.photos = resize_all(feed.photos, profile)
            feed.photo_count = len(feed.photos)
            if feed.photos:
                feed.current_photo = pick_photo(feed.photos, rng)
            logger.info(f"Resized feed {feed.id} to {profile.value}")

    save_feeds(store, token, feeds)
    return feed


def delete_feed(store: FeedStore, token: Optional[str], feed_id: Optional[str]) -> None:
    """Remove a feed from the token's collection."""
    feeds = load_feeds(store, token)
    remaining = [feed for feed in feeds if feed.id != feed_id]
    if len(remaining) == len(feeds):
        raise FeedNotFound()
    save_feeds(store, token, remaining)
    logger.info(f"Deleted feed {feed_id}")


def refresh_feed(
    store: FeedStore,
    token: Optional[str],
    feed_id: Optional[str],
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> Feed:
    """Rotate a feed immediately, regardless of its interval."""
    feeds = load_feeds(store, token)
    feed = _find_feed(feeds, feed_id)
    if not feed.photos:
        raise FeedNotFound(f"Feed {feed_id} has no photos")

    rotate(feed, now or utc_now(), rng)
    save_feeds(store, token, feeds)
    return feed


def resolve_photo(store: FeedStore, token: Optional[str], feed_id: Optional[str]) -> str:
    """Return the URL of the feed's current photo without changing anything."""
    feed = _find_feed(load_feeds(store, token), feed_id)
    if not feed.current_photo:
        raise FeedNotFound()
    return feed.current_photo
