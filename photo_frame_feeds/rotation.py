"""Rotation of the current photo of feeds."""

import logging
import random
from datetime import datetime, timezone
from typing import List, Optional

from .errors import FeedError
from .models import Feed, format_timestamp, utc_now
from .store import FEEDS_SUFFIX, KEY_PREFIX, FeedStore, decode_feeds, encode_feeds

logger = logging.getLogger(__name__)


def _as_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def pick_photo(photos: List[str], rng: Optional[random.Random] = None) -> str:
    """Pick a photo uniformly at random. Repeating the previous pick is allowed."""
    return (rng or random).choice(photos)


def is_due(feed: Feed, now: datetime) -> bool:
    """
    Determine whether a feed should rotate at the given time.

    Logic:
    - If the last rotation time is missing or unreadable, return True.
    - If the time since the last rotation is at least the interval, return True.
    - Otherwise return False.

    Args:
        feed: The feed to check.
        now: Current time (timezone-aware UTC).

    Returns:
        True if the feed is due for rotation.
    """
    last_rotated = feed.last_rotated_at
    if last_rotated is None:
        logger.warning(f"Feed {feed.id} has no readable lastUpdate ({feed.last_update!r}), treating as due")
        return True

    return (_as_utc(now) - last_rotated).total_seconds() >= feed.interval


def rotate(feed: Feed, now: datetime, rng: Optional[random.Random] = None) -> None:
    """Select a new current photo and stamp the rotation time."""
    feed.current_photo = pick_photo(feed.photos, rng)
    feed.last_update = format_timestamp(now)


def rotate_due_feeds(
    feeds: List[Feed],
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> int:
    """
    Rotate every feed in a collection that is due.

    Returns:
        Number of feeds rotated.
    """
    now = now or utc_now()
    rotated = 0
    for feed in feeds:
        if not feed.photos:
            logger.warning(f"Feed {feed.id} has no photos, skipping rotation")
            continue
        if is_due(feed, now):
            rotate(feed, now, rng)
            rotated += 1
    return rotated


def sweep_collection(
    store: FeedStore,
    key: str,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> int:
    """Rotate the due feeds of one stored collection, writing back only on change."""
    raw = store.get(key)
    if not raw:
        return 0

    feeds = decode_feeds(raw, key)
    rotated = rotate_due_feeds(feeds, now, rng)
    if rotated:
        store.put(key, encode_feeds(feeds))
    return rotated


def sweep_all_feeds(
    store: FeedStore,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> None:
    """
    Rotate every due feed of every token.

    Each collection is processed independently: an error on one is logged
    and the sweep moves on to the next. Nothing is reported to the caller;
    anything missed is caught by the next sweep since staleness is computed
    from absolute timestamps.
    """
    now = now or utc_now()
    logger.info("Starting feed rotation sweep...")

    try:
        keys = store.list_keys(KEY_PREFIX)
    except FeedError as e:
        logger.error(f"Cannot list feed collections, skipping sweep: {e}")
        return

    collections = 0
    total_rotated = 0
    for key in keys:
        if not key.endswith(FEEDS_SUFFIX):
            continue
        collections += 1
        try:
            rotated = sweep_collection(store, key, now, rng)
            if rotated:
                logger.info(f"Rotated {rotated} feed(s) in {key}")
            total_rotated += rotated
        except Exception as e:
            logger.error(f"Error sweeping {key}: {e}", exc_info=True)
            continue

    logger.info(f"Sweep complete. Rotated {total_rotated} feed(s) across {collections} collection(s)")
