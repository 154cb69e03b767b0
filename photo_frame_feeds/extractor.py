"""Photo URL extraction from shared album pages."""

import logging
import re
from typing import Iterable, List

from .sizing import base_url

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_MIN_LENGTH = 40
DEFAULT_MAX_MARKUP_CHARS = 5_000_000

# Persistent web share links: .../pw/<id>
SHARE_LINK_PATTERN = re.compile(r"https://lh3\.googleusercontent\.com/pw/[A-Za-z0-9_-]+")
# Any long opaque id directly under the host
LONG_ID_PATTERN = re.compile(r"https://lh3\.googleusercontent\.com/[A-Za-z0-9_-]{20,}")
# Last resort: host prefix up to whitespace, quotes, brackets or parens
LOOSE_PATTERN = re.compile(r"https://lh3\.googleusercontent\.com/[^\s\"'<>)}\]]+")
TRAILING_PUNCTUATION = re.compile(r"[,;:)\]}>'\"]+$")


def _unique(urls: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(urls))


def _loose_matches(markup: str, min_length: int) -> List[str]:
    cleaned = []
    for match in LOOSE_PATTERN.findall(markup):
        url = TRAILING_PUNCTUATION.sub("", base_url(match))
        if len(url) >= min_length:
            cleaned.append(url)
    return _unique(cleaned)


def extract_photo_urls(
    markup: str,
    min_length: int = DEFAULT_FALLBACK_MIN_LENGTH,
    max_chars: int = DEFAULT_MAX_MARKUP_CHARS,
) -> List[str]:
    """
    Extract unique base photo URLs from album page markup.

    The share-link and long-id patterns are tried first and their results
    merged. Only when both find nothing is the loose pattern used, since it
    may pick up unrelated host URLs.

    Args:
        markup: Raw page text. Need not be well-formed.
        min_length: Shortest URL accepted from the loose pattern.
        max_chars: Markup beyond this many characters is not scanned.

    Returns:
        Base URLs in first-seen order. Empty when nothing matched.
    """
    if not markup:
        return []

    if len(markup) > max_chars:
        logger.warning(f"Album markup is {len(markup)} chars, scanning only the first {max_chars}")
        markup = markup[:max_chars]

    share_links = SHARE_LINK_PATTERN.findall(markup)
    long_ids = LONG_ID_PATTERN.findall(markup)
    urls = _unique(share_links + long_ids)
    if urls:
        logger.debug(f"Matched {len(share_links)} share links and {len(long_ids)} long-id URLs")
        return urls

    urls = _loose_matches(markup, min_length)
    if urls:
        logger.info(f"Precise patterns found nothing, loose pattern matched {len(urls)} URLs")
    else:
        logger.info("No photo URLs found in album markup")
    return urls
