"""Size parameters for hosted photo URLs."""

from typing import Iterable, List

from .models import SizeProfile


def base_url(url: str) -> str:
    """Strip the size/format suffix (everything from the first '=')."""
    return url.split("=", 1)[0]


def sized_url(url: str, profile: SizeProfile) -> str:
    """
    Build the URL serving the photo at the profile's dimensions.

    Any existing suffix is discarded first, so resizing an already sized
    URL gives the same result as resizing its base.

    Args:
        url: Base or sized photo URL.
        profile: Target dimensions.

    Returns:
        URL ending in "=w{width}-h{height}-c" (cropped to fill).
    """
    return f"{base_url(url)}=w{profile.width}-h{profile.height}-c"


def resize_all(urls: Iterable[str], profile: SizeProfile) -> List[str]:
    """Resize every URL, dropping duplicates while keeping first-seen order."""
    return list(dict.fromkeys(sized_url(url, profile) for url in urls))
