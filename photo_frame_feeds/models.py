"""Data models for photo feeds."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .errors import UnknownSizeProfile


class SizeProfile(Enum):
    """Named target dimensions for the served images."""
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"
    SMALL_PORTRAIT = "small_portrait"
    SMALL_LANDSCAPE = "small_landscape"
    SQUARE = "square"

    @property
    def dimensions(self) -> Tuple[int, int]:
        return _DIMENSIONS[self]

    @property
    def width(self) -> int:
        return _DIMENSIONS[self][0]

    @property
    def height(self) -> int:
        return _DIMENSIONS[self][1]

    @property
    def label(self) -> str:
        name = self.value.replace("_", " ").capitalize()
        return f"{name} ({self.width}×{self.height})"


_DIMENSIONS = {
    SizeProfile.PORTRAIT: (1200, 1600),
    SizeProfile.LANDSCAPE: (1600, 1200),
    SizeProfile.SMALL_PORTRAIT: (480, 800),
    SizeProfile.SMALL_LANDSCAPE: (800, 480),
    SizeProfile.SQUARE: (1600, 1600),
}

DEFAULT_SIZE_PROFILE = SizeProfile.PORTRAIT

# Rotation intervals offered to users, in seconds
INTERVALS = {
    3600: "1 hour",
    21600: "6 hours",
    43200: "12 hours",
    86400: "1 day",
    604800: "1 week",
}

INTERVAL_SHORTHANDS = {
    "1h": 3600,
    "6h": 21600,
    "12h": 43200,
    "1d": 86400,
    "1w": 604800,
}

DEFAULT_INTERVAL = 3600
DEFAULT_FEED_NAME = "Unnamed Feed"


def parse_interval(value: Any, default: int = DEFAULT_INTERVAL) -> int:
    """
    Parse a rotation interval into a positive number of seconds.

    Accepts integers, numeric strings, shorthand labels ("6h") and the
    human labels of INTERVALS ("1 day"). Anything else, including zero and
    negative numbers, falls back to the default.
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, str):
        text = value.strip().lower()
        if text in INTERVAL_SHORTHANDS:
            return INTERVAL_SHORTHANDS[text]
        for seconds, label in INTERVALS.items():
            if text == label:
                return seconds
        value = text

    try:
        seconds = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default

    return seconds if seconds > 0 else default


def parse_size_profile(value: Any) -> SizeProfile:
    """Return the SizeProfile for a key, the default for an empty value."""
    if value is None or value == "":
        return DEFAULT_SIZE_PROFILE
    if isinstance(value, SizeProfile):
        return value
    try:
        return SizeProfile(str(value).strip().lower())
    except ValueError:
        raise UnknownSizeProfile(f"Unknown size profile: {value}")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision and a Z suffix."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware UTC datetime, None if invalid."""
    if not value or not isinstance(value, str):
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass
class Feed:
    """A rotating photo feed backed by one shared album."""
    id: str
    album_url: str
    photos: List[str]
    current_photo: Optional[str]
    last_update: str              # ISO8601 UTC, time of the last rotation
    name: str = DEFAULT_FEED_NAME
    interval: int = DEFAULT_INTERVAL
    size: str = DEFAULT_SIZE_PROFILE.value
    photo_count: int = 0
    extra: Dict[str, Any] = field(default_factory=dict)  # unknown stored fields

    _KNOWN_FIELDS = (
        "id", "name", "albumUrl", "interval", "size",
        "photos", "currentPhoto", "lastUpdate", "photoCount",
    )

    @property
    def last_rotated_at(self) -> Optional[datetime]:
        return parse_timestamp(self.last_update)

    @property
    def size_profile(self) -> SizeProfile:
        return parse_size_profile(self.size)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update({
            "id": self.id,
            "name": self.name,
            "albumUrl": self.album_url,
            "interval": self.interval,
            "size": self.size,
            "photos": list(self.photos),
            "currentPhoto": self.current_photo,
            "lastUpdate": self.last_update,
            "photoCount": self.photo_count,
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Feed":
        photos = list(data.get("photos") or [])
        return cls(
            id=data["id"],
            name=data.get("name") or DEFAULT_FEED_NAME,
            album_url=data.get("albumUrl", ""),
            interval=parse_interval(data.get("interval")),
            size=data.get("size") or DEFAULT_SIZE_PROFILE.value,
            photos=photos,
            current_photo=data.get("currentPhoto"),
            last_update=data.get("lastUpdate") or "",
            photo_count=len(photos),
            extra={k: v for k, v in data.items() if k not in cls._KNOWN_FIELDS},
        )
