"""Key-value storage for per-token feed collections."""

import json
import logging
import sqlite3
from abc import ABC, abstractmethod
from typing import List, Optional

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from .errors import StoreUnavailable
from .models import Feed

logger = logging.getLogger(__name__)

KEY_PREFIX = "user_"
FEEDS_SUFFIX = "_feeds"
DEFAULT_TOKEN = "default"


def feeds_key(token: Optional[str]) -> str:
    """Store key holding the feed collection of a token."""
    return f"{KEY_PREFIX}{token or DEFAULT_TOKEN}{FEEDS_SUFFIX}"


class FeedStore(ABC):
    """Abstract key-value store. Implementations raise StoreUnavailable on failure."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""
        pass

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        pass

    @abstractmethod
    def list_keys(self, prefix: str) -> List[str]:
        """Return every key starting with prefix."""
        pass


class SqliteFeedStore(FeedStore):
    """SQLite-backed store for local runs."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        try:
            self.conn = sqlite3.connect(db_path)
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS feed_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
            self.conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Cannot open feed store at {db_path}: {e}")
            raise StoreUnavailable(f"Cannot open feed store: {e}")

    def get(self, key: str) -> Optional[str]:
        try:
            cursor = self.conn.execute("SELECT value FROM feed_store WHERE key = ?", (key,))
            row = cursor.fetchone()
        except sqlite3.Error as e:
            logger.error(f"SQLite error reading {key}: {e}")
            raise StoreUnavailable(f"Cannot read feeds: {e}")
        return row[0] if row else None

    def put(self, key: str, value: str) -> None:
        try:
            self.conn.execute(
                "INSERT OR REPLACE INTO feed_store (key, value) VALUES (?, ?)",
                (key, value)
            )
            self.conn.commit()
        except sqlite3.Error as e:
            logger.error(f"SQLite error writing {key}: {e}")
            raise StoreUnavailable(f"Cannot write feeds: {e}")

    def list_keys(self, prefix: str) -> List[str]:
        # Escape LIKE wildcards so tokens containing "_" or "%" match literally
        pattern = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_") + "%"
        try:
            cursor = self.conn.execute(
                "SELECT key FROM feed_store WHERE key LIKE ? ESCAPE '\\' ORDER BY key",
                (pattern,)
            )
            return [row[0] for row in cursor.fetchall()]
        except sqlite3.Error as e:
            logger.error(f"SQLite error listing {prefix!r}: {e}")
            raise StoreUnavailable(f"Cannot list feed collections: {e}")

    def close(self) -> None:
        self.conn.close()


class DynamoFeedStore(FeedStore):
    """DynamoDB-backed store. The table's hash key is "key", the payload is "value"."""

    def __init__(self, table):
        self.table = table

    def get(self, key: str) -> Optional[str]:
        try:
            response = self.table.get_item(Key={'key': key})
        except (ClientError, BotoCoreError) as e:
            logger.error(f"DynamoDB error reading {key}: {e}")
            raise StoreUnavailable(f"Cannot read feeds: {e}")
        if 'Item' not in response:
            return None
        return response['Item'].get('value')

    def put(self, key: str, value: str) -> None:
        try:
            self.table.put_item(Item={'key': key, 'value': value})
        except (ClientError, BotoCoreError) as e:
            logger.error(f"DynamoDB error writing {key}: {e}")
            raise StoreUnavailable(f"Cannot write feeds: {e}")

    def list_keys(self, prefix: str) -> List[str]:
        keys = []
        scan_kwargs = {
            'FilterExpression': Attr('key').begins_with(prefix),
            'ProjectionExpression': '#k',
            'ExpressionAttributeNames': {'#k': 'key'},
        }
        try:
            while True:
                response = self.table.scan(**scan_kwargs)
                keys.extend(item['key'] for item in response.get('Items', []))
                last_key = response.get('LastEvaluatedKey')
                if not last_key:
                    break
                scan_kwargs['ExclusiveStartKey'] = last_key
        except (ClientError, BotoCoreError) as e:
            logger.error(f"DynamoDB error listing {prefix!r}: {e}")
            raise StoreUnavailable(f"Cannot list feed collections: {e}")
        return keys


def build_store(config) -> FeedStore:
    """Create the store selected by a StoreConfig."""
    if config.backend == "dynamodb":
        dynamodb = boto3.resource('dynamodb', config=Config(region_name=config.region))
        return DynamoFeedStore(dynamodb.Table(config.table_name))
    return SqliteFeedStore(config.db_path)


def decode_feeds(raw: Optional[str], key: str = "") -> List[Feed]:
    """Decode a stored collection; a missing value is an empty collection."""
    if not raw:
        return []
    try:
        return [Feed.from_dict(item) for item in json.loads(raw)]
    except (AttributeError, TypeError, ValueError, KeyError) as e:
        logger.error(f"Corrupt feed collection {key}: {e}")
        raise StoreUnavailable(f"Stored feed collection is corrupt: {e}")


def encode_feeds(feeds: List[Feed]) -> str:
    return json.dumps([feed.to_dict() for feed in feeds], ensure_ascii=False)


def load_feeds(store: FeedStore, token: Optional[str]) -> List[Feed]:
    key = feeds_key(token)
    return decode_feeds(store.get(key), key)


def save_feeds(store: FeedStore, token: Optional[str], feeds: List[Feed]) -> None:
    store.put(feeds_key(token), encode_feeds(feeds))
