"""
Lambda function to rotate due photo feeds across all tokens.
Triggered by EventBridge on a fixed schedule.
"""

import json
import logging
from typing import Any, Dict

from photo_frame_feeds.config import load_config
from photo_frame_feeds.rotation import sweep_all_feeds
from photo_frame_feeds.store import build_store

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

config = load_config()
store = None


def get_store():
    global store
    if store is None:
        store = build_store(config.store)
    return store


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Rotate every feed whose interval has elapsed.
    Failures are logged, never raised: the next scheduled run retries.
    """
    try:
        sweep_all_feeds(get_store())
    except Exception as e:
        logger.error(f"Error in rotate-feeds: {str(e)}", exc_info=True)

    return {
        'statusCode': 200,
        'body': json.dumps({'message': 'Sweep complete'})
    }
