"""
Lambda function for feed management and photo redirects.
"""

import json
import logging
from typing import Any, Dict, Optional

from photo_frame_feeds.config import load_config
from photo_frame_feeds.errors import FeedError
from photo_frame_feeds.feeds import (
    create_feed,
    delete_feed,
    list_feeds,
    refresh_feed,
    resolve_photo,
    update_feed,
)
from photo_frame_feeds.fetcher import RequestsPageFetcher
from photo_frame_feeds.store import DEFAULT_TOKEN, build_store

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

config = load_config()

# Created on first use
store = None
fetcher = None

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'GET,POST,DELETE,OPTIONS'
}


def get_store():
    global store
    if store is None:
        store = build_store(config.store)
    return store


def get_fetcher():
    global fetcher
    if fetcher is None:
        fetcher = RequestsPageFetcher(config.fetch)
    return fetcher


def json_response(status_code: int, payload: Any) -> Dict[str, Any]:
    return {
        'statusCode': status_code,
        'headers': {**CORS_HEADERS, 'Content-Type': 'application/json'},
        'body': json.dumps(payload, ensure_ascii=False)
    }


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Handle feed API requests.

    Routes:
    - GET /api/feeds - List feeds for token
    - POST /api/feed/create - Create feed from album URL
    - POST /api/feed/update - Edit name, interval or size
    - DELETE /api/feed/delete?id= - Delete feed
    - POST /api/feed/refresh?id= - Pick a new photo now
    - GET /photo?token=&id= - Redirect to the current photo
    """
    try:
        http_method = event.get('httpMethod', '')
        path = event.get('path', '')
        query = event.get('queryStringParameters') or {}
        body = json.loads(event.get('body', '{}') or '{}')
        if not isinstance(body, dict):
            return json_response(400, {'error': 'Request body must be a JSON object'})

        if http_method == 'OPTIONS':
            return {
                'statusCode': 200,
                'headers': CORS_HEADERS,
                'body': ''
            }

        token = query.get('token') or DEFAULT_TOKEN
        feed_id = query.get('id')

        if path == '/api/feeds' and http_method == 'GET':
            return handle_list_feeds(token)
        elif path == '/api/feed/create' and http_method == 'POST':
            return handle_create_feed(token, body)
        elif path == '/api/feed/update' and http_method in ('POST', 'PUT'):
            return handle_update_feed(token, body)
        elif path == '/api/feed/delete' and http_method in ('POST', 'DELETE'):
            return handle_delete_feed(token, feed_id)
        elif path == '/api/feed/refresh' and http_method == 'POST':
            return handle_refresh_feed(token, feed_id)
        elif path == '/photo' and http_method == 'GET':
            return handle_photo(query.get('token'), feed_id)
        else:
            return json_response(404, {'error': 'Not found'})

    except FeedError as e:
        logger.warning(f"Feed request failed: {e.message}")
        return json_response(e.status_code, {'error': e.message})
    except json.JSONDecodeError:
        return json_response(400, {'error': 'Invalid JSON body'})
    except Exception as e:
        logger.error(f"Error in feed-api: {str(e)}", exc_info=True)
        return json_response(500, {'error': 'Internal server error'})


def handle_list_feeds(token: str) -> Dict[str, Any]:
    """List all feeds for token."""
    feeds = list_feeds(get_store(), token)
    return json_response(200, [feed.to_dict() for feed in feeds])


def handle_create_feed(token: str, body: Dict[str, Any]) -> Dict[str, Any]:
    """Create a new feed."""
    feed = create_feed(
        get_store(),
        get_fetcher(),
        token,
        body.get('albumUrl'),
        name=body.get('name'),
        interval=body.get('interval'),
        size=body.get('size'),
        extraction=config.extraction,
        fetch_config=config.fetch,
    )
    return json_response(201, feed.to_dict())


def handle_update_feed(token: str, body: Dict[str, Any]) -> Dict[str, Any]:
    """Update feed settings."""
    feed = update_feed(
        get_store(),
        token,
        body.get('feedId'),
        name=body.get('name'),
        interval=body.get('interval'),
        size=body.get('size'),
    )
    return json_response(200, feed.to_dict())


def handle_delete_feed(token: str, feed_id: Optional[str]) -> Dict[str, Any]:
    """Delete feed."""
    delete_feed(get_store(), token, feed_id)
    return json_response(200, {'success': True})


def handle_refresh_feed(token: str, feed_id: Optional[str]) -> Dict[str, Any]:
    """Rotate feed now."""
    feed = refresh_feed(get_store(), token, feed_id)
    return json_response(200, feed.to_dict())


def handle_photo(token: Optional[str], feed_id: Optional[str]) -> Dict[str, Any]:
    """Redirect to the feed's current photo."""
    if not token or not feed_id:
        return {
            'statusCode': 400,
            'headers': {'Content-Type': 'text/plain'},
            'body': 'Missing parameters'
        }

    photo_url = resolve_photo(get_store(), token, feed_id)
    return {
        'statusCode': 302,
        'headers': {'Location': photo_url, 'Cache-Control': 'no-store'},
        'body': ''
    }
