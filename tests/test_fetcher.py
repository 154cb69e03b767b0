"""Tests for the album page fetcher."""

from unittest.mock import MagicMock

import pytest
import requests

from photo_frame_feeds.config import FetchConfig
from photo_frame_feeds.errors import AlbumUnreachable
from photo_frame_feeds.fetcher import RequestsPageFetcher


def _session(status_code: int = 200, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    session = MagicMock()
    session.get.return_value = response
    return session


def test_fetch_returns_page_text():
    session = _session(text="<html>album</html>")
    fetcher = RequestsPageFetcher(FetchConfig(timeout=7, user_agent="FrameBot/1.0"), session=session)

    assert fetcher.fetch("https://photos.app.goo.gl/abc") == "<html>album</html>"

    args, kwargs = session.get.call_args
    assert args == ("https://photos.app.goo.gl/abc",)
    assert kwargs["headers"]["User-Agent"] == "FrameBot/1.0"
    assert kwargs["timeout"] == 7
    assert kwargs["allow_redirects"] is True


@pytest.mark.parametrize("status_code", [301, 403, 404, 500])
def test_non_success_status_raises_album_unreachable(status_code):
    fetcher = RequestsPageFetcher(session=_session(status_code=status_code))

    with pytest.raises(AlbumUnreachable) as exc_info:
        fetcher.fetch("https://photos.app.goo.gl/abc")

    assert exc_info.value.upstream_status == status_code
    assert f"HTTP {status_code}" in exc_info.value.message


def test_network_error_raises_album_unreachable():
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("connection refused")
    fetcher = RequestsPageFetcher(session=session)

    with pytest.raises(AlbumUnreachable) as exc_info:
        fetcher.fetch("https://photos.app.goo.gl/abc")

    assert exc_info.value.upstream_status is None
