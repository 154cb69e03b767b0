"""Tests for the scheduled rotation Lambda handler."""

from datetime import timedelta

from conftest import load_lambda_handler

from photo_frame_feeds.errors import StoreUnavailable
from photo_frame_feeds.models import Feed, format_timestamp, utc_now
from photo_frame_feeds.store import load_feeds, save_feeds


def test_sweep_rotates_due_feeds(store, monkeypatch):
    monkeypatch.setenv("FEED_STORE_BACKEND", "sqlite")
    module = load_lambda_handler("rotate-feeds")
    module.store = store
    stale = format_timestamp(utc_now() - timedelta(hours=3))
    save_feeds(store, "t1", [Feed(
        id="f1",
        album_url="https://photos.app.goo.gl/abc",
        photos=["https://host/a=w1200-h1600-c", "https://host/b=w1200-h1600-c"],
        current_photo="https://host/a=w1200-h1600-c",
        last_update=stale,
        photo_count=2,
    )])

    response = module.lambda_handler({"source": "aws.events"}, None)

    assert response["statusCode"] == 200
    assert load_feeds(store, "t1")[0].last_update != stale


def test_sweep_failure_is_not_raised(monkeypatch):
    monkeypatch.setenv("FEED_STORE_BACKEND", "sqlite")
    module = load_lambda_handler("rotate-feeds")

    def broken_store():
        raise StoreUnavailable("cannot connect")

    monkeypatch.setattr(module, "get_store", broken_store)

    response = module.lambda_handler({}, None)

    assert response["statusCode"] == 200
