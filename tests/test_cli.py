"""Flask CLI commands registered by the app factory."""

from flowsms.models.user import User
from flowsms.services import cache_service


def test_seed_test_users(app):
    result = app.test_cli_runner().invoke(args=["seed-test-users"])
    assert result.exit_code == 0, result.output
    assert User.query.filter_by(email="admin@flow.life").one().role == "admin"
    assert User.query.count() == 4


def test_flush_one_feed(app):
    sheets = cache_service.feed_key("sheets", "abc", "gid=0")
    airtable = cache_service.feed_key("airtable", "base", "01 SURFACE")
    cache_service.set_cached(sheets, [["a"]])
    cache_service.set_cached(airtable, [])

    result = app.test_cli_runner().invoke(args=["flush-feed-cache", "sheets"])
    assert result.exit_code == 0, result.output
    assert cache_service.get_cached(sheets) is None
    assert cache_service.get_cached(airtable) == []


def test_flush_everything(app):
    cache_service.set_cached(cache_service.feed_key("sheets", "abc"), 1)
    cache_service.set_cached(cache_service.feed_key("airtable", "xyz"), 2)

    result = app.test_cli_runner().invoke(args=["flush-feed-cache"])
    assert result.exit_code == 0, result.output
    assert cache_service.clear_all() == 0
