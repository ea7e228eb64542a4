"""Tests for web content fetching and its TTL cache."""
import asyncio

import httpx
import pytest

from insight_engine.exceptions import FetchError
from insight_engine.services.cache import InMemoryCacheStore, RedisCacheStore
from insight_engine.services.web_fetcher import WebContentFetcher, html_to_text

PAGE = """
<html><head><title>H&M news</title><style>p {color: red}</style></head>
<body><script>var x = 1;</script><h1>News</h1><p>We launched a resale platform.</p></body></html>
"""


def _fetcher(handler, store=None, ttl=3600):
    return WebContentFetcher(
        store or InMemoryCacheStore(), ttl=ttl, transport=httpx.MockTransport(handler)
    )


def test_html_to_text_keeps_visible_text_only():
    text = html_to_text(PAGE)

    assert "We launched a resale platform." in text
    assert "News" in text
    assert "var x" not in text
    assert "color: red" not in text


def test_second_fetch_is_served_from_cache():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, text=PAGE)

    fetcher = _fetcher(handler)

    first = asyncio.run(fetcher.fetch("https://hmgroup.com/media/news/"))
    second = asyncio.run(fetcher.fetch("https://hmgroup.com/media/news/"))

    assert first == second
    assert len(requests) == 1


def test_expired_entry_is_refetched():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, text=PAGE)

    fetcher = _fetcher(handler, ttl=0)
    asyncio.run(fetcher.fetch("https://example.com/a"))
    asyncio.run(fetcher.fetch("https://example.com/a"))

    assert len(requests) == 2


def test_http_error_raises_fetch_error():
    fetcher = _fetcher(lambda request: httpx.Response(503, text="busy"))

    with pytest.raises(FetchError) as exc_info:
        asyncio.run(fetcher.fetch("https://example.com/down"))
    assert exc_info.value.url == "https://example.com/down"


def test_empty_page_raises_fetch_error():
    fetcher = _fetcher(lambda request: httpx.Response(200, text="<html><body></body></html>"))

    with pytest.raises(FetchError):
        asyncio.run(fetcher.fetch("https://example.com/empty"))


class BrokenRedis:
    def get(self, key):
        raise ConnectionError("redis down")

    def setex(self, key, ttl, value):
        raise ConnectionError("redis down")


def test_redis_store_falls_back_to_memory():
    store = RedisCacheStore(BrokenRedis())

    store.set("scrape:x", "cached text", 60)

    assert store.get("scrape:x") == "cached text"


def test_invalid_url_raises_fetch_error():
    requests = []
    fetcher = _fetcher(lambda request: requests.append(request) or httpx.Response(200, text=PAGE))

    with pytest.raises(FetchError):
        asyncio.run(fetcher.fetch("https://example.com/\x01bad"))
    assert requests == []
