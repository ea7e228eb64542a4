# insight_engine/services/web_fetcher.py
import logging
import re

import httpx
from bs4 import BeautifulSoup

from insight_engine.exceptions import FetchError

logger = logging.getLogger(__name__)

BLANK_LINES = re.compile(r"\n\s*\n+")


def html_to_text(html: str) -> str:
    """Visible text of an HTML page, one block per line."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript", "template"]):
        tag.decompose()
    text = soup.get_text(separator="\n")
    lines = (line.strip() for line in text.splitlines())
    return BLANK_LINES.sub("\n\n", "\n".join(lines)).strip()


class WebContentFetcher:
    """
    Fetch page text for a URL, cached per URL with a TTL.

    Cached entries are served until they expire, even if the page changed.
    """

    def __init__(
        self,
        cache_store,
        ttl: int = 3600,
        timeout: float = 30.0,
        user_agent: str = "insight-engine/0.1",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.cache_store = cache_store
        self.ttl = ttl
        self.timeout = timeout
        self.headers = {"User-Agent": user_agent}
        self.transport = transport

    @staticmethod
    def _cache_key(url: str) -> str:
        return f"scrape:{url}"

    async def fetch(self, url: str) -> str:
        """
        Fetch the visible text of a web page.

        Args:
            url: Page URL

        Returns:
            Page text

        Raises:
            FetchError: On HTTP errors or when the page has no text
        """
        key = self._cache_key(url)
        cached = self.cache_store.get(key)
        if cached:
            logger.info(f"Cache hit for URL: {url}")
            return cached

        logger.info(f"Cache miss for URL: {url}, fetching...")
        try:
            async with httpx.AsyncClient(
                headers=self.headers,
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                resp = await client.get(url)
                resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(f"Fetch failed for {url}: {e}", url=url) from e

        text = html_to_text(resp.text)
        if not text:
            raise FetchError(f"No text content returned for {url}", url=url)

        self.cache_store.set(key, text, self.ttl)
        return text
