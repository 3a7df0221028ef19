"""Firecrawl wrapper: one crawl per call, text content out."""
import asyncio
from typing import Any

from firecrawl import FirecrawlApp

from research_agent.errors import CrawlError


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def extract_content(result: Any) -> str | None:
    """Pull the text out of a crawl result.

    `data` is either one document with a `content` field, returned verbatim,
    or a list of page documents whose `content` (or `markdown`) is joined.
    """
    data = _field(result, "data")
    if data is None:
        return None
    if isinstance(data, list):
        pages = [_field(doc, "content") or _field(doc, "markdown") for doc in data]
        text = "\n\n".join(p for p in pages if p)
        return text or None
    return _field(data, "content") or None


class FirecrawlCrawler:
    def __init__(self, api_key: str | None) -> None:
        self._api_key = api_key

    async def crawl(self, url: str) -> str:
        """Crawl `url` and return its text. Raises CrawlError when nothing came back."""
        app = FirecrawlApp(api_key=self._api_key)
        # SDK call is blocking and polls until the crawl job finishes
        result = await asyncio.to_thread(app.crawl_url, url)
        content = extract_content(result)
        if not content:
            raise CrawlError("No content found in Firecrawl result.")
        return content
