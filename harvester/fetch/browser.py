"""Browser-like session over a shared HTTP client."""
from functools import cached_property
from typing import Any, Optional

import httpx
import orjson
from selectolax.parser import HTMLParser

from harvester.config import config
from harvester.parse.html_parser import parse_content


class Page:
    """One navigable tab: holds the last response and its content."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client
        self.response: Optional[httpx.Response] = None
        # The URL navigated to; records and pagination are keyed on it
        self.url: Optional[str] = None
        # Where the navigation ended up after redirects
        self.final_url: Optional[str] = None
        self.closed = False

    async def goto(self, url: str) -> Optional[httpx.Response]:
        """Navigate to url and return the response."""
        if self.closed:
            raise RuntimeError("Page is closed")
        self.url = url
        self.response = await self._client.get(url)
        self.final_url = str(self.response.url)
        return self.response

    @property
    def status(self) -> Optional[int]:
        return self.response.status_code if self.response is not None else None

    @property
    def content(self) -> str:
        return self.response.text if self.response is not None else ""

    @cached_property
    def document(self) -> HTMLParser:
        """Parsed markup, built once per page."""
        return parse_content(self.content)

    def json(self) -> Any:
        """Structured payload of the page."""
        return orjson.loads(self.content)

    async def close(self) -> None:
        if self.closed:
            return
        if self.response is not None:
            await self.response.aclose()
        self.closed = True


class BrowserSession:
    """Opens pages on a single pooled client, shared by all site crawls."""

    def __init__(
        self,
        timeout: float = config.REQUEST_TIMEOUT,
        user_agent: str = config.USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        limits = httpx.Limits(
            max_connections=20,
            max_keepalive_connections=10,
        )
        self.client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            limits=limits,
            headers={"User-Agent": self.user_agent},
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client is not None:
            await self.client.aclose()
            self.client = None

    async def new_page(self) -> Page:
        if self.client is None:
            raise RuntimeError("BrowserSession is not open; use 'async with'")
        return Page(self.client)
