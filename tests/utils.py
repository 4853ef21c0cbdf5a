"""Test utilities: canned fetch capabilities and page helpers."""

from typing import Any

from lxml import html

from github_dependents.common.checked_html import CheckedHtmlElement
from github_dependents.common.exceptions import RequestTransportException
from github_dependents.common.lxml_page_element import LxmlPageElement
from github_dependents.data_types import Response


def make_page(content: str, url: str = "https://github.com/octo/lib/network/dependents") -> LxmlPageElement:
    """Parse an HTML string into a page element."""
    return LxmlPageElement(CheckedHtmlElement(html.fromstring(content), url), url)


def make_row(content: str, url: str = "https://github.com/octo/lib/network/dependents") -> LxmlPageElement:
    """Parse a single row fragment into a page element."""
    return LxmlPageElement(
        CheckedHtmlElement(html.fragment_fromstring(content.strip()), url), url
    )


def make_response(content: str, url: str) -> Response:
    return Response(
        status_code=200,
        headers={"content-type": "text/html; charset=utf-8"},
        content=content.encode("utf-8"),
        text=content,
        url=url,
    )


class FakeRequestManager:
    """Serves canned pages by URL and records every fetch.

    Unknown URLs fail like an unreachable host. redirects maps a requested
    URL to the URL that is actually served, as after an HTTP redirect.
    """

    def __init__(
        self, pages: dict[str, str], redirects: dict[str, str] | None = None
    ) -> None:
        self.pages = pages
        self.redirects = redirects or {}
        self.fetched: list[str] = []
        self.closed = False

    def fetch(self, url: str) -> Response:
        self.fetched.append(url)
        final_url = self.redirects.get(url, url)
        if final_url not in self.pages:
            raise RequestTransportException(url=url, reason="unknown host")
        return make_response(self.pages[final_url], final_url)

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeRequestManager":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class AsyncFakeRequestManager(FakeRequestManager):
    """Async flavour of FakeRequestManager."""

    async def fetch(self, url: str) -> Response:  # type: ignore[override]
        return FakeRequestManager.fetch(self, url)
