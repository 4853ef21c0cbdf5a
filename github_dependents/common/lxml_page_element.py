"""lxml-backed PageElement and the parser for fetched pages."""

from __future__ import annotations

from urllib.parse import urljoin

from lxml import html as lxml_html
from lxml.etree import ParserError

from github_dependents.common.checked_html import CheckedHtmlElement
from github_dependents.common.exceptions import ScraperAssumptionException
from github_dependents.common.page_element import Link
from github_dependents.common.text_utils import decode_text
from github_dependents.data_types import Response


class LxmlPageElement:
    """PageElement over a CheckedHtmlElement.

    Every element produced from a page carries that page's URL, which is
    used to resolve relative hrefs and is reported in structural errors.
    """

    def __init__(self, element: CheckedHtmlElement, url: str = "") -> None:
        self._element = element
        self._url = url

    @property
    def url(self) -> str:
        return self._url

    def query_xpath(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[LxmlPageElement]:
        matches = self._element.checked_xpath(
            selector, description, min_count, max_count
        )
        return [LxmlPageElement(match, self._url) for match in matches]

    def text_content(self) -> str:
        return self._element.text_content()

    def decoded_text(self) -> str:
        return decode_text(self.text_content())

    def get_attribute(self, name: str) -> str | None:
        return self._element.get(name) or None

    def find_links(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[Link]:
        """Resolve the <a> elements matched by selector into Links.

        The count check covers every match; anchors without an href are
        dropped afterwards.
        """
        links: list[Link] = []
        anchors = self.query_xpath(selector, description, min_count, max_count)
        for position, anchor in enumerate(anchors, start=1):
            href = anchor.get_attribute("href")
            if href is None:
                continue
            links.append(
                Link(
                    url=urljoin(self._url, decode_text(href)),
                    text=anchor.decoded_text(),
                    selector=f"({selector})[{position}]",
                )
            )
        return links


def page_from_response(response: Response) -> LxmlPageElement:
    """Parse a fetched page.

    lxml is given the raw bytes so it can honour the page's declared
    charset.

    Raises:
        ScraperAssumptionException: If the body is not parseable HTML.
    """
    try:
        root = lxml_html.fromstring(response.content)
    except (ParserError, ValueError) as e:
        raise ScraperAssumptionException(
            f"Failed to parse HTML: {e}",
            request_url=response.url,
            context={"error": str(e)},
        ) from e
    return LxmlPageElement(CheckedHtmlElement(root, response.url), response.url)
