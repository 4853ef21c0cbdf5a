"""XPath queries that check how many nodes they matched.

The dependents page is scraped positionally, so a selector that silently
matches nothing (or too much) would produce wrong records instead of an
error. CheckedHtmlElement turns such mismatches into
HTMLStructuralAssumptionException.
"""

from __future__ import annotations

from lxml.html import HtmlElement

from github_dependents.common.exceptions import (
    HTMLStructuralAssumptionException,
)


class CheckedHtmlElement:
    """An lxml element whose queries validate their result count.

    Unknown attributes fall through to the wrapped element, so ``tag``,
    ``get()`` and ``text_content()`` work as on HtmlElement.

    Example::

        root = CheckedHtmlElement(lxml.html.fromstring(body), url)
        (box,) = root.checked_xpath(CONTENT_BOX, "dependents box", 1, 1)
    """

    def __init__(self, element: HtmlElement, request_url: str = "") -> None:
        self._element = element
        self._request_url = request_url

    @property
    def request_url(self) -> str:
        """URL reported in structural errors raised by this element."""
        return self._request_url

    def checked_xpath(
        self,
        xpath: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[CheckedHtmlElement]:
        """Return the elements matched by xpath.

        Text and attribute results are ignored.

        Raises:
            HTMLStructuralAssumptionException: If fewer than min_count or
                more than max_count elements matched.
        """
        nodes = [
            CheckedHtmlElement(node, self._request_url)
            for node in self._element.xpath(xpath)
            if isinstance(node, HtmlElement)
        ]
        self._check_count(xpath, description, min_count, max_count, len(nodes))
        return nodes

    def _check_count(
        self,
        xpath: str,
        description: str,
        min_count: int,
        max_count: int | None,
        found: int,
    ) -> None:
        too_few = found < min_count
        too_many = max_count is not None and found > max_count
        if too_few or too_many:
            raise HTMLStructuralAssumptionException(
                selector=xpath,
                description=description,
                expected_min=min_count,
                expected_max=max_count,
                actual_count=found,
                request_url=self._request_url,
            )

    def __getattr__(self, name: str):
        return getattr(self._element, name)
