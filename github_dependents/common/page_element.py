"""The read-only view of a parsed page that the extractors work against.

Extractors never see lxml directly; they query through PageElement, which
keeps them testable against any parsed fragment and keeps count checking
in one place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Link:
    """An <a> element reduced to its target and label.

    Attributes:
        url: Absolute URL, resolved against the page URL.
        text: Entity-decoded, stripped link text.
        selector: Selector (with position) that located the link.
    """

    url: str
    text: str
    selector: str


class PageElement(Protocol):
    """An element of a fetched dependents page.

    Queries take a human-readable description and the expected number of
    matches; a count outside [min_count, max_count] raises
    HTMLStructuralAssumptionException.
    """

    @property
    def url(self) -> str: ...

    def query_xpath(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[PageElement]: ...

    def text_content(self) -> str: ...

    def decoded_text(self) -> str:
        """text_content() with entities decoded and whitespace stripped."""
        ...

    def get_attribute(self, name: str) -> str | None:
        """Attribute value; None when missing or empty."""
        ...

    def find_links(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[Link]: ...
