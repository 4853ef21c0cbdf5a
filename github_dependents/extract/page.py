"""Page-level extraction for the dependents listing."""

from __future__ import annotations

import logging
from urllib.parse import parse_qs, urlparse

from github_dependents.common.page_element import PageElement
from github_dependents.data_types import Dependent, Package
from github_dependents.extract import selectors
from github_dependents.extract.fields import extract_dependent

logger = logging.getLogger(__name__)


def find_content_box(page: PageElement) -> PageElement:
    """Locate the box that holds the dependent rows.

    Raises:
        HTMLStructuralAssumptionException: If the page has no dependents box
            (wrong URL, changed markup, or a repository without the
            dependents view).
    """
    return page.query_xpath(
        selectors.CONTENT_BOX, "dependents box", min_count=1, max_count=1
    )[0]


def extract_page(page: PageElement) -> list[Dependent]:
    """Extract every dependent listed on a page, in document order.

    Rows that aren't dependents are skipped. A malformed row raises and
    aborts the page.

    Raises:
        HTMLStructuralAssumptionException: If the dependents box is missing
            or a row breaks the owner/repository link contract.
    """
    box = find_content_box(page)
    rows = box.query_xpath(selectors.ROWS, "dependent rows", min_count=0)

    dependents: list[Dependent] = []
    for row in rows:
        dependent = extract_dependent(row)
        if dependent is not None:
            dependents.append(dependent)

    logger.debug(
        f"Extracted {len(dependents)} dependents from {len(rows)} rows on {page.url}"
    )
    return dependents


def extract_packages(page: PageElement) -> list[Package]:
    """List the packages offered by the page's package selector.

    Repositories that publish a single package have no selector, in which
    case the list is empty.
    """
    packages: list[Package] = []
    for link in page.find_links(
        selectors.PACKAGE_MENU_ITEMS, "package menu items", min_count=0
    ):
        package_ids = parse_qs(urlparse(link.url).query).get("package_id")
        if not package_ids:
            continue
        packages.append(
            Package(name=link.text, package_id=package_ids[0], url=link.url)
        )
    return packages
