"""Pagination decisions for the dependents listing.

GitHub pages the dependents listing with a Previous/Next button group and
cursor-style ``dependents_after`` links. Two site conventions are relied on
here, both external-contract assumptions that break if GitHub changes them:

- PAGE_SIZE: the listing shows 30 dependents per page.
- On the last page, "Next" is rendered as a disabled <button> instead of an
  <a> link.
"""

from __future__ import annotations

import logging

from github_dependents.common.page_element import PageElement
from github_dependents.common.text_utils import parse_labelled_count
from github_dependents.data_types import Continue, NextAction, PageState, Stop
from github_dependents.extract import selectors
from github_dependents.extract.page import find_content_box

logger = logging.getLogger(__name__)

PAGE_SIZE = 30
NEXT_LABEL = "next"


def read_total_count(page: PageElement) -> int | None:
    """Read the "N Repositories" label of the listing header.

    Returns None when the label is missing or holds no number.
    """
    labels = find_content_box(page).query_xpath(
        selectors.HEADER_COUNT_LABEL, "dependents count label", min_count=0
    )
    if len(labels) != 1:
        return None
    return parse_labelled_count(labels[0].text_content())


def infer_available_pages(page: PageElement, state: PageState) -> None:
    """Refine state.available_pages from the listing header.

    Only done for multi-page budgets. The estimate is the floor of
    count / PAGE_SIZE, capped at the budget. When the header can't be
    read, the previous value is kept and the traversal relies on the
    presence of a "Next" link alone.
    """
    if state.pages_requested == 1:
        return

    count = read_total_count(page)
    if count is None:
        logger.debug(
            f"No dependents count on {state.url}; following Next links only"
        )
        return

    state.available_pages = min(count // PAGE_SIZE, state.pages_requested)
    logger.debug(
        f"{count} dependents listed; page limit is {state.available_pages}"
    )


def find_next_url(page: PageElement) -> str | None:
    """Return the URL of the "Next" link, or None on the last page."""
    groups = page.query_xpath(
        selectors.PAGINATION, "pagination group", min_count=0
    )
    if not groups:
        return None
    group = groups[0]

    buttons = group.query_xpath(
        selectors.PAGINATION_BUTTONS, "pagination buttons", min_count=0
    )
    if any(button.decoded_text().lower() == NEXT_LABEL for button in buttons):
        return None

    for link in group.find_links(
        selectors.PAGINATION_LINKS, "pagination links", min_count=0
    ):
        if link.text.lower() == NEXT_LABEL:
            return link.url
    return None


def plan_next(page: PageElement, state: PageState) -> NextAction:
    """Decide whether the traversal continues after this page.

    Args:
        page: The page just processed.
        state: Traversal state; pages_visited counts pages processed
            before this one. available_pages is refined on the first page.

    Returns:
        Continue with the next page's URL, or Stop.
    """
    if state.pages_visited == 0:
        infer_available_pages(page, state)

    if state.pages_visited + 1 >= state.page_limit:
        return Stop("page budget reached")

    next_url = find_next_url(page)
    if next_url is None:
        return Stop("no next page")
    return Continue(next_url)
