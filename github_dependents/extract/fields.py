"""Field extraction for a single dependents row.

A row looks like::

    <div class="Box-row d-flex flex-items-center">
      <img class="avatar" src="https://avatars.githubusercontent.com/u/1?s=40">
      <span class="f5 color-fg-muted">
        <a href="/octocat">octocat</a> / <a href="/octocat/hello">hello</a>
      </span>
      <div class="d-flex flex-auto flex-justify-end">
        <span class="color-fg-muted text-bold pl-3"><svg/> 1,234</span>
        <span class="color-fg-muted text-bold pl-3"><svg/> 56</span>
      </div>
    </div>

Meaning is positional. GitHub offers no semantic markers, so the rules are:

- the first name link is the owner, the second the repository
- the first detail label is the star count, the second the fork count
"""

from __future__ import annotations

import logging

from github_dependents.common.exceptions import (
    HTMLStructuralAssumptionException,
)
from github_dependents.common.page_element import PageElement
from github_dependents.common.text_utils import parse_count
from github_dependents.data_types import Dependent
from github_dependents.extract import selectors

logger = logging.getLogger(__name__)

# Positional contract of a row: (owner link, repository link).
OWNER_LINK_INDEX = 0
REPOSITORY_LINK_INDEX = 1
NAME_LINK_COUNT = 2

# Positional contract of the details block: (stars label, forks label).
STARS_LABEL_INDEX = 0
FORKS_LABEL_INDEX = 1
DETAIL_LABEL_COUNT = 2


def extract_avatar_url(row: PageElement) -> str | None:
    images = row.query_xpath(selectors.AVATAR, "avatar image", min_count=0)
    if not images:
        return None
    return images[0].get_attribute("src")


def extract_counts(row: PageElement) -> tuple[int, int]:
    """Return (stars, forks) for a row.

    Rows without a details block of exactly two labels get (0, 0); a label
    that fails to parse counts as 0.
    """
    details = row.query_xpath(
        selectors.DETAILS, "star/fork details", min_count=0
    )
    if len(details) != 1:
        return 0, 0

    labels = details[0].query_xpath(
        selectors.DETAIL_LABELS, "star/fork labels", min_count=0
    )
    if len(labels) != DETAIL_LABEL_COUNT:
        return 0, 0

    stars = parse_count(labels[STARS_LABEL_INDEX].text_content())
    forks = parse_count(labels[FORKS_LABEL_INDEX].text_content())
    return stars or 0, forks or 0


def extract_dependent(row: PageElement) -> Dependent | None:
    """Extract a Dependent from a row of the dependents box.

    Returns:
        The Dependent, or None when the row has no name links (a row that
        isn't a dependent, such as a notice row).

    Raises:
        HTMLStructuralAssumptionException: If the name span holds one link
            or more than two.
    """
    spans = row.query_xpath(selectors.NAME_SPAN, "name span", min_count=0)
    if not spans:
        logger.debug(f"Discarding row without a name span on {row.url}")
        return None

    links = spans[0].query_xpath(
        selectors.NAME_LINKS, "owner/repository links", min_count=0
    )
    if not links:
        logger.debug(f"Discarding row without name links on {row.url}")
        return None
    if len(links) != NAME_LINK_COUNT:
        raise HTMLStructuralAssumptionException(
            selector=selectors.NAME_LINKS,
            description="owner/repository links",
            expected_min=NAME_LINK_COUNT,
            expected_max=NAME_LINK_COUNT,
            actual_count=len(links),
            request_url=row.url,
        )

    owner = links[OWNER_LINK_INDEX].decoded_text()
    repository = links[REPOSITORY_LINK_INDEX].decoded_text()
    stars, forks = extract_counts(row)

    return Dependent(
        avatar_url=extract_avatar_url(row),
        owner=owner,
        repository=repository,
        stars=stars,
        forks=forks,
    )
