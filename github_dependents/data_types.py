"""Data types for the dependents scraper.

This module defines the records handed to callers and the small value types
passed between the extractors and the drivers:

- Dependent and Package are the scraped records (pydantic, frozen).
- Response is what a request manager returns for a fetched page.
- PageState is the per-traversal cursor owned by a driver.
- Stop and Continue are the pagination decisions.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

GITHUB_HOST = "github.com"


class Dependent(BaseModel):
    """A repository that depends on the scraped repository.

    Records are only constructed once both owner and repository resolved;
    rows missing either are discarded by the extractor rather than emitted
    as partial records.
    """

    model_config = ConfigDict(frozen=True)

    avatar_url: str | None = Field(
        None, description="Avatar image URL of the owning user/organization"
    )
    owner: str = Field(..., description="Name of the user/organization")
    repository: str = Field(..., description="Name of the repository")
    stars: int = Field(0, ge=0, description="Stargazer count")
    forks: int = Field(0, ge=0, description="Fork count")

    @property
    def full_name(self) -> str:
        """``owner/repository``."""
        return f"{self.owner}/{self.repository}"

    @property
    def url(self) -> str:
        """Repository URL on github.com.

        Records carry no host, so for listings scraped from another GitHub
        instance build the URL from full_name and that host instead.
        """
        return f"https://{GITHUB_HOST}/{self.full_name}"


class Package(BaseModel):
    """A package published from the scraped repository.

    Repositories that publish several packages list dependents per package;
    package_id selects one of them.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Package name as shown in the menu")
    package_id: str = Field(..., description="Opaque package identifier")
    url: str = Field(..., description="Dependents URL scoped to the package")


@dataclass
class Response:
    """HTTP response from fetching a page.

    Modeled after httpx.Response. Request managers create Response objects
    and the drivers parse them into page elements.

    Attributes:
        status_code: HTTP status code (200, 404, etc.).
        headers: Response headers.
        content: Raw response bytes.
        text: Decoded response text.
        url: Final URL of the response, after redirects.
    """

    status_code: int
    headers: dict[str, str]
    content: bytes
    text: str
    url: str


@dataclass
class PageState:
    """Traversal cursor, owned by one stream invocation.

    Attributes:
        url: URL of the page being processed.
        pages_requested: Caller's page budget (at least 1).
        pages_visited: Pages fully processed before the current one.
        available_pages: Page count inferred from the listing header, capped
            at pages_requested. None until inferred; stays None when the
            header can't be read.
    """

    url: str
    pages_requested: int
    pages_visited: int = 0
    available_pages: int | None = None

    @property
    def page_limit(self) -> int:
        """Number of pages the traversal may fetch in total."""
        if self.available_pages is not None:
            return self.available_pages
        return self.pages_requested


@dataclass(frozen=True)
class Stop:
    """End the traversal after the current page."""

    reason: str = ""


@dataclass(frozen=True)
class Continue:
    """Fetch url next."""

    url: str


NextAction = Stop | Continue
