"""Entry points for listing a repository's dependents.

Example::

    from github_dependents.dependents import get_dependents

    for dependent in get_dependents("dotnet", "roslyn", pages=2):
        print(dependent.full_name, dependent.stars)
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from urllib.parse import quote, unquote

from github_dependents.common.lxml_page_element import page_from_response
from github_dependents.common.request_manager import (
    AsyncFetcher,
    Fetcher,
    SyncRequestManager,
)
from github_dependents.data_types import GITHUB_HOST, Dependent, Package
from github_dependents.driver.async_driver import AsyncDriver
from github_dependents.driver.sync_driver import SyncDriver
from github_dependents.extract.page import extract_packages


def dependents_url(
    owner: str,
    repository: str,
    package_id: str | None = None,
    host: str = GITHUB_HOST,
) -> str:
    """Build the URL of the first dependents page.

    package_id may be given raw or already percent-encoded (as it appears
    in GitHub URLs, e.g. ``UGFja2FnZS0xNTY3MzEzNTc%3D``).
    """
    url = f"https://{host}/{owner}/{repository}/network/dependents"
    if package_id is not None:
        url = f"{url}?package_id={quote(unquote(package_id), safe='')}"
    return url


def get_dependents(
    owner: str,
    repository: str,
    package_id: str | None = None,
    pages: int = 1,
    request_manager: Fetcher | None = None,
    timeout: float | None = None,
    host: str = GITHUB_HOST,
) -> Iterator[Dependent]:
    """Lazily list the dependents of owner/repository.

    Args:
        owner: GitHub user or organization, e.g. ``dotnet``.
        repository: Repository name, e.g. ``roslyn``.
        package_id: Optional package to scope the listing to.
        pages: Maximum number of pages to fetch (at least 1).
        request_manager: Optional fetch capability to use instead of a
            fresh SyncRequestManager.
        timeout: Request timeout in seconds for the default request manager.
        host: GitHub host.

    Raises:
        InvalidPageBudgetException: Immediately, if pages < 1.
    """
    driver = SyncDriver(request_manager=request_manager, timeout=timeout)
    return driver.stream(
        dependents_url(owner, repository, package_id, host), pages
    )


def get_dependents_async(
    owner: str,
    repository: str,
    package_id: str | None = None,
    pages: int = 1,
    request_manager: AsyncFetcher | None = None,
    timeout: float | None = None,
    host: str = GITHUB_HOST,
) -> AsyncIterator[Dependent]:
    """Async counterpart of get_dependents()."""
    driver = AsyncDriver(request_manager=request_manager, timeout=timeout)
    return driver.stream(
        dependents_url(owner, repository, package_id, host), pages
    )


def list_packages(
    owner: str,
    repository: str,
    request_manager: Fetcher | None = None,
    timeout: float | None = None,
    host: str = GITHUB_HOST,
) -> list[Package]:
    """List the packages whose dependents can be selected with package_id."""
    url = dependents_url(owner, repository, host=host)
    if request_manager is not None:
        return extract_packages(page_from_response(request_manager.fetch(url)))
    with SyncRequestManager(timeout=timeout) as manager:
        return extract_packages(page_from_response(manager.fetch(url)))
