"""Synchronous driver for streaming dependents.

The driver owns the I/O loop: fetch a page, extract its dependents, yield
them one by one, then ask the pagination controller where to go next. The
extractors never perform I/O themselves.

- stream() returns a lazy generator; a page is fetched only once the
  consumer has taken every record of the previous page.
- run() drains stream() and hands each record to the on_data callback.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator, Iterator

from typing_extensions import assert_never

from github_dependents.common.exceptions import (
    FetchException,
    InvalidPageBudgetException,
    ScraperAssumptionException,
)
from github_dependents.common.lxml_page_element import page_from_response
from github_dependents.common.request_manager import (
    Fetcher,
    SyncRequestManager,
)
from github_dependents.data_types import (
    Continue,
    Dependent,
    PageState,
    Stop,
)
from github_dependents.extract.page import extract_page
from github_dependents.extract.pagination import plan_next

logger = logging.getLogger(__name__)


def check_page_budget(pages: int) -> None:
    """Raise InvalidPageBudgetException unless pages is at least 1."""
    if pages < 1:
        raise InvalidPageBudgetException(pages)


def log_page_failure(
    error: ScraperAssumptionException | FetchException,
    state: PageState,
) -> None:
    """Tag a failure with the page it happened on and log it."""
    if isinstance(error, ScraperAssumptionException):
        error.add_context(page_index=state.pages_visited)
    else:
        error.page_index = state.pages_visited
    logger.error(
        f"Page {state.pages_visited + 1} failed: {error}",
        extra={"url": state.url, "page_index": state.pages_visited},
    )


class SyncDriver:
    """Synchronous driver for the dependents listing.

    Each stream() call owns its own PageState, so one driver may serve
    several independent traversals.

    Example usage::

        driver = SyncDriver(timeout=30.0)
        for dependent in driver.stream(url, pages=3):
            print(dependent.full_name)
    """

    def __init__(
        self,
        request_manager: Fetcher | None = None,
        timeout: float | None = None,
        on_data: Callable[[Dependent], None] | None = None,
        on_page: Callable[[int, str, int], None] | None = None,
        on_run_start: Callable[[str], None] | None = None,
        on_run_complete: Callable[[str, str, Exception | None], None]
        | None = None,
    ) -> None:
        """Initialize the driver.

        Args:
            request_manager: Fetch capability. If None, each traversal creates
                and closes its own SyncRequestManager.
            timeout: Request timeout in seconds for a driver-created request
                manager. Ignored when request_manager is given.
            on_data: Optional callback invoked with each record before it is
                yielded.
            on_page: Optional callback invoked after each page with the page
                index, the page URL and the number of records it held.
            on_run_start: Optional callback invoked with the start URL when a
                traversal begins.
            on_run_complete: Optional callback invoked when a traversal ends.
                Receives the start URL, status ("completed" | "error"), and
                error (Exception | None). A consumer that stops early counts
                as completed.
        """
        self.request_manager = request_manager
        self.timeout = timeout
        self.on_data = on_data
        self.on_page = on_page
        self.on_run_start = on_run_start
        self.on_run_complete = on_run_complete

    def stream(
        self, start_url: str, pages: int = 1
    ) -> Iterator[Dependent]:
        """Lazily yield the dependents listed from start_url onwards.

        Args:
            start_url: URL of the first dependents page.
            pages: Maximum number of pages to fetch (at least 1).

        Returns:
            A forward-only iterator of Dependent records in page, then row
            order.

        Raises:
            InvalidPageBudgetException: Immediately, if pages < 1.
        """
        check_page_budget(pages)
        return self._stream(start_url, pages)

    def _stream(
        self, start_url: str, pages: int
    ) -> Generator[Dependent, None, None]:
        if self.request_manager is not None:
            request_manager = self.request_manager
            owned: SyncRequestManager | None = None
        else:
            owned = SyncRequestManager(timeout=self.timeout)
            request_manager = owned

        status = "completed"
        error: Exception | None = None
        state = PageState(url=start_url, pages_requested=pages)

        try:
            if self.on_run_start:
                self.on_run_start(start_url)

            while True:
                logger.info(f"Fetching page {state.pages_visited + 1}: {state.url}")
                try:
                    response = request_manager.fetch(state.url)
                    page = page_from_response(response)
                    dependents = extract_page(page)
                except (ScraperAssumptionException, FetchException) as e:
                    log_page_failure(e, state)
                    raise

                logger.debug(
                    f"Page {state.pages_visited + 1} held {len(dependents)} dependents"
                )
                for dependent in dependents:
                    if self.on_data:
                        self.on_data(dependent)
                    yield dependent

                if self.on_page:
                    self.on_page(state.pages_visited, state.url, len(dependents))

                try:
                    action = plan_next(page, state)
                except ScraperAssumptionException as e:
                    log_page_failure(e, state)
                    raise

                match action:
                    case Stop(reason=reason):
                        logger.debug(
                            f"Stopping after page {state.pages_visited + 1}: {reason}"
                        )
                        return
                    case Continue(url=next_url):
                        state.pages_visited += 1
                        state.url = next_url
                    case _:
                        assert_never(action)
        except Exception as e:
            status = "error"
            error = e
            raise
        finally:
            if owned is not None:
                owned.close()
            if self.on_run_complete:
                self.on_run_complete(start_url, status, error)

    def run(self, start_url: str, pages: int = 1) -> int:
        """Drain stream(), relying on on_data for side effects.

        Returns:
            Number of records produced.
        """
        count = 0
        for _ in self.stream(start_url, pages):
            count += 1
        return count
