"""Asynchronous driver for streaming dependents.

Same traversal as SyncDriver, exposed as an async generator. The fetch is
the only await point: extraction and pagination decisions run synchronously
between fetches, and the next page is requested only after the consumer has
taken every record of the current one.

Independent traversals (e.g. for several repositories) can run concurrently
under asyncio.gather(); each stream() call owns its own PageState.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, AsyncIterator, Awaitable, Callable

from typing_extensions import assert_never

from github_dependents.common.exceptions import (
    FetchException,
    ScraperAssumptionException,
)
from github_dependents.common.lxml_page_element import page_from_response
from github_dependents.common.request_manager import (
    AsyncFetcher,
    AsyncRequestManager,
)
from github_dependents.data_types import (
    Continue,
    Dependent,
    PageState,
    Stop,
)
from github_dependents.driver.sync_driver import (
    check_page_budget,
    log_page_failure,
)
from github_dependents.extract.page import extract_page
from github_dependents.extract.pagination import plan_next

logger = logging.getLogger(__name__)


class AsyncDriver:
    """Asynchronous driver for the dependents listing.

    Example usage::

        driver = AsyncDriver(timeout=30.0)
        async for dependent in driver.stream(url, pages=3):
            print(dependent.full_name)
    """

    def __init__(
        self,
        request_manager: AsyncFetcher | None = None,
        timeout: float | None = None,
        on_data: Callable[[Dependent], Awaitable[None]] | None = None,
        on_page: Callable[[int, str, int], Awaitable[None]] | None = None,
        on_run_start: Callable[[str], Awaitable[None]] | None = None,
        on_run_complete: Callable[
            [str, str, Exception | None], Awaitable[None]
        ]
        | None = None,
    ) -> None:
        """Initialize the driver.

        Args:
            request_manager: Async fetch capability. If None, each traversal
                creates and closes its own AsyncRequestManager.
            timeout: Request timeout in seconds for a driver-created request
                manager.
            on_data: Optional async callback invoked with each record before
                it is yielded.
            on_page: Optional async callback invoked after each page with the
                page index, the page URL and the number of records it held.
            on_run_start: Optional async callback invoked with the start URL.
            on_run_complete: Optional async callback invoked with the start
                URL, status ("completed" | "error") and error.
        """
        self.request_manager = request_manager
        self.timeout = timeout
        self.on_data = on_data
        self.on_page = on_page
        self.on_run_start = on_run_start
        self.on_run_complete = on_run_complete

    def stream(
        self, start_url: str, pages: int = 1
    ) -> AsyncIterator[Dependent]:
        """Lazily yield the dependents listed from start_url onwards.

        Raises:
            InvalidPageBudgetException: Immediately, if pages < 1.
        """
        check_page_budget(pages)
        return self._stream(start_url, pages)

    async def _stream(
        self, start_url: str, pages: int
    ) -> AsyncGenerator[Dependent, None]:
        if self.request_manager is not None:
            request_manager = self.request_manager
            owned: AsyncRequestManager | None = None
        else:
            owned = AsyncRequestManager(timeout=self.timeout)
            request_manager = owned

        status = "completed"
        error: Exception | None = None
        state = PageState(url=start_url, pages_requested=pages)

        try:
            if self.on_run_start:
                await self.on_run_start(start_url)

            while True:
                logger.info(f"Fetching page {state.pages_visited + 1}: {state.url}")
                try:
                    response = await request_manager.fetch(state.url)
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
                        await self.on_data(dependent)
                    yield dependent

                if self.on_page:
                    await self.on_page(
                        state.pages_visited, state.url, len(dependents)
                    )

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
                await owned.close()
            if self.on_run_complete:
                await self.on_run_complete(start_url, status, error)

    async def run(self, start_url: str, pages: int = 1) -> int:
        """Drain stream(), relying on on_data for side effects.

        Returns:
            Number of records produced.
        """
        count = 0
        async for _ in self.stream(start_url, pages):
            count += 1
        return count
