"""Errors raised while listing dependents.

A traversal ends on one of two kinds of failure:

- the fetched page is not shaped like a dependents listing
  (ScraperAssumptionException and subclasses)
- no document could be fetched (FetchException and subclasses)

Rows that aren't dependents, and star/fork labels that don't parse, are not
errors: the row is discarded or the count becomes 0.
"""

from typing import Any


class ScraperAssumptionException(Exception):
    """The page broke an assumption the extractors make about its markup.

    str() of the exception lists the message, the page URL and any context
    entries, one per line.
    """

    def __init__(
        self,
        message: str,
        request_url: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.request_url = request_url
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        lines = [self.message, f"URL: {self.request_url}"]
        if self.context:
            lines.append("Context:")
            lines.extend(f"  {key}: {value}" for key, value in self.context.items())
        return "\n".join(lines)

    def add_context(self, **context: Any) -> None:
        """Merge context entries in after the fact (e.g. the page index)."""
        self.context.update(context)
        self.args = (self._format_message(),)


class HTMLStructuralAssumptionException(ScraperAssumptionException):
    """A selector matched an unexpected number of nodes.

    Typical causes are a URL that isn't a dependents page, or GitHub
    changing the page's markup.
    """

    def __init__(
        self,
        selector: str,
        description: str,
        expected_min: int,
        expected_max: int | None,
        actual_count: int,
        request_url: str,
    ) -> None:
        self.selector = selector
        self.description = description
        self.expected_min = expected_min
        self.expected_max = expected_max
        self.actual_count = actual_count

        if expected_max is None:
            expected = f"at least {expected_min}"
        elif expected_max == expected_min:
            expected = f"exactly {expected_min}"
        else:
            expected = f"between {expected_min} and {expected_max}"

        super().__init__(
            f"HTML structure mismatch: Expected {expected} elements for "
            f"'{description}', but found {actual_count}",
            request_url,
            {
                "selector": selector,
                "expected_min": expected_min,
                "expected_max": "unlimited" if expected_max is None else expected_max,
                "actual_count": actual_count,
            },
        )


class InvalidPageBudgetException(ValueError):
    """A traversal was asked for fewer than one page."""

    def __init__(self, pages: int) -> None:
        self.pages = pages
        super().__init__(f"Page budget must be at least 1, got {pages}")


class FetchException(Exception):
    """A page could not be fetched.

    Not retried; the traversal ends and the caller decides what to do.
    page_index is filled in by the driver.
    """

    def __init__(self, message: str, url: str) -> None:
        self.message = message
        self.url = url
        self.page_index: int | None = None
        super().__init__(message)


class HTMLResponseAssumptionException(FetchException):
    """The server answered with a non-success status."""

    def __init__(
        self,
        status_code: int,
        expected_codes: list[int],
        url: str,
    ) -> None:
        self.status_code = status_code
        self.expected_codes = expected_codes
        expected = ", ".join(map(str, expected_codes))
        super().__init__(
            f"HTTP {status_code} from {url} (expected one of: {expected})", url
        )


class RequestTimeoutException(FetchException):
    """The request did not complete within timeout_seconds."""

    def __init__(self, url: str, timeout_seconds: float | None) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Request to {url} timed out after {timeout_seconds}s", url
        )


class RequestTransportException(FetchException):
    """DNS, connection or TLS failure."""

    def __init__(self, url: str, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Request to {url} failed: {reason}", url)
