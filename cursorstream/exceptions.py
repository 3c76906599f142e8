from collections.abc import Generator
from contextlib import contextmanager

from pydantic import ValidationError


class SearchClientError(Exception):
    """Base exception for all cursorstream errors."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ResultSizeExceededError(SearchClientError):
    """Raised when a query matches more results than the client may load."""

    def __init__(self, total: int, max_results: int) -> None:
        super().__init__("Results size exceeds maximum allowed results")
        self.total = total
        self.max_results = max_results


class InvalidResultPageError(SearchClientError):
    """Raised when the search function returns something that is not a result page."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message, original_error)


@contextmanager
def handle_page_errors(page: int | None = None) -> Generator[None, None, None]:
    """
    Context manager that catches pydantic's ValidationError raised while
    parsing a search response and raises InvalidResultPageError instead.

    Args:
        page: Optional 1-based page number for better error messages

    Usage:
        with handle_page_errors(page=3):
            ResultPage.from_response(response)
    """
    try:
        yield
    except ValidationError as e:
        fields = sorted(
            {".".join(str(p) for p in err["loc"]) or "<response>" for err in e.errors()}
        )
        where = f" on page {page}" if page is not None else ""
        raise InvalidResultPageError(
            message=f"Invalid search response{where}: bad field(s) {', '.join(fields)}",
            original_error=e,
        ) from e
