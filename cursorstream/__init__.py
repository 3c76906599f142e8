from .client import SearchClient
from .config import SearchOptions
from .events import EventType, SearchEvents
from .exceptions import InvalidResultPageError, ResultSizeExceededError, SearchClientError
from .pagination import ResultPage
from .query import build_search_request, next_cursor

__all__ = [
    "SearchClient",
    "SearchOptions",
    "ResultPage",
    # Events
    "EventType",
    "SearchEvents",
    # Requests
    "build_search_request",
    "next_cursor",
    # Exceptions
    "SearchClientError",
    "ResultSizeExceededError",
    "InvalidResultPageError",
]
