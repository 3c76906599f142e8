from collections.abc import Mapping, Sequence
from typing import Any

from .config import SearchOptions


def build_search_request(
    options: SearchOptions, query: Mapping[str, Any] | None, search_after: Any = None
) -> dict[str, Any]:
    """
    Build the physical request for one batch.

    The client's paging parameters go in first so that keys in the caller's
    query win. `search_after` is only attached when a cursor is known, which
    is never the case for the first batch.

    Args:
        options: Client configuration supplying limit, sort, order and replies mode
        query: Caller's filter criteria, left unmodified
        search_after: Cursor taken from the previous batch

    Returns:
        A new dict to pass to the search function
    """
    request = {**options.default_params(), **(query or {})}
    if search_after:
        request["search_after"] = search_after
    return request


def next_cursor(chunk: Sequence[Mapping[str, Any]], sort_by: str) -> Any | None:
    """
    Returns the cursor for the batch following `chunk`.

    This is the value of the sort field on the last item. None when the chunk
    is empty or the last item lacks the field.
    """
    if not chunk:
        return None
    return chunk[-1].get(sort_by)
