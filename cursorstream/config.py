from dataclasses import dataclass
from typing import Any, Literal

SortOrder = Literal["asc", "desc"]

DEFAULT_CHUNK_SIZE = 200
DEFAULT_SORT_BY = "created"
DEFAULT_SORT_ORDER: SortOrder = "asc"


@dataclass(frozen=True)
class SearchOptions:
    """
    Configuration of a SearchClient.

    Attributes:
        chunk_size: Page size, the number of items requested per batch
        separate_replies: Request top-level items and replies as separate arrays.
            Known to behave badly for items with very large numbers of replies.
        incremental: Emit `results` per page as pages arrive instead of once at the end
        max_results: When set, refuse to load a query whose total exceeds this value
        sort_by: Field used for ordering and as the pagination cursor
        sort_order: "asc" or "desc"
    """

    chunk_size: int = DEFAULT_CHUNK_SIZE
    separate_replies: bool = True
    incremental: bool = True
    max_results: int | None = None
    sort_by: str = DEFAULT_SORT_BY
    sort_order: SortOrder = DEFAULT_SORT_ORDER

    def __post_init__(self) -> None:
        if isinstance(self.chunk_size, bool) or not isinstance(self.chunk_size, int):
            raise ValueError(f"chunk_size must be an integer, got {self.chunk_size!r}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1, got {self.chunk_size}")

        if self.max_results is not None:
            if isinstance(self.max_results, bool) or not isinstance(self.max_results, int):
                raise ValueError(f"max_results must be an integer, got {self.max_results!r}")
            if self.max_results < 0:
                raise ValueError(f"max_results must not be negative, got {self.max_results}")

        if not self.sort_by:
            raise ValueError("sort_by must be a non-empty field name")

        if self.sort_order not in ("asc", "desc"):
            raise ValueError(f"sort_order must be 'asc' or 'desc', got {self.sort_order!r}")

    def default_params(self) -> dict[str, Any]:
        """
        Get the request parameters owned by the client.

        Returns:
            Paging parameters merged underneath every caller query
        """
        return {
            "limit": self.chunk_size,
            "sort": self.sort_by,
            "order": self.sort_order,
            "_separate_replies": self.separate_replies,
        }
