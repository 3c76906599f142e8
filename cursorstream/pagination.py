"""
Result pages returned by a search function.

This module provides the validated shape of one response from the paginated
search endpoint, and the way its rows and replies are combined into a chunk.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import handle_page_errors

Item = dict[str, Any]


class ResultPage(BaseModel):
    """
    Represents the response to a single search request.

    Attributes:
        total: Number of items matching the query, independent of paging
        rows: Items on this page, in sort order
        replies: Reply items on this page, only present when replies were
                 requested separately
    """

    model_config = ConfigDict(extra="ignore")

    total: int = Field(ge=0)
    rows: list[Item]
    replies: list[Item] | None = None

    @classmethod
    def from_response(
        cls, response: "ResultPage | Mapping[str, Any]", page: int | None = None
    ) -> "ResultPage":
        """
        Coerce whatever the search function returned into a ResultPage.

        Raises:
            InvalidResultPageError: If the response does not have the expected shape
        """
        if isinstance(response, cls):
            return response
        with handle_page_errors(page=page):
            return cls.model_validate(response)

    def chunk(self) -> list[Item]:
        """Rows followed by replies, the unit delivered to subscribers."""
        return self.rows + (self.replies or [])
