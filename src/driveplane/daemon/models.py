"""Request bodies accepted by the REST routes."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from driveplane.config.constants import CURSOR_LENGTH_MAX
from driveplane.config.models import SearchConfig
from driveplane.core.errors import RequestError
from driveplane.index.models import SearchCategory


class SortBy(Enum):
    """Record timestamp a result page can be ordered by."""

    CREATED_AT = "CREATED_AT"
    UPDATED_AT = "UPDATED_AT"


class SortDirection(Enum):
    ASC = "ASC"
    DESC = "DESC"


class SearchRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    query: str
    categories: list[SearchCategory] = Field(default_factory=list)
    page_size: int | None = None
    cursor: str | None = None
    sort_by: SortBy | None = None
    direction: SortDirection = SortDirection.ASC

    @property
    def reorders(self) -> bool:
        """True when hits must leave index key order before paging."""
        return self.sort_by is not None or self.direction is SortDirection.DESC


class ReindexRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    force: bool = False


def _first_error(e: ValidationError) -> RequestError:
    err = e.errors()[0]
    field = ".".join(str(loc) for loc in err["loc"]) or "body"
    return RequestError.invalid_field(field, err["msg"])


def parse_search_request(body: object, config: SearchConfig) -> tuple[SearchRequest, int, int]:
    """Validate a search body. Returns (request, page_size, offset).

    Raises:
        RequestError: body shape or limits violated.
    """
    try:
        request = SearchRequest.model_validate(body)
    except ValidationError as e:
        raise _first_error(e) from e

    if not request.query.strip():
        raise RequestError.invalid_field("query", "Search query cannot be empty")
    if len(request.query) > config.max_query_length:
        raise RequestError.invalid_field(
            "query", f"Search query must be {config.max_query_length} characters or less"
        )

    page_size = config.default_page_size if request.page_size is None else request.page_size
    if not 1 <= page_size <= config.max_page_size:
        raise RequestError.invalid_field(
            "page_size", f"Page size must be between 1 and {config.max_page_size}"
        )

    offset = 0
    if request.cursor is not None:
        if len(request.cursor) > CURSOR_LENGTH_MAX:
            raise RequestError.invalid_field(
                "cursor", f"Cursor must be {CURSOR_LENGTH_MAX} characters or less"
            )
        if not (request.cursor.isascii() and request.cursor.isdigit()):
            raise RequestError.invalid_field("cursor", "Invalid cursor format")
        offset = int(request.cursor)

    return request, page_size, offset


def parse_reindex_request(body: object) -> ReindexRequest:
    """Validate an optional reindex body. An empty body means defaults."""
    if body is None:
        return ReindexRequest()
    try:
        return ReindexRequest.model_validate(body)
    except ValidationError as e:
        raise _first_error(e) from e
