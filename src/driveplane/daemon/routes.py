"""HTTP routes for the DrivePlane server.

Provides health and status endpoints plus the organization search and
reindex endpoints. Every JSON body is wrapped in an envelope:
{"ok": {"data": ...}} on success, {"err": {"code", "message", "error"}} on failure.
"""

from __future__ import annotations

import importlib.metadata
import json
import time
from typing import Any

import structlog
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from driveplane.config.models import SearchConfig
from driveplane.core.errors import BuildError, DrivePlaneError, ErrorCode, RequestError
from driveplane.daemon.models import (
    SearchRequest,
    SortBy,
    SortDirection,
    parse_reindex_request,
    parse_search_request,
)
from driveplane.index.models import SearchResult
from driveplane.index.ops import SearchCoordinator

logger = structlog.get_logger()

_STATUS_BY_CODE = {
    ErrorCode.REQUEST_INVALID: 400,
    ErrorCode.REINDEX_THROTTLED: 429,
}


def _get_version() -> str:
    """Get package version from installed metadata."""
    try:
        return importlib.metadata.version("driveplane")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def ok(data: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse({"ok": {"data": data}}, status_code=status_code)


def err(status_code: int, message: str, error: str | None = None) -> JSONResponse:
    body: dict[str, Any] = {"code": status_code, "message": message}
    if error is not None:
        body["error"] = error
    return JSONResponse({"err": body}, status_code=status_code)


def error_response(error: DrivePlaneError) -> JSONResponse:
    status_code = _STATUS_BY_CODE.get(error.code, 500)
    return err(status_code, error.message, error.error_name)


def _reorder(
    results: list[SearchResult], coordinator: SearchCoordinator, request: SearchRequest
) -> list[SearchResult]:
    """Order hits by a record timestamp, then flip them for DESC.

    The sort is stable, so equal timestamps keep index key order. A hit whose
    record has left the tree sorts as timestamp 0.
    """
    if request.sort_by is not None:
        field = "created_ms" if request.sort_by is SortBy.CREATED_AT else "last_changed_ms"

        def timestamp(result: SearchResult) -> int:
            record = coordinator.tree.get(result.resource_ref)
            return 0 if record is None else getattr(record, field)

        results = sorted(results, key=timestamp)
    if request.direction is SortDirection.DESC:
        results = results[::-1]
    return results


async def _read_json(request: Request) -> object:
    """Decode the request body. An empty body decodes to None.

    Raises:
        ValueError: body is not valid JSON.
    """
    raw = await request.body()
    if not raw.strip():
        return None
    return json.loads(raw)


def create_routes(coordinator: SearchCoordinator, config: SearchConfig) -> list[Route]:
    """Create HTTP routes bound to the search coordinator."""
    start_time = time.time()
    version = _get_version()

    async def health(request: Request) -> JSONResponse:
        """Health check endpoint.

        Returns a quick status suitable for liveness probes.
        For index diagnostics, use /status instead.
        """
        _ = request  # unused
        return JSONResponse(
            {
                "status": "healthy",
                "version": version,
                "uptime_seconds": round(time.time() - start_time, 1),
            }
        )

    async def status(request: Request) -> JSONResponse:
        """Index freshness diagnostics."""
        _ = request  # unused
        index_status = coordinator.status()
        return ok(
            {
                "version": version,
                "uptime_seconds": round(time.time() - start_time, 1),
                "index": {
                    "built": index_status.built,
                    "indexed_count": index_status.indexed_count,
                    "last_index_update_ms": index_status.last_index_update_ms,
                    "stale": index_status.stale,
                },
                "tree": {
                    "size": index_status.tree_size,
                    "last_mutation_ms": index_status.tree_last_mutation_ms,
                },
            }
        )

    async def search_drive(request: Request) -> JSONResponse:
        """Fuzzy search over file and folder paths, paged by offset cursor."""
        try:
            body = await _read_json(request)
        except ValueError:
            return err(400, "Invalid request format")

        try:
            search_request, page_size, offset = parse_search_request(body, config)
        except DrivePlaneError as e:
            return error_response(e)

        # One extra hit tells us whether another page exists. Reordered pages
        # are cut from the full hit list.
        limit = offset + page_size + 1
        if search_request.reorders:
            limit = max(limit, coordinator.indexed_count())
        results = coordinator.search(search_request.query, limit, search_request.categories or None)
        if search_request.reorders:
            results = _reorder(results, coordinator, search_request)
        page = results[offset : offset + page_size]
        has_more = len(results) > offset + page_size

        return ok(
            {
                "items": [result.to_dict() for result in page],
                "page_size": len(page),
                "cursor": str(offset + page_size) if has_more else None,
            }
        )

    async def reindex_drive(request: Request) -> JSONResponse:
        """Full rebuild. Rejected inside the cooldown window unless forced."""
        try:
            body = await _read_json(request)
        except ValueError:
            return err(400, "Invalid request format")

        try:
            reindex_request = parse_reindex_request(body)
        except DrivePlaneError as e:
            return error_response(e)

        cooldown_ms = int(config.reindex_cooldown_sec * 1000)
        age_ms = coordinator.ms_since_last_index()
        if not reindex_request.force and age_ms is not None and age_ms < cooldown_ms:
            logger.info("reindex_throttled", elapsed_ms=age_ms, cooldown_ms=cooldown_ms)
            return error_response(RequestError.reindex_throttled(age_ms, cooldown_ms))

        try:
            stats = coordinator.reindex()
        except BuildError as e:
            return err(500, f"Failed to reindex drive: {e.message}", e.error_name)

        return ok(
            {
                "success": True,
                "timestamp_ms": stats.timestamp_ms,
                "indexed_count": stats.indexed_count,
            }
        )

    return [
        Route("/health", health, methods=["GET"]),
        Route("/status", status, methods=["GET"]),
        Route("/organization/search", search_drive, methods=["POST"]),
        Route("/organization/reindex", reindex_drive, methods=["POST"]),
    ]
