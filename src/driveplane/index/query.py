"""Fuzzy path search over the published generation.

Queries are matched as subsequences: "rq1" finds "/drive::/reports/q1.pdf".
The scan streams keys in lexicographic order, stops after `limit` hits and
then orders the hits by descending score. Ties keep key order.

Search never raises. No index, an empty index and no hits all give [].
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from driveplane.index._internal.automaton import Subsequence
from driveplane.index.models import SearchCategory, SearchResult
from driveplane.index.normalize import normalize_query
from driveplane.index.store import IndexStore, SearchIndexGeneration

logger = structlog.get_logger()


def _category_filter(
    categories: Iterable[SearchCategory] | None,
) -> frozenset[SearchCategory] | None:
    """Return the categories to keep, or None to keep everything."""
    if categories is None:
        return None
    wanted = frozenset(categories)
    if not wanted or SearchCategory.ALL in wanted:
        return None
    return wanted


def search_generation(
    generation: SearchIndexGeneration,
    query: str,
    limit: int,
    categories: Iterable[SearchCategory] | None = None,
) -> list[SearchResult]:
    """Run one query against a specific generation."""
    if limit <= 0:
        return []

    wanted = _category_filter(categories)
    automaton = Subsequence(normalize_query(query))

    hits: list[SearchResult] = []
    for key, score in generation.keymap.search(automaton):
        ref = generation.resolve(key)
        if ref is None:
            logger.debug("search_key_unresolved", key=key)
            continue
        if wanted is not None and ref.category not in wanted:
            continue
        hits.append(SearchResult(path=key, score=score, resource_ref=ref))
        if len(hits) >= limit:
            break

    # list.sort is stable, so equal scores stay in key order
    hits.sort(key=lambda hit: hit.score, reverse=True)
    return hits


def search(
    store: IndexStore,
    query: str,
    limit: int,
    categories: Iterable[SearchCategory] | None = None,
) -> list[SearchResult]:
    """Search the store's live generation. Returns [] before the first build."""
    generation = store.current()
    if generation is None:
        return []
    return search_generation(generation, query, limit, categories)
