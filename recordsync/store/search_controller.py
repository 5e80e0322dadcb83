"""
Search suggestions.

Setting the query and running a search are separate so callers decide how to
debounce. Out-of-order completions are dropped with a search generation.
"""
from dataclasses import replace
from typing import Optional

import structlog

from ..utils.debounce import Debouncer
from .state import RecordSearchState

logger = structlog.get_logger(__name__)


class SearchMixin:
    """Search Controller actions for RecordsStore."""

    _search_generation = 0

    def _update_search(self, **changes) -> None:
        self._set(search=replace(self._state.search, **changes))

    def set_search_query(self, query: str) -> None:
        """Store the query text only; no search is issued."""
        self._update_search(query=query)

    async def search_records(self, query: str, record_type_id: Optional[str] = None) -> None:
        """
        Replace the search results for a query.

        Queries shorter than RECORDS_SEARCH_MIN_QUERY_LENGTH clear the results
        without calling the repository.

        Args:
            query: Text to search record names and addresses for
            record_type_id: Optional record type filter
        """
        self._search_generation += 1
        generation = self._search_generation

        if len(query) < self.settings.RECORDS_SEARCH_MIN_QUERY_LENGTH:
            self._update_search(results=(), is_searching=False, error=None)
            return

        self._update_search(is_searching=True, error=None)

        def reset() -> None:
            if generation == self._search_generation:
                self._update_search(is_searching=False)

        with self._clears_on_failure(reset):
            result = await self.repository.search_records(
                query=query,
                record_type_id=record_type_id,
                limit=self.settings.RECORDS_SEARCH_LIMIT,
            )

        if generation != self._search_generation:
            logger.debug("Dropped stale search results", query=query)
            return

        error = result.error.message if result.error is not None else None
        if error:
            logger.warning("Search failed", query=query, error=error)

        self._update_search(
            results=tuple(result.data or ()),
            is_searching=False,
            error=error,
        )
        logger.debug("Search completed", query=query, count=len(self._state.search.results))

    def clear_search(self) -> None:
        """Reset search state; results of searches still in flight are ignored."""
        self._search_generation += 1
        self._set(search=RecordSearchState())

    def search_debouncer(self, delay: Optional[float] = None) -> Debouncer:
        """Debounced front for search_records (delay defaults to SEARCH_DEBOUNCE_SECONDS)."""
        if delay is None:
            delay = self.settings.SEARCH_DEBOUNCE_SECONDS
        return Debouncer(self.search_records, delay)
