"""
Paginated records list.

One paginated fetch is assumed in flight per store. Each first-page load
starts a new list generation; any response belonging to an older generation
(a superseded first page, or a load-more started before a reset) is dropped.
"""
from dataclasses import replace
from typing import Optional

import structlog

from ..models import PaginationParams
from .state import RecordsListState

logger = structlog.get_logger(__name__)


class PaginatedListMixin:
    """List Controller actions for RecordsStore."""

    _list_generation = 0

    def _update_list(self, **changes) -> None:
        self._set(list=replace(self._state.list, **changes))

    def _is_current_list(self, generation: int) -> bool:
        return generation == self._list_generation

    async def fetch_records_paginated(self, record_type_id: Optional[str] = None) -> None:
        """
        Reset the list and load the first page for a record type filter.

        Args:
            record_type_id: Record type to filter by (None = all records)
        """
        self._list_generation += 1
        generation = self._list_generation

        self._set(
            list=RecordsListState(is_loading=True),
            current_record_type_id=record_type_id,
        )

        def reset() -> None:
            if self._is_current_list(generation):
                self._update_list(is_loading=False, is_loading_more=False)

        with self._clears_on_failure(reset):
            result = await self.repository.fetch_records_paginated(
                record_type_id=record_type_id,
                pagination=PaginationParams(limit=self.settings.RECORDS_PAGE_SIZE),
            )

        if not self._is_current_list(generation):
            logger.warning("Dropped stale first page", record_type_id=record_type_id)
            return

        if result.error is not None:
            logger.warning("Failed to fetch records page",
                           record_type_id=record_type_id,
                           error=result.error.message)
            self._set(list=RecordsListState(error=result.error.message))
            return

        self._set(list=RecordsListState(
            records=tuple(result.data),
            page_info=result.page_info,
        ))
        logger.info("Fetched first records page",
                    record_type_id=record_type_id,
                    count=len(result.data),
                    has_next_page=result.page_info.has_next_page)

    async def fetch_more_records(self) -> None:
        """Append the next page. No-op without a next page or while one is loading."""
        list_state = self._state.list
        if not list_state.page_info.has_next_page or list_state.is_loading_more:
            logger.debug("Skipped fetch more",
                         has_next_page=list_state.page_info.has_next_page,
                         is_loading_more=list_state.is_loading_more)
            return

        generation = self._list_generation
        self._update_list(is_loading_more=True)

        def reset() -> None:
            if self._is_current_list(generation):
                self._update_list(is_loading_more=False)

        with self._clears_on_failure(reset):
            result = await self.repository.fetch_records_paginated(
                record_type_id=self._state.current_record_type_id,
                pagination=PaginationParams(
                    limit=self.settings.RECORDS_PAGE_SIZE,
                    cursor=list_state.page_info.end_cursor,
                    direction="forward",
                ),
            )

        if not self._is_current_list(generation):
            logger.warning("Dropped stale records page after list reset")
            return

        if result.error is not None:
            # Keep what is loaded and the old cursor so the caller can retry
            logger.warning("Failed to fetch more records", error=result.error.message)
            self._update_list(is_loading=False, is_loading_more=False, error=result.error.message)
            return

        self._set(list=RecordsListState(
            records=self._state.list.records + tuple(result.data),
            page_info=result.page_info,
        ))
        logger.info("Appended records page",
                    count=len(result.data),
                    total=len(self._state.list.records),
                    has_next_page=result.page_info.has_next_page)

    async def refresh_records(self) -> None:
        """Cold reload of the list with the active filter."""
        await self.fetch_records_paginated(self._state.current_record_type_id)

    def set_current_record_type_filter(self, record_type_id: Optional[str]) -> None:
        """Select the filter used by later fetches; does not fetch."""
        self._set(current_record_type_id=record_type_id)
