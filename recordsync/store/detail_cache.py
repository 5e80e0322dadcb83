"""
Per-record detail cache.

An entry aggregates the record (with its type), its report summaries and the
templates usable for it. Entries with a record and no error are cache hits and
are never refetched; failed entries stay in the cache but are retried on the
next fetch. clear_record_detail only deselects the record, it does not evict.

When DETAIL_CACHE_MAX_ENTRIES is set, the least recently used settled entries
are evicted at write time.
"""
import asyncio
from collections import OrderedDict
from types import MappingProxyType
from typing import Dict, Optional

import structlog

from .state import RecordDetailState

logger = structlog.get_logger(__name__)


def _describe(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


class DetailCacheMixin:
    """Detail Cache actions for RecordsStore."""

    def _init_detail_cache(self) -> None:
        self._detail_inflight: Dict[str, asyncio.Future] = {}
        self._detail_lru: "OrderedDict[str, None]" = OrderedDict()

    def get_record_detail(self, record_id: str) -> Optional[RecordDetailState]:
        """Cached entry for a record, or None if it was never fetched."""
        return self._state.detail_cache.get(record_id)

    def clear_record_detail(self) -> None:
        self._set(current_record_id=None)

    async def fetch_record_detail(self, record_id: str) -> None:
        """
        Select a record and make sure its detail entry is loaded.

        Cache hits return without any repository call. Concurrent calls for a
        record that is already loading share the same fetch.

        Args:
            record_id: Record to show
        """
        self._set(current_record_id=record_id)

        cached = self._state.detail_cache.get(record_id)
        if cached is not None and cached.is_cache_hit:
            self._detail_lru.move_to_end(record_id)
            logger.debug("Record detail cache hit", record_id=record_id)
            return

        inflight = self._detail_inflight.get(record_id)
        if inflight is None or inflight.done():
            # Readers see the loading entry as soon as this call returns control
            self._write_detail(record_id, RecordDetailState.loading())
            inflight = asyncio.ensure_future(self._load_record_detail(record_id))
            self._detail_inflight[record_id] = inflight
            inflight.add_done_callback(lambda task: self._forget_inflight(record_id, task))

        await asyncio.shield(inflight)

    def _forget_inflight(self, record_id: str, task: asyncio.Future) -> None:
        if self._detail_inflight.get(record_id) is task:
            del self._detail_inflight[record_id]
        if task.cancelled():
            # Cancelled before or during the fan-out; never leave the entry loading
            entry = self._state.detail_cache.get(record_id)
            if entry is not None and entry.is_loading:
                self._write_detail(record_id, RecordDetailState(error="Record detail fetch was cancelled"))

    async def _load_record_detail(self, record_id: str) -> None:
        record_result, reports_result, templates_result = await asyncio.gather(
            self.repository.fetch_record_with_type(record_id),
            self.repository.fetch_record_reports_summary(
                record_id,
                limit=self.settings.RECORD_REPORTS_SUMMARY_LIMIT,
            ),
            self.repository.fetch_record_templates(record_id),
            return_exceptions=True,
        )

        # The record is required; reports and templates are best effort
        record = None
        if isinstance(record_result, BaseException):
            error = _describe(record_result)
        elif record_result.error is not None:
            error = record_result.error.message
        elif record_result.data is None:
            error = f"Record not found: {record_id}"
        else:
            record = record_result.data
            error = None

        entry = RecordDetailState(
            record=record,
            reports=self._auxiliary(reports_result, record_id, "reports"),
            templates=self._auxiliary(templates_result, record_id, "templates"),
            is_loading=False,
            error=error,
        )
        self._write_detail(record_id, entry)

        if error:
            logger.warning("Failed to fetch record detail", record_id=record_id, error=error)
        else:
            logger.info("Fetched record detail",
                        record_id=record_id,
                        reports=len(entry.reports),
                        templates=len(entry.templates))

    @staticmethod
    def _auxiliary(result, record_id: str, part: str) -> tuple:
        if isinstance(result, BaseException):
            logger.warning("Record detail part failed", record_id=record_id, part=part,
                           error=_describe(result))
            return ()
        if result.error is not None:
            logger.warning("Record detail part failed", record_id=record_id, part=part,
                           error=result.error.message)
            return ()
        return tuple(result.data or ())

    def _write_detail(self, record_id: str, entry: RecordDetailState) -> None:
        cache = dict(self._state.detail_cache)
        cache[record_id] = entry
        self._detail_lru[record_id] = None
        self._detail_lru.move_to_end(record_id)
        self._evict(cache, keep=record_id)
        self._set(detail_cache=MappingProxyType(cache))

    def _evict(self, cache: Dict[str, RecordDetailState], keep: str) -> None:
        limit = self.settings.DETAIL_CACHE_MAX_ENTRIES
        if limit is None:
            return

        for candidate in list(self._detail_lru):
            if len(cache) <= limit:
                break
            entry = cache.get(candidate)
            if (
                candidate == keep
                or candidate == self._state.current_record_id
                or (entry is not None and entry.is_loading)
            ):
                continue
            cache.pop(candidate, None)
            del self._detail_lru[candidate]
            logger.debug("Evicted record detail", record_id=candidate)
