"""
In-memory Record Repository Client.

Backs the store in tests and demos. Mirrors the behaviour of the hosted
records API: archived rows and rows whose record type is archived are hidden
from listings, paginated fetches order by (created_at, id) and page with
compound cursors, and every failure is reported through the result envelope.
"""
import asyncio
import functools
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

import structlog
from pydantic import ValidationError

from ..config.schemas import SeedData
from ..exceptions import RecordNotFoundError, RecordSyncError, RecordValidationError
from ..models import (
    PaginatedResult,
    PaginationParams,
    Record,
    RecordCreate,
    RecordSearchResult,
    RecordType,
    RecordTypeCreate,
    RecordTypeSummary,
    RecordTypeUpdate,
    RecordUpdate,
    RecordWithType,
    RepositoryError,
    RepositoryResult,
    ReportSummary,
    SortDirection,
    Template,
    decode_cursor,
    empty_paginated_result,
    get_valid_page_size,
    process_paginated_results,
)
from .base import DEFAULT_REPORTS_SUMMARY_LIMIT, DEFAULT_SEARCH_LIMIT, RecordRepository

logger = structlog.get_logger(__name__)

# Queries shorter than this never match anything
MIN_SEARCH_LENGTH = 2


def _reports_errors(empty: Callable[[str], object]):
    """Turn RecordSyncError raised by an operation into an error envelope."""
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            await self._simulate_latency()
            try:
                return await func(self, *args, **kwargs)
            except RecordSyncError as e:
                logger.warning("Repository operation failed", operation=func.__name__, error=str(e))
                return empty(str(e))
        return wrapper
    return decorator


def _failure(message: str) -> RepositoryResult:
    return RepositoryResult.failure(message)


def _list_failure(message: str) -> RepositoryResult:
    return RepositoryResult.failure(message, data=[])


def _page_failure(message: str) -> PaginatedResult:
    return empty_paginated_result(RepositoryError(message=message))


def _parse_timestamp(value: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _sort_key(record: Record):
    return _aware(record.created_at), record.id


class InMemoryRecordRepository(RecordRepository):
    """Dictionary-backed implementation of RecordRepository."""

    def __init__(self, organisation_id: str = "org-local", latency: float = 0.0):
        """
        Args:
            organisation_id: Organisation stamped on rows created through this repository
            latency: Seconds every operation sleeps before running, to mimic a network hop
        """
        self.organisation_id = organisation_id
        self.latency = latency
        self._record_types: Dict[str, RecordType] = {}
        self._records: Dict[str, Record] = {}
        self._templates: Dict[str, Template] = {}
        self._reports: Dict[str, ReportSummary] = {}
        self._last_timestamp: Optional[datetime] = None

    @classmethod
    def from_seed(cls, seed: SeedData, **kwargs) -> "InMemoryRecordRepository":
        """Build a repository populated from validated seed data."""
        repo = cls(**kwargs)
        for record_type in seed.record_types:
            repo._record_types[record_type.id] = record_type
        for record in seed.records:
            repo._records[record.id] = record
        for template in seed.templates:
            repo._templates[template.id] = template
        for report in seed.reports:
            repo._reports[report.id] = report
        logger.debug("Seeded in-memory repository", records=len(repo._records))
        return repo

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _simulate_latency(self) -> None:
        if self.latency > 0:
            await asyncio.sleep(self.latency)
        else:
            # Always yield so callers see a real suspension point
            await asyncio.sleep(0)

    def _now(self) -> datetime:
        """Strictly increasing timestamps keep creation order stable under ties."""
        now = datetime.now(timezone.utc)
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now

    def _get_record(self, record_id: str) -> Record:
        record = self._records.get(record_id)
        if record is None:
            raise RecordNotFoundError("Record", record_id)
        return record

    def _get_record_type(self, record_type_id: str) -> RecordType:
        record_type = self._record_types.get(record_type_id)
        if record_type is None:
            raise RecordNotFoundError("Record type", record_type_id)
        return record_type

    def _is_visible(self, record: Record) -> bool:
        if record.archived or record.record_type_id is None:
            return False
        record_type = self._record_types.get(record.record_type_id)
        return record_type is not None and not record_type.archived

    def _visible_records(self, record_type_id: Optional[str] = None) -> List[Record]:
        return [
            r for r in self._records.values()
            if self._is_visible(r) and (record_type_id is None or r.record_type_id == record_type_id)
        ]

    def _with_type(self, record: Record) -> RecordWithType:
        record_type = self._get_record_type(record.record_type_id) if record.record_type_id else None
        if record_type is None:
            raise RecordNotFoundError("Record type", str(record.record_type_id))
        return RecordWithType(**record.model_dump(), record_type=record_type)

    @staticmethod
    def _matches(record: Record, term: str) -> bool:
        term = term.casefold()
        return term in record.name.casefold() or term in (record.address or "").casefold()

    # ------------------------------------------------------------------
    # Record types
    # ------------------------------------------------------------------

    @_reports_errors(_list_failure)
    async def fetch_record_types(self) -> RepositoryResult[List[RecordType]]:
        types = [rt for rt in self._record_types.values() if not rt.archived]
        types.sort(key=lambda rt: (not rt.is_default, rt.name.casefold()))
        return RepositoryResult[List[RecordType]].success(types)

    @_reports_errors(_failure)
    async def fetch_default_record_type(self) -> RepositoryResult[RecordType]:
        for record_type in self._record_types.values():
            if record_type.is_default and not record_type.archived:
                return RepositoryResult[RecordType].success(record_type)
        raise RecordNotFoundError("Record type", "default")

    def _clear_default(self, keep_id: str) -> None:
        for rt_id, rt in list(self._record_types.items()):
            if rt.is_default and rt_id != keep_id:
                self._record_types[rt_id] = rt.model_copy(update={"is_default": False})

    @_reports_errors(_failure)
    async def create_record_type(self, payload: RecordTypeCreate) -> RepositoryResult[RecordType]:
        now = self._now()
        record_type = RecordType(
            **payload.model_dump(exclude={"organisation_id"}),
            organisation_id=payload.organisation_id or self.organisation_id,
            created_at=now,
            updated_at=now,
        )
        self._record_types[record_type.id] = record_type
        if record_type.is_default:
            self._clear_default(record_type.id)
        return RepositoryResult[RecordType].success(record_type)

    @_reports_errors(_failure)
    async def update_record_type(
        self,
        record_type_id: str,
        updates: RecordTypeUpdate
    ) -> RepositoryResult[RecordType]:
        existing = self._get_record_type(record_type_id)
        changes = updates.model_dump(exclude_unset=True)
        try:
            updated = RecordType.model_validate(
                {**existing.model_dump(), **changes, "updated_at": self._now()}
            )
        except ValidationError as e:
            raise RecordValidationError(f"Invalid record type update: {e}") from e
        self._record_types[record_type_id] = updated
        if updated.is_default:
            self._clear_default(record_type_id)
        return RepositoryResult[RecordType].success(updated)

    @_reports_errors(_failure)
    async def archive_record_type(self, record_type_id: str) -> RepositoryResult:
        existing = self._get_record_type(record_type_id)
        self._record_types[record_type_id] = existing.model_copy(
            update={"archived": True, "updated_at": self._now()}
        )
        return RepositoryResult.success()

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    @_reports_errors(_list_failure)
    async def fetch_records(self) -> RepositoryResult[List[Record]]:
        return RepositoryResult[List[Record]].success(self._visible_records())

    @_reports_errors(_list_failure)
    async def fetch_records_by_type(self, record_type_id: str) -> RepositoryResult[List[Record]]:
        return RepositoryResult[List[Record]].success(self._visible_records(record_type_id))

    @_reports_errors(_failure)
    async def fetch_record_by_id(self, record_id: str) -> RepositoryResult[Record]:
        return RepositoryResult[Record].success(self._get_record(record_id))

    @_reports_errors(_list_failure)
    async def fetch_record_templates(self, record_id: str) -> RepositoryResult[List[Template]]:
        # Templates are organisation-wide; record_id does not narrow them
        templates = [t for t in self._templates.values() if t.is_published]
        templates.sort(key=lambda t: t.name.casefold())
        return RepositoryResult[List[Template]].success(templates)

    @_reports_errors(_failure)
    async def create_record(self, payload: RecordCreate) -> RepositoryResult[Record]:
        record_type_id = payload.record_type_id
        if record_type_id is None:
            defaults = [rt for rt in self._record_types.values() if rt.is_default and not rt.archived]
            if not defaults:
                raise RecordValidationError("Record type is required when no default record type exists")
            record_type_id = defaults[0].id

        record_type = self._get_record_type(record_type_id)
        if record_type.archived:
            raise RecordValidationError(f"Record type '{record_type.name}' is archived")

        now = self._now()
        record = Record(
            name=payload.name,
            address=payload.address,
            record_type_id=record_type_id,
            organisation_id=payload.organisation_id or self.organisation_id,
            created_at=now,
            updated_at=now,
        )
        self._records[record.id] = record
        return RepositoryResult[Record].success(record)

    @_reports_errors(_failure)
    async def update_record(self, record_id: str, updates: RecordUpdate) -> RepositoryResult[Record]:
        existing = self._get_record(record_id)
        changes = updates.model_dump(exclude_unset=True)
        try:
            updated = Record.model_validate(
                {**existing.model_dump(), **changes, "updated_at": self._now()}
            )
        except ValidationError as e:
            raise RecordValidationError(f"Invalid record update: {e}") from e
        self._records[record_id] = updated
        return RepositoryResult[Record].success(updated)

    @_reports_errors(_failure)
    async def archive_record(self, record_id: str) -> RepositoryResult:
        existing = self._get_record(record_id)
        self._records[record_id] = existing.model_copy(
            update={"archived": True, "updated_at": self._now()}
        )
        return RepositoryResult.success()

    @_reports_errors(_failure)
    async def delete_record(self, record_id: str) -> RepositoryResult:
        self._get_record(record_id)
        del self._records[record_id]
        for report_id in [rid for rid, rep in self._reports.items() if rep.record_id == record_id]:
            del self._reports[report_id]
        return RepositoryResult.success()

    # ------------------------------------------------------------------
    # Paginated & search
    # ------------------------------------------------------------------

    @_reports_errors(_page_failure)
    async def fetch_records_paginated(
        self,
        record_type_id: Optional[str] = None,
        search: Optional[str] = None,
        pagination: Optional[PaginationParams] = None,
        sort_direction: SortDirection = "asc"
    ) -> PaginatedResult[RecordWithType]:
        pagination = pagination or PaginationParams()
        limit = get_valid_page_size(pagination.limit)
        if sort_direction not in ("asc", "desc"):
            raise RecordValidationError(f"Unknown sort direction: {sort_direction}")
        descending = sort_direction == "desc"

        rows = self._visible_records(record_type_id)
        if search and len(search.strip()) >= MIN_SEARCH_LENGTH:
            rows = [r for r in rows if self._matches(r, search.strip())]
        rows.sort(key=_sort_key, reverse=descending)
        total_count = len(rows)

        if pagination.cursor:
            if pagination.direction != "forward":
                raise RecordValidationError("Only forward pagination is supported")
            cursor_data = decode_cursor(pagination.cursor)
            if cursor_data is None:
                raise RecordValidationError("Invalid pagination cursor")
            after = _parse_timestamp(cursor_data.timestamp)
            if after is None:
                raise RecordValidationError("Invalid pagination cursor timestamp")
            needle = (after, cursor_data.id)
            if descending:
                rows = [r for r in rows if _sort_key(r) < needle]
            else:
                rows = [r for r in rows if _sort_key(r) > needle]

        result = process_paginated_results(
            [self._with_type(r) for r in rows[:limit + 1]],
            limit,
            pagination.cursor,
        )
        page = PaginatedResult[RecordWithType](
            data=result.data,
            page_info=result.page_info.model_copy(update={"total_count": total_count}),
        )
        logger.debug("Served records page",
                     count=len(page.data),
                     has_next_page=page.page_info.has_next_page,
                     record_type_id=record_type_id,
                     sort_direction=sort_direction)
        return page

    @_reports_errors(_list_failure)
    async def search_records(
        self,
        query: str,
        record_type_id: Optional[str] = None,
        limit: int = DEFAULT_SEARCH_LIMIT
    ) -> RepositoryResult[List[RecordSearchResult]]:
        term = (query or "").strip()
        if len(term) < MIN_SEARCH_LENGTH:
            return RepositoryResult[List[RecordSearchResult]].success([])

        matches = [r for r in self._visible_records(record_type_id) if self._matches(r, term)]
        matches.sort(key=lambda r: r.name.casefold())

        results = []
        for record in matches[:max(0, limit)]:
            record_type = self._get_record_type(record.record_type_id)
            results.append(RecordSearchResult(
                id=record.id,
                name=record.name,
                address=record.address,
                record_type=RecordTypeSummary(
                    id=record_type.id,
                    name=record_type.name,
                    name_singular=record_type.name_singular,
                    icon=record_type.icon,
                    color=record_type.color,
                ),
            ))
        return RepositoryResult[List[RecordSearchResult]].success(results)

    # ------------------------------------------------------------------
    # Detail
    # ------------------------------------------------------------------

    @_reports_errors(_failure)
    async def fetch_record_with_type(self, record_id: str) -> RepositoryResult[RecordWithType]:
        return RepositoryResult[RecordWithType].success(self._with_type(self._get_record(record_id)))

    @_reports_errors(_list_failure)
    async def fetch_record_reports_summary(
        self,
        record_id: str,
        limit: int = DEFAULT_REPORTS_SUMMARY_LIMIT
    ) -> RepositoryResult[List[ReportSummary]]:
        reports = [rep for rep in self._reports.values() if rep.record_id == record_id]
        reports.sort(key=lambda rep: _aware(rep.created_at), reverse=True)
        return RepositoryResult[List[ReportSummary]].success(reports[:max(0, limit)])
