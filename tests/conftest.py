from __future__ import annotations

import asyncio
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from recordsync.config import SeedData, Settings
from recordsync.models import (
    PageInfo,
    PaginatedResult,
    Record,
    RecordType,
    RecordWithType,
    ReportSummary,
    RepositoryResult,
    Template,
)
from recordsync.repository import InMemoryRecordRepository
from recordsync.store import RecordsStore

BASE_TIME = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)

SITES = RecordType(
    id="rt-sites",
    organisation_id="org-test",
    name="Sites",
    name_singular="Site",
    is_default=True,
    created_at=BASE_TIME,
    updated_at=BASE_TIME,
)
VEHICLES = RecordType(
    id="rt-vehicles",
    organisation_id="org-test",
    name="Vehicles",
    name_singular="Vehicle",
    created_at=BASE_TIME,
    updated_at=BASE_TIME,
)


def make_record(index: int, name: str, record_type: RecordType = SITES, **fields: Any) -> Record:
    created = BASE_TIME + timedelta(minutes=index)
    return Record(
        id=fields.pop("id", f"rec-{index:03d}"),
        organisation_id="org-test",
        record_type_id=record_type.id,
        name=name,
        created_at=created,
        updated_at=created,
        **fields,
    )


def make_seed(names: list[str], record_type: RecordType = SITES) -> SeedData:
    return SeedData(
        record_types=[SITES, VEHICLES],
        records=[make_record(i, name, record_type) for i, name in enumerate(names)],
        templates=[
            Template(id="tpl-fire", name="Fire Safety Check"),
            Template(id="tpl-draft", name="Unpublished", is_published=False),
        ],
    )


class RecordingRepository(InMemoryRecordRepository):
    """In-memory repository that logs calls, can fail on demand and hold calls open."""

    def __init__(self, **kwargs: Any):
        super().__init__(**kwargs)
        self.calls: list[tuple[str, dict]] = []
        self._holds: dict[str, list[asyncio.Event]] = defaultdict(list)
        self._failures: dict[str, list[str]] = defaultdict(list)
        self._scripted_pages: list[PaginatedResult] = []

    @classmethod
    def seeded(cls, names: list[str], record_type: RecordType = SITES) -> "RecordingRepository":
        return cls.from_seed(make_seed(names, record_type))

    def calls_to(self, name: str) -> list[dict]:
        return [kwargs for called, kwargs in self.calls if called == name]

    def hold(self, name: str) -> asyncio.Event:
        """Block the next call to `name` until the returned event is set."""
        event = asyncio.Event()
        self._holds[name].append(event)
        return event

    def fail_next(self, name: str, message: str) -> None:
        self._failures[name].append(message)

    def script_page(self, page: PaginatedResult) -> None:
        self._scripted_pages.append(page)

    async def _enter(self, name: str, **kwargs: Any) -> str | None:
        self.calls.append((name, kwargs))
        if self._holds[name]:
            await self._holds[name].pop(0).wait()
        if self._failures[name]:
            return self._failures[name].pop(0)
        return None

    async def fetch_records(self):
        message = await self._enter("fetch_records")
        if message:
            return RepositoryResult.failure(message, data=[])
        return await super().fetch_records()

    async def fetch_records_paginated(self, record_type_id=None, search=None, pagination=None,
                                      sort_direction="asc"):
        message = await self._enter(
            "fetch_records_paginated",
            record_type_id=record_type_id,
            search=search,
            pagination=pagination,
            sort_direction=sort_direction,
        )
        if message:
            return PaginatedResult(error={"message": message})
        if self._scripted_pages:
            return self._scripted_pages.pop(0)
        return await super().fetch_records_paginated(record_type_id, search, pagination, sort_direction)

    async def search_records(self, query, record_type_id=None, limit=10):
        message = await self._enter("search_records", query=query, record_type_id=record_type_id, limit=limit)
        if message:
            return RepositoryResult.failure(message, data=[])
        return await super().search_records(query, record_type_id, limit)

    async def fetch_record_with_type(self, record_id):
        message = await self._enter("fetch_record_with_type", record_id=record_id)
        if message:
            return RepositoryResult.failure(message)
        return await super().fetch_record_with_type(record_id)

    async def fetch_record_reports_summary(self, record_id, limit=20):
        message = await self._enter("fetch_record_reports_summary", record_id=record_id, limit=limit)
        if message:
            return RepositoryResult.failure(message, data=[])
        return await super().fetch_record_reports_summary(record_id, limit)

    async def fetch_record_templates(self, record_id):
        message = await self._enter("fetch_record_templates", record_id=record_id)
        if message:
            return RepositoryResult.failure(message, data=[])
        return await super().fetch_record_templates(record_id)

    async def create_record(self, payload):
        message = await self._enter("create_record", payload=payload)
        if message:
            return RepositoryResult.failure(message)
        return await super().create_record(payload)

    async def archive_record(self, record_id):
        message = await self._enter("archive_record", record_id=record_id)
        if message:
            return RepositoryResult.failure(message)
        return await super().archive_record(record_id)


def scripted_page(names: list[str], *, has_next_page: bool, end_cursor: str | None,
                  start: int = 0) -> PaginatedResult:
    rows = [
        RecordWithType(**make_record(start + i, name).model_dump(), record_type=SITES)
        for i, name in enumerate(names)
    ]
    return PaginatedResult(
        data=rows,
        page_info=PageInfo(
            has_next_page=has_next_page,
            has_previous_page=start > 0,
            start_cursor=f"s{start}" if rows else None,
            end_cursor=end_cursor,
        ),
    )


def make_store(repository, **overrides: Any) -> RecordsStore:
    return RecordsStore(repository, Settings(**overrides))


def add_report(repository: InMemoryRecordRepository, record_id: str, index: int) -> None:
    repository._reports[f"rep-{record_id}-{index}"] = ReportSummary(
        id=f"rep-{record_id}-{index}",
        record_id=record_id,
        template_name="Fire Safety Check",
        created_at=BASE_TIME + timedelta(days=index),
    )


@pytest.fixture
def repo() -> RecordingRepository:
    return RecordingRepository.seeded(["Zeta", "Alpha", "Mid"])


@pytest.fixture
def store(repo: RecordingRepository) -> RecordsStore:
    return make_store(repo)
