"""
Record Repository Client contract.

The store never talks to a transport directly; it only consumes this
interface. Every operation reports failures through the returned envelope
(`error`) instead of raising.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import (
    PaginatedResult,
    PaginationParams,
    Record,
    RecordCreate,
    RecordSearchResult,
    RecordType,
    RecordTypeCreate,
    RecordTypeUpdate,
    RecordUpdate,
    RecordWithType,
    ReportSummary,
    RepositoryResult,
    SortDirection,
    Template,
)

# Default number of suggestions returned by search_records
DEFAULT_SEARCH_LIMIT = 10

# Default number of report summaries for a record detail
DEFAULT_REPORTS_SUMMARY_LIMIT = 20


class RecordRepository(ABC):
    """Async client for records, record types, templates and report summaries."""

    # Record types

    @abstractmethod
    async def fetch_record_types(self) -> RepositoryResult[List[RecordType]]:
        """Non-archived record types, default first then by name."""

    @abstractmethod
    async def fetch_default_record_type(self) -> RepositoryResult[RecordType]:
        """The organisation's default record type."""

    @abstractmethod
    async def create_record_type(self, payload: RecordTypeCreate) -> RepositoryResult[RecordType]:
        ...

    @abstractmethod
    async def update_record_type(
        self,
        record_type_id: str,
        updates: RecordTypeUpdate
    ) -> RepositoryResult[RecordType]:
        ...

    @abstractmethod
    async def archive_record_type(self, record_type_id: str) -> RepositoryResult:
        ...

    # Records (unpaginated)

    @abstractmethod
    async def fetch_records(self) -> RepositoryResult[List[Record]]:
        """All visible, non-archived records."""

    @abstractmethod
    async def fetch_records_by_type(self, record_type_id: str) -> RepositoryResult[List[Record]]:
        ...

    @abstractmethod
    async def fetch_record_by_id(self, record_id: str) -> RepositoryResult[Record]:
        ...

    @abstractmethod
    async def fetch_record_templates(self, record_id: str) -> RepositoryResult[List[Template]]:
        """Templates usable for a record (published, organisation-wide)."""

    @abstractmethod
    async def create_record(self, payload: RecordCreate) -> RepositoryResult[Record]:
        ...

    @abstractmethod
    async def update_record(self, record_id: str, updates: RecordUpdate) -> RepositoryResult[Record]:
        ...

    @abstractmethod
    async def archive_record(self, record_id: str) -> RepositoryResult:
        """Soft delete."""

    @abstractmethod
    async def delete_record(self, record_id: str) -> RepositoryResult:
        """Permanent delete."""

    # Paginated & search

    @abstractmethod
    async def fetch_records_paginated(
        self,
        record_type_id: Optional[str] = None,
        search: Optional[str] = None,
        pagination: Optional[PaginationParams] = None,
        sort_direction: SortDirection = "asc"
    ) -> PaginatedResult[RecordWithType]:
        """Page through visible records ordered by (created_at, id) in sort_direction."""
        ...

    @abstractmethod
    async def search_records(
        self,
        query: str,
        record_type_id: Optional[str] = None,
        limit: int = DEFAULT_SEARCH_LIMIT
    ) -> RepositoryResult[List[RecordSearchResult]]:
        ...

    # Detail

    @abstractmethod
    async def fetch_record_with_type(self, record_id: str) -> RepositoryResult[RecordWithType]:
        ...

    @abstractmethod
    async def fetch_record_reports_summary(
        self,
        record_id: str,
        limit: int = DEFAULT_REPORTS_SUMMARY_LIMIT
    ) -> RepositoryResult[List[ReportSummary]]:
        ...
