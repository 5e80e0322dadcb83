"""
Immutable state snapshots for the records store.

Every store action replaces the whole RecordsState in one assignment, so a
reader always sees a consistent snapshot. The legacy "site" names are
read-only views over the canonical record fields, never separate copies.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from ..models import (
    PageInfo,
    Record,
    RecordSearchResult,
    RecordType,
    RecordWithType,
    ReportSummary,
    Template,
)


@dataclass(frozen=True)
class RecordsListState:
    """Paginated collection for the active record-type filter."""
    records: Tuple[RecordWithType, ...] = ()
    page_info: PageInfo = field(default_factory=PageInfo.empty)
    is_loading: bool = False
    is_loading_more: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class RecordSearchState:
    query: str = ""
    results: Tuple[RecordSearchResult, ...] = ()
    is_searching: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class RecordDetailState:
    """Aggregated detail view of one record."""
    record: Optional[RecordWithType] = None
    reports: Tuple[ReportSummary, ...] = ()
    templates: Tuple[Template, ...] = ()
    is_loading: bool = False
    error: Optional[str] = None

    @classmethod
    def loading(cls) -> "RecordDetailState":
        return cls(is_loading=True)

    @property
    def is_cache_hit(self) -> bool:
        """Entries with a record and no error are served without refetching."""
        return self.record is not None and self.error is None


def _empty_cache() -> Mapping[str, RecordDetailState]:
    return MappingProxyType({})


@dataclass(frozen=True)
class RecordsState:
    """Complete store snapshot."""

    # Paginated list
    list: RecordsListState = field(default_factory=RecordsListState)
    current_record_type_id: Optional[str] = None

    # Search suggestions
    search: RecordSearchState = field(default_factory=RecordSearchState)

    # Detail cache, keyed by record id
    detail_cache: Mapping[str, RecordDetailState] = field(default_factory=_empty_cache)
    current_record_id: Optional[str] = None

    # Unpaginated records and record types
    records: Tuple[Record, ...] = ()
    record_types: Tuple[RecordType, ...] = ()
    current_record: Optional[Record] = None
    current_record_type: Optional[RecordType] = None
    record_templates: Tuple[Template, ...] = ()
    is_loading: bool = False
    error: Optional[str] = None

    # Legacy names

    @property
    def sites(self) -> Tuple[Record, ...]:
        return self.records

    @property
    def current_site(self) -> Optional[Record]:
        return self.current_record

    @property
    def site_templates(self) -> Tuple[Template, ...]:
        return self.record_templates


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a mutating action: an error message or the affected data."""
    error: Optional[str] = None
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.error is None
