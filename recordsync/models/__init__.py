"""Domain models, result envelopes and pagination primitives"""

from .results import RepositoryError, RepositoryResult
from .pagination import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MIN_PAGE_SIZE,
    CursorData,
    PageInfo,
    PaginatedResult,
    PaginationParams,
    SortDirection,
    cursor_for,
    decode_cursor,
    empty_paginated_result,
    encode_cursor,
    get_valid_page_size,
    process_paginated_results,
)
from .records import (
    Record,
    RecordCreate,
    RecordSearchResult,
    RecordType,
    RecordTypeCreate,
    RecordTypeSummary,
    RecordTypeUpdate,
    RecordUpdate,
    RecordWithType,
    ReportSummary,
    Template,
)

__all__ = [
    # Envelopes
    'RepositoryError',
    'RepositoryResult',
    'PaginatedResult',
    # Pagination
    'DEFAULT_PAGE_SIZE',
    'MAX_PAGE_SIZE',
    'MIN_PAGE_SIZE',
    'CursorData',
    'PageInfo',
    'PaginationParams',
    'SortDirection',
    'cursor_for',
    'decode_cursor',
    'empty_paginated_result',
    'encode_cursor',
    'get_valid_page_size',
    'process_paginated_results',
    # Records
    'Record',
    'RecordCreate',
    'RecordSearchResult',
    'RecordType',
    'RecordTypeCreate',
    'RecordTypeSummary',
    'RecordTypeUpdate',
    'RecordUpdate',
    'RecordWithType',
    'ReportSummary',
    'Template',
]
