"""Record Repository Client contract and the in-memory implementation"""

from .base import DEFAULT_REPORTS_SUMMARY_LIMIT, DEFAULT_SEARCH_LIMIT, RecordRepository
from .memory import InMemoryRecordRepository

__all__ = [
    'RecordRepository',
    'InMemoryRecordRepository',
    'DEFAULT_SEARCH_LIMIT',
    'DEFAULT_REPORTS_SUMMARY_LIMIT',
]
