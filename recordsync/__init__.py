"""
recordsync - record list/detail synchronization for property inspections.

Cursor-paginated record lists, search suggestions, a per-record detail cache
and legacy "site" aliases over a pluggable Record Repository Client.
"""
from .config import Settings, get_settings
from .exceptions import RecordNotFoundError, RecordSyncError, RecordValidationError, SeedFileError
from .repository import InMemoryRecordRepository, RecordRepository
from .store import RecordsState, RecordsStore, SitesStore, create_records_store

__version__ = "0.1.0"

__all__ = [
    'Settings',
    'get_settings',
    'RecordSyncError',
    'RecordNotFoundError',
    'RecordValidationError',
    'SeedFileError',
    'RecordRepository',
    'InMemoryRecordRepository',
    'RecordsState',
    'RecordsStore',
    'SitesStore',
    'create_records_store',
]
