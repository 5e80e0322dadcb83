"""
Records store: list/detail synchronization for records.

UI code calls actions on a RecordsStore; actions call the repository and
apply the outcome to the store's RecordsState in single atomic updates.

Usage:
    store = RecordsStore(InMemoryRecordRepository.from_seed(seed))
    await store.fetch_records_paginated()
    await store.fetch_more_records()
    await store.fetch_record_detail(record_id)
    store.get_record_detail(record_id)
"""
import warnings
from typing import Optional

import structlog

from ..config.loader import load_seed_file
from ..config.schemas import SeedData
from ..config.settings import Settings, get_settings
from ..utils.logging import configure_logging
from ..repository import InMemoryRecordRepository, RecordRepository
from .base import StoreCore
from .detail_cache import DetailCacheMixin
from .legacy import LegacySiteAliasesMixin
from .list_controller import PaginatedListMixin
from .record_actions import RecordActionsMixin
from .record_type_actions import RecordTypeActionsMixin
from .search_controller import SearchMixin

logger = structlog.get_logger(__name__)


class RecordsStore(
    PaginatedListMixin,
    SearchMixin,
    DetailCacheMixin,
    RecordActionsMixin,
    RecordTypeActionsMixin,
    LegacySiteAliasesMixin,
    StoreCore,
):
    """In-memory cache and orchestration facade over a RecordRepository."""

    def __init__(self, repository: RecordRepository, settings: Optional[Settings] = None):
        super().__init__(repository, settings)
        self._init_detail_cache()
        logger.debug("Records store created",
                     repository=type(repository).__name__,
                     page_size=self.settings.RECORDS_PAGE_SIZE)


class SitesStore(RecordsStore):
    """Deprecated: use RecordsStore."""

    def __init__(self, repository: RecordRepository, settings: Optional[Settings] = None):
        warnings.warn("SitesStore is deprecated, use RecordsStore", DeprecationWarning, stacklevel=2)
        super().__init__(repository, settings)


def create_records_store(
    repository: Optional[RecordRepository] = None,
    settings: Optional[Settings] = None
) -> RecordsStore:
    """
    Build a store, falling back to an in-memory repository.

    Without a repository the in-memory one is seeded from SEED_FILE when set,
    and starts empty otherwise.

    Args:
        repository: Repository client to use
        settings: Settings override (defaults to global settings)

    Returns:
        Ready-to-use RecordsStore
    """
    settings = settings or get_settings()
    configure_logging(settings)
    if repository is None:
        if settings.SEED_FILE is not None:
            repository = InMemoryRecordRepository.from_seed(load_seed_file(settings.SEED_FILE))
        else:
            repository = InMemoryRecordRepository.from_seed(SeedData())
    return RecordsStore(repository, settings)
