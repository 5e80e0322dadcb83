"""Records store: paginated list, search, detail cache and legacy site aliases"""

from .records_store import RecordsStore, SitesStore, create_records_store
from .state import (
    ActionResult,
    RecordDetailState,
    RecordSearchState,
    RecordsListState,
    RecordsState,
)

__all__ = [
    'RecordsStore',
    'SitesStore',
    'create_records_store',
    'ActionResult',
    'RecordDetailState',
    'RecordSearchState',
    'RecordsListState',
    'RecordsState',
]
