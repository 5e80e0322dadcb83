"""
"Site" aliases kept for callers written before sites became records.

Each method delegates to its record counterpart; the matching state names
(`sites`, `current_site`, `site_templates`) are properties of RecordsState.
"""
from typing import Mapping, Optional, Union

from ..models import Record, RecordCreate, RecordUpdate
from .state import ActionResult


class LegacySiteAliasesMixin:
    """Deprecated site-named actions for RecordsStore."""

    async def fetch_sites(self) -> None:
        await self.fetch_records()

    async def fetch_site_by_id(self, site_id: str) -> Optional[Record]:
        return await self.fetch_record_by_id(site_id)

    async def fetch_site_templates(self, site_id: str) -> None:
        await self.fetch_record_templates(site_id)

    async def create_site(self, site: Union[RecordCreate, Mapping]) -> ActionResult:
        """Create a record; like the old API, only the error is reported."""
        result = await self.create_record(site)
        return ActionResult(error=result.error)

    async def update_site(self, site_id: str, updates: Union[RecordUpdate, Mapping]) -> ActionResult:
        return await self.update_record(site_id, updates)

    async def delete_site(self, site_id: str) -> ActionResult:
        return await self.delete_record(site_id)

    def set_current_site(self, site: Optional[Record]) -> None:
        self.set_current_record(site)
