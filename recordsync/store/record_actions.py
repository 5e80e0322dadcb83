"""
Unpaginated record actions and record mutations.

Mutations patch the unpaginated `records` list locally instead of refetching.
The paginated `list` is not touched by any of them.
"""
from typing import Mapping, Optional, Union

import structlog

from ..models import Record, RecordCreate, RecordUpdate
from .state import ActionResult

logger = structlog.get_logger(__name__)


def _name_key(record: Record) -> str:
    return record.name.casefold()


class RecordActionsMixin:
    """Record fetch and mutation actions for RecordsStore."""

    async def fetch_records(self) -> None:
        """Load every visible record, in repository order."""
        self._begin_action()
        with self._clears_on_failure(self._end_action):
            result = await self.repository.fetch_records()

        if result.error is not None:
            self._fail_action(result.error.message, "fetch_records")
            return

        self._set(records=tuple(result.data or ()), is_loading=False)
        logger.info("Fetched records", count=len(self._state.records))

    async def fetch_records_by_type(self, record_type_id: str) -> None:
        self._begin_action()
        with self._clears_on_failure(self._end_action):
            result = await self.repository.fetch_records_by_type(record_type_id)

        if result.error is not None:
            self._fail_action(result.error.message, "fetch_records_by_type")
            return

        self._set(records=tuple(result.data or ()), is_loading=False)
        logger.info("Fetched records by type",
                    record_type_id=record_type_id,
                    count=len(self._state.records))

    async def fetch_record_by_id(self, record_id: str) -> Optional[Record]:
        """
        Load one record and make it the current record.

        Returns:
            The record, or None when the fetch failed
        """
        self._begin_action()
        with self._clears_on_failure(self._end_action):
            result = await self.repository.fetch_record_by_id(record_id)

        if result.error is not None:
            self._fail_action(result.error.message, "fetch_record_by_id")
            return None

        self._set(current_record=result.data, is_loading=False)
        return result.data

    async def fetch_record_templates(self, record_id: str) -> None:
        self._begin_action()
        with self._clears_on_failure(self._end_action):
            result = await self.repository.fetch_record_templates(record_id)

        if result.error is not None:
            self._fail_action(result.error.message, "fetch_record_templates")
            return

        self._set(record_templates=tuple(result.data or ()), is_loading=False)

    async def create_record(self, payload: Union[RecordCreate, Mapping]) -> ActionResult:
        """
        Create a record and insert it into `records`, keeping them sorted by name.

        Args:
            payload: RecordCreate or a mapping with the same fields

        Returns:
            ActionResult with the created record, or the error message
        """
        payload, failed = self._validated(RecordCreate, payload, "create_record")
        if failed is not None:
            return failed

        self._begin_action()
        with self._clears_on_failure(self._end_action):
            result = await self.repository.create_record(payload)

        if result.error is not None:
            return self._fail_action(result.error.message, "create_record")

        created = result.data
        self._set(
            records=tuple(sorted(self._state.records + (created,), key=_name_key)),
            is_loading=False,
        )
        logger.info("Created record", record_id=created.id, name=created.name)
        return ActionResult(data=created)

    async def update_record(self, record_id: str, updates: Union[RecordUpdate, Mapping]) -> ActionResult:
        """
        Update a record, merging the server's copy into `records`.

        The current record is replaced by the server's copy when it is the
        record being updated.
        """
        updates, failed = self._validated(RecordUpdate, updates, "update_record")
        if failed is not None:
            return failed

        self._begin_action()
        with self._clears_on_failure(self._end_action):
            result = await self.repository.update_record(record_id, updates)

        if result.error is not None:
            return self._fail_action(result.error.message, "update_record")

        updated = result.data
        patch = updated.model_dump()
        records = tuple(
            r.model_copy(update=patch) if r.id == record_id else r
            for r in self._state.records
        )

        current = self._state.current_record
        if current is not None and current.id == record_id:
            current = updated

        self._set(records=records, current_record=current, is_loading=False)
        logger.info("Updated record", record_id=record_id)
        return ActionResult(data=updated)

    async def archive_record(self, record_id: str) -> ActionResult:
        """Soft delete a record and drop it from `records`."""
        return await self._remove_record(record_id, "archive_record", self.repository.archive_record)

    async def delete_record(self, record_id: str) -> ActionResult:
        """Permanently delete a record and drop it from `records`."""
        return await self._remove_record(record_id, "delete_record", self.repository.delete_record)

    async def _remove_record(self, record_id: str, action: str, call) -> ActionResult:
        self._begin_action()
        with self._clears_on_failure(self._end_action):
            result = await call(record_id)

        if result.error is not None:
            return self._fail_action(result.error.message, action)

        # current_record is cleared even when another record was removed
        self._set(
            records=tuple(r for r in self._state.records if r.id != record_id),
            current_record=None,
            is_loading=False,
        )
        logger.info("Removed record", action=action, record_id=record_id)
        return ActionResult()

    def set_current_record(self, record: Optional[Record]) -> None:
        self._set(current_record=record)
