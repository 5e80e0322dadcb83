"""Record type actions. Archiving a record type does not touch its records."""
from typing import Mapping, Optional, Union

import structlog

from ..models import RecordType, RecordTypeCreate, RecordTypeUpdate
from .state import ActionResult

logger = structlog.get_logger(__name__)


class RecordTypeActionsMixin:
    """Record type actions for RecordsStore."""

    async def fetch_record_types(self) -> None:
        self._begin_action()
        with self._clears_on_failure(self._end_action):
            result = await self.repository.fetch_record_types()

        if result.error is not None:
            self._fail_action(result.error.message, "fetch_record_types")
            return

        self._set(record_types=tuple(result.data or ()), is_loading=False)
        logger.info("Fetched record types", count=len(self._state.record_types))

    async def fetch_default_record_type(self) -> Optional[RecordType]:
        """Load the default record type and make it current (None on failure)."""
        self._begin_action()
        with self._clears_on_failure(self._end_action):
            result = await self.repository.fetch_default_record_type()

        if result.error is not None:
            self._fail_action(result.error.message, "fetch_default_record_type")
            return None

        self._set(current_record_type=result.data, is_loading=False)
        return result.data

    async def create_record_type(self, payload: Union[RecordTypeCreate, Mapping]) -> ActionResult:
        payload, failed = self._validated(RecordTypeCreate, payload, "create_record_type")
        if failed is not None:
            return failed

        self._begin_action()
        with self._clears_on_failure(self._end_action):
            result = await self.repository.create_record_type(payload)

        if result.error is not None:
            return self._fail_action(result.error.message, "create_record_type")

        created = result.data
        self._set(
            record_types=tuple(sorted(
                self._state.record_types + (created,),
                key=lambda rt: rt.name.casefold(),
            )),
            is_loading=False,
        )
        logger.info("Created record type", record_type_id=created.id, name=created.name)
        return ActionResult(data=created)

    async def update_record_type(
        self,
        record_type_id: str,
        updates: Union[RecordTypeUpdate, Mapping]
    ) -> ActionResult:
        updates, failed = self._validated(RecordTypeUpdate, updates, "update_record_type")
        if failed is not None:
            return failed

        self._begin_action()
        with self._clears_on_failure(self._end_action):
            result = await self.repository.update_record_type(record_type_id, updates)

        if result.error is not None:
            return self._fail_action(result.error.message, "update_record_type")

        updated = result.data
        patch = updated.model_dump()
        current = self._state.current_record_type
        if current is not None and current.id == record_type_id:
            current = updated

        self._set(
            record_types=tuple(
                rt.model_copy(update=patch) if rt.id == record_type_id else rt
                for rt in self._state.record_types
            ),
            current_record_type=current,
            is_loading=False,
        )
        return ActionResult(data=updated)

    async def archive_record_type(self, record_type_id: str) -> ActionResult:
        self._begin_action()
        with self._clears_on_failure(self._end_action):
            result = await self.repository.archive_record_type(record_type_id)

        if result.error is not None:
            return self._fail_action(result.error.message, "archive_record_type")

        self._set(
            record_types=tuple(rt for rt in self._state.record_types if rt.id != record_type_id),
            current_record_type=None,
            is_loading=False,
        )
        logger.info("Archived record type", record_type_id=record_type_id)
        return ActionResult()

    def set_current_record_type(self, record_type: Optional[RecordType]) -> None:
        self._set(current_record_type=record_type)
