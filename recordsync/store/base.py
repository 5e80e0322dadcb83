"""
Core of the records store: the current snapshot, atomic updates and listeners.

Actions live in the mixins of this package; they only change state through
StoreCore._set so every transition is one snapshot replacement.
"""
from contextlib import contextmanager
from dataclasses import replace
from typing import Callable, Iterator, List, Mapping, Optional, Type, TypeVar, Union

import structlog
from pydantic import BaseModel, ValidationError

from ..config.settings import Settings, get_settings
from ..repository import RecordRepository
from .state import ActionResult, RecordsState

logger = structlog.get_logger(__name__)

Listener = Callable[[RecordsState, RecordsState], None]
PayloadT = TypeVar("PayloadT", bound=BaseModel)


class StoreCore:
    """Holds the RecordsState snapshot and notifies subscribers on change."""

    def __init__(self, repository: RecordRepository, settings: Optional[Settings] = None):
        self.repository = repository
        self.settings = settings or get_settings()
        self._state = RecordsState()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> RecordsState:
        return self._state

    def get_state(self) -> RecordsState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with (new_state, previous_state) after each update.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, **changes) -> RecordsState:
        previous = self._state
        self._state = replace(previous, **changes)
        for listener in list(self._listeners):
            listener(self._state, previous)
        return self._state

    @contextmanager
    def _clears_on_failure(self, reset: Callable[[], None]) -> Iterator[None]:
        """Run reset() if the wrapped await raises or is cancelled, then re-raise."""
        try:
            yield
        except BaseException:
            reset()
            raise

    # Legacy-slice helpers shared by the record and record type actions

    def _begin_action(self) -> None:
        self._set(is_loading=True, error=None)

    def _end_action(self) -> None:
        self._set(is_loading=False)

    def _fail_action(self, message: str, action: str) -> ActionResult:
        logger.warning("Records action failed", action=action, error=message)
        self._set(is_loading=False, error=message)
        return ActionResult(error=message)

    @staticmethod
    def _coerce(model: Type[PayloadT], payload: Union[PayloadT, Mapping]) -> PayloadT:
        if isinstance(payload, model):
            return payload
        return model.model_validate(payload)

    def _validated(self, model: Type[PayloadT], payload, action: str):
        """Coerce a payload, or record the validation error on the store."""
        try:
            return self._coerce(model, payload), None
        except ValidationError as e:
            return None, self._fail_action(f"Invalid {model.__name__}: {e.errors()[0]['msg']}", action)

    def clear_error(self) -> None:
        self._set(error=None)
