"""Routine store boundary - the backend that owns the authoritative routine set.

RoutineRegistry talks to any object implementing RoutineStore. Payloads use the
backend's wire field names (see RoutineEntry aliases). Rejections are raised as
BackendRejectedError with a message suitable for showing to the user.

InMemoryRoutineStore is a complete implementation used by the CLI and tests.
Like the real backend it enforces composite-key uniqueness and matches
selectors exactly; an empty selector field only matches an empty stored value.
"""

import copy
from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from src.timetable.errors import BackendRejectedError
from src.timetable.keys import KEY_FIELDS, RoutineKey
from src.timetable.logging import get_logger

log = get_logger(__name__)

# Wire names of the key fields, in KEY_FIELDS order
KEY_ALIASES: tuple[str, ...] = tuple(
    RoutineKey.model_fields[name].alias for name in KEY_FIELDS
)


class RoutineStore(Protocol):
    async def fetch_routines(self) -> list[dict[str, Any]]: ...

    async def create_routine(self, payload: dict[str, Any]) -> None: ...

    async def update_routine(self, payload: dict[str, Any]) -> None: ...

    async def delete_routine(self, selector: dict[str, Any]) -> None: ...


def _wire_key(record: Mapping[str, Any]) -> tuple[str, ...]:
    return tuple("" if record.get(f) is None else str(record.get(f)) for f in KEY_ALIASES)


class InMemoryRoutineStore:
    """Routine store held in a list of wire-format records."""

    def __init__(self, records: Iterable[Mapping[str, Any]] = ()) -> None:
        self._records: list[dict[str, Any]] = [dict(r) for r in records]

    def _index_of(self, key: tuple[str, ...]) -> int | None:
        for i, record in enumerate(self._records):
            if _wire_key(record) == key:
                return i
        return None

    async def fetch_routines(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self._records)

    async def create_routine(self, payload: dict[str, Any]) -> None:
        key = _wire_key(payload)
        if self._index_of(key) is not None:
            raise BackendRejectedError("Routine already exists")
        self._records.append(dict(payload))
        log.debug("store_routine_created", key=key)

    async def update_routine(self, payload: dict[str, Any]) -> None:
        record = dict(payload)
        original = record.pop("original", None)
        if not original:
            raise BackendRejectedError("Original routine key is required")

        index = self._index_of(_wire_key(original))
        if index is None:
            raise BackendRejectedError("Routine not found")

        new_key = _wire_key(record)
        clash = self._index_of(new_key)
        if clash is not None and clash != index:
            raise BackendRejectedError("Routine already exists")

        self._records[index] = record
        log.debug("store_routine_updated", key=new_key)

    async def delete_routine(self, selector: dict[str, Any]) -> None:
        index = self._index_of(_wire_key(selector))
        if index is None:
            raise BackendRejectedError("Routine not found")
        del self._records[index]
        log.debug("store_routine_deleted", key=_wire_key(selector))
