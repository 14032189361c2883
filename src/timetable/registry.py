"""RoutineRegistry - create, update and delete routines by composite key.

Lifecycle of a routine:
  absent  -> present    create(entry)
  present -> present'   update(original_key, entry)   key fields may change
  present -> absent     delete(key)

The registry validates locally, then submits to the store. It never mutates a
local copy of the routine set: after a successful operation callers call
refresh() to get the authoritative set back. Existence of the original key is
not checked before an update; a stale key comes back as a backend rejection.

Failures are reported, not raised:
  validation  required field missing or invalid, nothing submitted
  rejected    the store refused, message passed through verbatim
There is no retry.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from src.timetable.config import get_config
from src.timetable.errors import BackendRejectedError, RoutineValidationError
from src.timetable.grid import find_teacher_conflicts
from src.timetable.keys import RoutineKey, render_key
from src.timetable.logging import get_logger
from src.timetable.models import (
    DAYS,
    SLOT_CODES,
    OperationResult,
    RoutineEntry,
    parse_routines,
)
from src.timetable.store import RoutineStore
from src.timetable.timecodec import is_valid_mark, to_comparable_hour

log = get_logger(__name__)

REQUIRED_MESSAGE = "Subject ID, Classroom ID and Academic Year are required!"
CONFLICT_MESSAGE = (
    "This teacher is already assigned to another routine in the same section, "
    "day, and overlapping time."
)


def validate_entry(entry: RoutineEntry) -> None:
    """Check an entry before it is submitted.

    Raises:
        RoutineValidationError: On the first problem found.
    """
    if not entry.subject_offering_id or not entry.classroom_id or not entry.academic_year:
        raise RoutineValidationError(REQUIRED_MESSAGE)

    if entry.day_of_week not in DAYS:
        raise RoutineValidationError(f"Invalid day of week: {entry.day_of_week!r}")
    if entry.slot_code not in SLOT_CODES:
        raise RoutineValidationError(f"Invalid slot: {entry.slot_code!r}")

    for label, value in (("start", entry.start_time), ("end", entry.end_time)):
        if not is_valid_mark(value):
            raise RoutineValidationError(
                f"Invalid {label} time {value!r}: use a half-hour mark from 08:00 to 18:00"
            )
    if to_comparable_hour(entry.start_time) >= to_comparable_hour(entry.end_time):
        raise RoutineValidationError("Start time must be before end time")


class RoutineRegistry:
    """CRUD contract over routines held by a RoutineStore.

    Args:
        store: Backend holding the authoritative routine set.
        reject_teacher_conflicts: Refuse create/update that double-books a class
            teacher (checked against the last refresh()). Defaults to config.
    """

    def __init__(
        self, store: RoutineStore, *, reject_teacher_conflicts: bool | None = None
    ) -> None:
        self.store = store
        if reject_teacher_conflicts is None:
            reject_teacher_conflicts = get_config().reject_teacher_conflicts
        self.reject_teacher_conflicts = reject_teacher_conflicts
        self._snapshot: list[RoutineEntry] = []

    async def refresh(self) -> list[RoutineEntry]:
        """Fetch the authoritative routine set.

        Any failure degrades to an empty set: nothing scheduled is still a
        renderable timetable.
        """
        try:
            records = await self.store.fetch_routines()
        except Exception as e:
            log.warning("routines_fetch_failed", error=str(e), type=type(e).__name__)
            self._snapshot = []
            return []

        self._snapshot = parse_routines(records or [])
        log.info("routines_fetched", count=len(self._snapshot))
        return list(self._snapshot)

    async def create(self, entry: RoutineEntry) -> OperationResult:
        try:
            self._check(entry, ignore_key=None)
        except RoutineValidationError as e:
            log.info("routine_invalid", operation="create", reason=str(e))
            return OperationResult.invalid(str(e))

        return await self._submit(
            "create", self.store.create_routine, entry.to_payload(), "Routine added."
        )

    async def update(self, original_key: RoutineKey, entry: RoutineEntry) -> OperationResult:
        """Replace the routine stored under original_key with entry.

        The original key travels separately from the new field values so the
        store can find the record even when key fields were edited.
        """
        try:
            self._check(entry, ignore_key=original_key)
        except RoutineValidationError as e:
            log.info("routine_invalid", operation="update", reason=str(e))
            return OperationResult.invalid(str(e))

        payload = {**entry.to_payload(), "original": original_key.as_selector()}
        return await self._submit(
            "update", self.store.update_routine, payload, "Routine updated."
        )

    async def delete(self, key: RoutineKey) -> OperationResult:
        """Delete the routine with this key. Empty key fields are sent as-is."""
        missing = key.missing_fields()
        if missing:
            log.warning("routine_delete_partial_key", missing=missing)

        return await self._submit(
            "delete", self.store.delete_routine, key.as_selector(), "Routine deleted."
        )

    def _check(self, entry: RoutineEntry, ignore_key: RoutineKey | None) -> None:
        validate_entry(entry)
        if self.reject_teacher_conflicts and find_teacher_conflicts(
            entry, self._snapshot, ignore_key=ignore_key
        ):
            raise RoutineValidationError(CONFLICT_MESSAGE)

    async def _submit(
        self,
        operation: str,
        call: Callable[[dict[str, Any]], Awaitable[None]],
        payload: dict[str, Any],
        success_message: str,
    ) -> OperationResult:
        try:
            await call(payload)
        except BackendRejectedError as e:
            log.warning("routine_rejected", operation=operation, error=str(e))
            return OperationResult.rejected(str(e))
        except Exception as e:
            # Transport or unexpected backend failure: same outcome for the user
            log.error(
                "routine_operation_failed",
                operation=operation,
                error=str(e),
                type=type(e).__name__,
            )
            return OperationResult.rejected(str(e))

        log.info(
            "routine_submitted",
            operation=operation,
            key=render_key(RoutineKey.model_validate(payload)),
        )
        return OperationResult.success(success_message)

