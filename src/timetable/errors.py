"""Error hierarchy for routine validation and backend failures.

Operations on the registry never let these escape to the caller: they are
classified into an OperationResult so the UI can show a message. Stores and
reference loaders raise them to signal which kind of failure occurred.

Example usage in a store:
    if key in self._rows:
        raise BackendRejectedError("Routine already exists")
"""


class TimetableError(Exception):
    """Base exception for all timetable errors."""

    pass


class RoutineValidationError(TimetableError):
    """Entry failed local validation - no store call was made.

    Examples: missing classroom, start time after end time, unknown slot code.
    """

    pass


class BackendRejectedError(TimetableError):
    """The backing store refused the operation.

    Examples: duplicate composite key on create, original key not found on update.
    The message is shown to the user verbatim.
    """

    pass

