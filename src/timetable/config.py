"""Timetable configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class TimetableConfig(BaseSettings):
    """Timetable configuration loaded from environment variables.

    Settings are loaded from TIMETABLE_* environment variables with sensible
    defaults. For local development, create a .env file in the project root.
    """

    # Viewer defaults
    default_role: str = Field(
        default="admin",
        description="Role assumed when no viewer session is supplied",
    )

    # Registry behaviour
    reject_teacher_conflicts: bool = Field(
        default=False,
        description=(
            "Reject create/update when the class teacher is already booked in "
            "the same section, day and overlapping time"
        ),
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "TIMETABLE_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: TimetableConfig | None = None


def get_config() -> TimetableConfig:
    """Get the timetable configuration singleton.

    Returns:
        TimetableConfig: Timetable configuration instance
    """
    global _config
    if _config is None:
        _config = TimetableConfig()
    return _config
