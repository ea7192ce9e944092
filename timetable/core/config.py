"""Application settings (Pydantic Settings).

Values can be overridden with ``TIMETABLE_``-prefixed environment variables
or a ``.env`` file in the working directory.
"""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from timetable.domain.models import AllDaysPolicy


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TIMETABLE_", env_file=".env", extra="ignore"
    )

    # App
    app_name: str = "Class Timetable Service"
    log_level: str = "INFO"

    # Storage
    store_backend: Literal["memory", "mongo"] = "memory"
    seed_sample_data: bool = False
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "school"
    mongo_collection: str = "timetable"
    mongo_timeout_ms: int = 3000

    # Scheduling rules
    enforce_time_order: bool = True
    # Purge the original day's copy when an edit moves a session to another day.
    move_across_days: bool = False
    all_days_policy: AllDaysPolicy = AllDaysPolicy.INDEPENDENT


settings = Settings()
