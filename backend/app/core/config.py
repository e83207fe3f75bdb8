from datetime import date
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
import os


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=os.getenv("ENV_FILE", ".env"), extra="ignore")

    app_name: str = Field(default="fle_logbook")
    app_env: str = Field(default="dev")
    log_level: str = Field(default="INFO")
    version: str = Field(default="0.1.0")

    # Award window, inclusive local dates
    award_start_date: date = Field(default=date(2025, 6, 1))
    award_end_date: date = Field(default=date(2025, 12, 31))
    award_utc_offset_minutes: int = Field(default=540)

    # HAMLOG marks UTC times with U/Z; anything else is local time
    hamlog_local_offset_minutes: int = Field(default=540)

    max_upload_bytes: int = Field(default=5 * 1024 * 1024)

    adif_program_id: str = Field(default="FLE_LOGBOOK")
    adif_program_version: str = Field(default="0.1.0")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
