from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import computed_field
from typing import List, Optional

from northstar.schemas.okr import TrackingSource


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    APP_NAME: str = "Northstar"
    DEBUG: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

    # CORS - stored as comma-separated string
    CORS_ORIGINS_STR: str = "http://localhost:3000,http://127.0.0.1:3000"

    @computed_field
    @property
    def CORS_ORIGINS(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS_STR.split(",") if origin.strip()]

    # Progress engine defaults
    # Applied when a request carries no KR config: check_ins, tasks or mixed
    DEFAULT_TRACKING_SOURCE: TrackingSource = TrackingSource.CHECK_INS
    # Used by plan rollups when the plan record has no year
    DEFAULT_PLAN_YEAR: Optional[int] = None


settings = Settings()
