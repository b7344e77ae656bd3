from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    ENV: str = Field(default="dev")  # dev|prod
    TZ: str = Field(default="Africa/Casablanca")

    # DB
    DATABASE_URL: str = Field(default="postgresql+psycopg://app:app@db:5432/hse_kpi")

    # Celery / Redis
    REDIS_URL: str = Field(default="redis://redis:6379/0")

    # Reporting calendar: weeks run Saturday -> Friday (Monday=0 ... Sunday=6)
    WEEK_START_WEEKDAY: int = Field(default=5, ge=0, le=6)
    WEEKS_PER_YEAR: int = Field(default=52)

    # Lifecycle
    APPROVER_ROLES: str = Field(default="admin,hse_manager")

    @property
    def approver_roles(self) -> set[str]:
        return {r.strip() for r in self.APPROVER_ROLES.split(",") if r.strip()}


settings = Settings()
