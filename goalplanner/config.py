from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    sqlite_path: str = "data/planner.db"
    sqlite_echo: bool = False
    log_path: str = "logs/planner.log"
    log_level: str = "INFO"
    log_rotation: str = "10 MB"
    log_retention: str = "30 days"
    # Upper bound for the derived week number; None leaves it unclamped.
    cycle_max_week: int | None = None


settings = Settings()
