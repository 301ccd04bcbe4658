from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Interview Practice Backend"
    api_prefix: str = "/api"
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]

    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_timeout_seconds: float = 30.0
    openai_max_retries: int = 2

    database_url: str = "sqlite:////tmp/interview_practice.db"
    seed_questions_on_startup: bool = True
    catalog_cache_ttl_seconds: int = 600

    log_level: str = "INFO"
    enable_file_logs: bool = False
    log_file: str = "logs/app.log"
    log_max_bytes: int = 5242880
    log_backup_count: int = 5

    @property
    def is_production(self) -> bool:
        return not self.database_url.startswith("sqlite")


settings = Settings()
