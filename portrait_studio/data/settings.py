# portrait_studio/data/settings.py
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleConfig(BaseModel):
    api_key: SecretStr | None = None
    # Vertex AI backend is used when both project and credentials are present
    project_id: str | None = None
    location: str = "global"
    service_account_creds_json: SecretStr | None = None

    @property
    def use_vertex(self) -> bool:
        return bool(self.project_id and self.service_account_creds_json)


class GenerationConfig(BaseModel):
    client: str = "google"
    model: str = "gemini-2.5-flash-image"
    temperature: float = 0.6
    aspect_ratio: str | None = None
    mock_delay_seconds: float = 1.0


class CooldownConfig(BaseModel):
    initial_delay_seconds: int = 60
    max_delay_seconds: int = 300


class HistoryConfig(BaseModel):
    backend: Literal["redis", "file", "memory"] = "redis"
    key: str = "request_history"
    max_entries: int = 20
    file_path: Path = Path(".portrait_studio") / "request_history.json"


class RedisConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 6379
    password: SecretStr | None = None
    username: str | None = None
    db: int = 0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    google: GoogleConfig = Field(default_factory=GoogleConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    cooldown: CooldownConfig = Field(default_factory=CooldownConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    redis: RedisConfig = Field(default_factory=RedisConfig)

    locale: str = "en"
    logging_level: int = 20


settings = Settings()
