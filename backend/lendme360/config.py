import json
from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class OpenAISettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="OPENAI_")

    API_KEY: str | None = None
    API_BASE: str | None = None
    MODEL: str = "gpt-5-nano"
    TRANSCRIPTION_MODEL: str = "whisper-1"
    TIMEOUT_SECONDS: float | None = None
    # 1 means a single attempt per user action
    MAX_ATTEMPTS: int = Field(default=1, ge=1)


class ServerSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SERVER_")

    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: Annotated[List[str], NoDecode] = Field(default_factory=lambda: ["*"])

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_origins(cls, v: str | list) -> list[str]:
        if isinstance(v, str):
            # Handle JSON string '["http://a", "http://b"]'
            if v.startswith("[") and v.endswith("]"):
                return json.loads(v)
            # Handle comma-separated string "http://a,http://b"
            return [i.strip() for i in v.split(",") if i.strip()]
        return v


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    LOG_LEVEL: str = "INFO"
    SEED_DEMO_DATA: bool = True
    MIN_SUBMISSIONS_TO_COMPLETE: int = Field(default=0, ge=0)
    server: ServerSettings = ServerSettings()
    openai: OpenAISettings = OpenAISettings()


settings = Settings()
