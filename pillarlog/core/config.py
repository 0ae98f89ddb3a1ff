from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    DB_URL: str
    OPENAI_API_KEY: str | None = None

    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_COOKIE_NAME: str = "access_token"

    PREDICTOR_MODEL: str = "gpt-4.1-mini"
    PREDICTOR_TIMEOUT_SECONDS: float = 20.0
    DEFAULT_WEEKLY_FREQUENCY_TARGET: int = Field(default=5, ge=1, le=7)

    CORS_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"
    DB_ECHO: bool = False

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[1].parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

settings = Settings()
