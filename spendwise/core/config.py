from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App settings
    PROJECT_NAME: str = "SpendWise"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Storage ("memory" or "dynamo")
    STORAGE_BACKEND: str = Field(default="memory")
    DYNAMO_REGION: str = Field(default="ap-south-1")
    DYNAMO_TABLE: str = Field(default="spendwise-store")

    # JWT Authentication
    JWT_SECRET_KEY: str = Field(default="5f0c1d9e2b7a4c3e8d6f1a0b9c8e7d6a5b4c3d2e1f0a9b8c7d6e5f4a3b2c1d0e")
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # Money coach chat
    OPENAI_API_KEY: Optional[str] = Field(default=None)
    OPENAI_MODEL: str = Field(default="gpt-4o-mini")

    # Suggestion rule overrides
    COACH_RULES_JSON: str = Field(default="config/coach_rules.json")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


settings = Settings()
