from pathlib import Path
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repo root

ENV_FILE = os.getenv("ENV_FILE", str(BASE_DIR / ".env"))

FIELD_TYPES = [
    "text", "email", "password", "number",
    "select", "radio", "checkbox", "textarea",
    "file", "date", "time", "datetime-local",
    "url", "tel", "search", "color", "range", "hidden",
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILE, extra="ignore")

    APP_ENV: str = "local"
    DATABASE_URL: str = "sqlite:///./form_builder.db"
    CORS_ORIGINS: str = "*"  # Comma-separated list of allowed origins, or "*" for all
    LOG_LEVEL: str = "INFO"

    VALID_LOCALES: list[str] = ["en", "de", "it", "fr"]
    VALID_FIELD_TYPES: list[str] = FIELD_TYPES
    MAX_LOCALES: int = 10
    MAX_FIELDS_PER_FORM: int = 50

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list, handling '*' for development"""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

settings = Settings()
