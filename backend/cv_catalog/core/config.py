from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Literal, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    APP_NAME: str = "CV Catalog"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Record store: "memory" keeps everything in process, "sql" uses DATABASE_URL
    STORE_BACKEND: Literal["memory", "sql"] = "sql"
    DATABASE_URL: str = "sqlite+aiosqlite:///./cv_catalog.db"
    DB_ECHO: bool = False

    # File storage: "filesystem" writes under UPLOAD_DIR, "inline" keeps base64 in the record
    FILE_STORAGE: Literal["filesystem", "inline"] = "filesystem"
    UPLOAD_DIR: str = "data/uploads"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    # Listing
    LIST_LIMIT: Optional[int] = 50
    NATIONALITIES: list[str] = ["philippines", "ethiopia", "kenya"]

    # Admin gate. ADMIN_PASSWORD_HASH (bcrypt) wins over ADMIN_PASSWORD when both are set.
    ADMIN_PASSWORD: Optional[str] = None
    ADMIN_PASSWORD_HASH: Optional[str] = None

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    def is_known_nationality(self, value: str) -> bool:
        return value.strip().lower() in {n.lower() for n in self.NATIONALITIES}


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
