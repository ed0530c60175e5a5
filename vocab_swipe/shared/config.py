# vocab_swipe/shared/config.py
import os
from enum import Enum
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppEnv(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class StorageBackend(str, Enum):
    FILESYSTEM = "filesystem"
    REMOTE = "remote"


class Settings(BaseSettings):
    """
    Central Configuration Registry.
    Strictly typed and validated via Pydantic.
    """

    # --- Application Meta ---
    APP_NAME: str = "vocab-swipe"
    APP_ENV: AppEnv = AppEnv.DEVELOPMENT
    DEBUG: bool = False

    # --- Logging & Observability ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"
    OTEL_SERVICE_NAME: str = "vocab-swipe-api"
    OTEL_EXPORTER_OTLP_ENDPOINT: Optional[str] = None

    # --- HTTP ---
    CORS_ORIGINS: List[str] = ["*"]

    # --- Persistence ---
    STORAGE_BACKEND: StorageBackend = StorageBackend.FILESYSTEM

    # FILESYSTEM CONFIG
    # Root folder holding `sources/` and the progress state file
    FILESYSTEM_REPO_PATH: str = "./data"

    # REMOTE CONFIG (another Vocab Swipe server, or anything speaking its API)
    REMOTE_API_URL: str = "http://localhost:8080"
    REMOTE_TIMEOUT_SEC: int = 10

    # --- Engine ---
    SELECTION_POLICY: str = "random"  # 'random' or 'sequential'
    RANDOM_SEED: Optional[int] = None
    PROGRESS_STORAGE_KEY: str = "vocab_progress_v1"

    # --- Dynamic Path Resolution ---

    @property
    def SOURCES_DIR(self) -> str:
        """Folder scanned for `.data` / `.json` vocabulary files."""
        return os.path.join(self.FILESYSTEM_REPO_PATH, "sources")

    @property
    def STATE_FILE(self) -> str:
        """Durable client-side state (the localStorage equivalent)."""
        return os.path.join(self.FILESYSTEM_REPO_PATH, "state.json")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
