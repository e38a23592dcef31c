from pydantic_settings import BaseSettings
from typing import Optional
from pathlib import Path

# Find .env file - check coopbook/ directory first, then project root
BASE_DIR = Path(__file__).resolve().parent.parent.parent
PACKAGE_ENV = BASE_DIR / "coopbook" / ".env"
ROOT_ENV = BASE_DIR / ".env"

# Use coopbook/.env if it exists, otherwise try root .env
env_file = str(PACKAGE_ENV) if PACKAGE_ENV.exists() else (str(ROOT_ENV) if ROOT_ENV.exists() else ".env")


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'coopbook.db'}"

    # State persistence: "sql", "file" or "memory"
    STATE_BACKEND: str = "sql"
    STATE_KEY: str = "society"
    STATE_FILE: Optional[str] = None
    SNAPSHOT_VERSION: str = "1.0"

    # Scheduler
    ENABLE_SCHEDULER: bool = True
    SCHEDULER_INTERVAL_MINUTES: int = 1440

    # Audit trail
    AUDIT_LOG_DIR: Optional[str] = None

    # Application
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = env_file
        case_sensitive = True


settings = Settings()

# Derived paths
LOGS_DIR = Path(settings.AUDIT_LOG_DIR) if settings.AUDIT_LOG_DIR else BASE_DIR / "logs"
STATE_FILE_PATH = Path(settings.STATE_FILE) if settings.STATE_FILE else BASE_DIR / "data" / "society_state.json"
