"""
Configuration for the Hearing Desk Service
==========================================

Environment variables:
- STORAGE_BACKEND: memory|sql (default: memory)
- DATABASE_URL: SQLite URL used when STORAGE_BACKEND=sql
- SEED_DEMO_DATA: load demo jurisdictions/professionals/hearings on startup (default: true)
- UPLOADS_DIR: where uploaded hearing minutes are written (default: ./uploads)
- MAX_UPLOAD_BYTES: maximum minutes file size (default: 10 MB)
- ENFORCE_TRANSITIONS: reject illegal hearing status changes (default: true)
- ENFORCE_ELIGIBILITY: reject assigning ineligible professionals (default: true)
- MINUTES_DUE_DAYS / PAYMENT_DUE_DAYS: due date offsets for derived tasks
- CORS_ALLOW_ORIGINS: comma separated list of allowed origins
- API_HOST / API_PORT / API_RELOAD: bind address and autoreload for `python -m juriscrm.run`
"""

from typing import List
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables"""

    # Storage
    storage_backend: str = "memory"  # memory | sql
    database_url: str = "sqlite:///./juriscrm.db"
    seed_demo_data: bool = True

    # Minutes uploads
    uploads_dir: str = "./uploads"
    max_upload_bytes: int = 10 * 1024 * 1024

    # Domain rules
    enforce_transitions: bool = True
    enforce_eligibility: bool = True

    # Derived task due dates (days after the hearing date)
    minutes_due_days: int = 2
    payment_due_days: int = 15

    # HTTP
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = False
    cors_allow_origins: str = "http://localhost:5173,http://127.0.0.1:5173,http://localhost:8000"

    # Service info
    service_version: str = "1.0.0"
    log_level: str = "INFO"

    class Config:
        env_prefix = ""
        case_sensitive = False
        env_file = ".env"
        env_file_encoding = "utf-8"

    def cors_origins(self) -> List[str]:
        origins: List[str] = []
        for item in self.cors_allow_origins.split(","):
            origin = item.strip().strip('"').strip("'").rstrip("/")
            if origin:
                origins.append(origin)
        return origins

    def validate_storage_config(self) -> List[str]:
        """Validate storage configuration, return list of warnings"""
        warnings = []

        if self.storage_backend not in ("memory", "sql"):
            warnings.append(f"STORAGE_BACKEND={self.storage_backend!r} is unknown, falling back to memory")

        if self.storage_backend == "sql" and not self.database_url.startswith("sqlite"):
            warnings.append(f"DATABASE_URL must be a sqlite URL, got {self.database_url.split(':', 1)[0]!r}")

        if self.storage_backend == "memory":
            warnings.append("STORAGE_BACKEND=memory: all records are lost on restart")

        return warnings


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
