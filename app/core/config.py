# app/core/config.py
from __future__ import annotations

"""
# ReelVault — Centralized Configuration (Pydantic v2)

Single `settings` object with strongly-typed, environment-driven config.

## Goals
- Safe defaults for local/dev; explicit where prod needs secrets.
- CSV → list helpers for env-provided allow-lists.
- Storage rooted in one configured directory; callers only ever pass names.

## Usage
    from app.core.config import settings
"""

import logging
from pathlib import Path
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)
load_dotenv()  # harmless in prod; convenient in dev


# ─────────────────────────────────────────────────────────────
# Small helpers
# ─────────────────────────────────────────────────────────────
def _split_csv(v: str | None) -> list[str]:
    """Split a comma-separated string into a trimmed list (empty-safe)."""
    if not v:
        return []
    return [s.strip() for s in str(v).split(",") if s and s.strip()]


# ─────────────────────────────────────────────────────────────
# Settings
# ─────────────────────────────────────────────────────────────
class Settings(BaseSettings):
    """
    Global application settings sourced from environment.

    Security:
        - Tokens are verified only; issuance lives in the identity service.

    Storage:
        - All blobs live under `UPLOAD_DIR` and are served under `UPLOAD_URL_PREFIX`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # don't crash on unknown keys
    )

    # ── App meta ──────────────────────────────────────────────
    PROJECT_NAME: str = "ReelVault API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    ENV: Literal["development", "staging", "production"] = "development"
    ENABLE_DOCS: bool = True

    # ── Security / JWT (verification only) ────────────────────
    JWT_SECRET_KEY: SecretStr = Field(...)
    JWT_ALGORITHM: Literal["HS256", "HS384", "HS512"] = "HS256"
    JWT_ISSUER: Optional[str] = None
    JWT_AUDIENCE: Optional[str] = None

    # ── Database (PostgreSQL) ─────────────────────────────────
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: SecretStr = SecretStr("postgres")
    POSTGRES_DB: str = "reelvault"
    SQLALCHEMY_DATABASE_URI: Optional[str] = None  # full async DSN override

    # ── CORS ─────────────────────────────────────────────────
    BACKEND_CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:8000", "http://localhost:5173"]
    )

    # ── Storage / uploads ────────────────────────────────────
    UPLOAD_DIR: Path = Path("uploads")
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_VIDEO_SIZE: int = Field(1024 * 1024 * 1024, ge=1)  # 1 GiB
    MAX_IMAGE_SIZE: int = Field(2 * 1024 * 1024, ge=1)  # 2 MiB
    ALLOWED_VIDEO_EXTENSIONS: List[str] = Field(
        default_factory=lambda: [".mp4", ".mov", ".avi", ".wmv", ".flv", ".mkv"]
    )
    ALLOWED_IMAGE_EXTENSIONS: List[str] = Field(
        default_factory=lambda: [".jpg", ".jpeg", ".png", ".gif"]
    )
    STREAM_CHUNK_SIZE: int = Field(64 * 1024, ge=1024, le=8 * 1024 * 1024)

    # ── Listing ──────────────────────────────────────────────
    DEFAULT_PAGE_SIZE: int = Field(10, ge=1, le=50)
    MAX_PAGE_SIZE: int = Field(50, ge=1, le=200)

    # ── Logging (consumed by app.core.logger) ─────────────────
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    LOG_TO_FILE: bool = False
    LOG_DIR: Path = Path("logs")
    LOG_ROTATION: str = "10 MB"

    # ── Validators / normalizers ──────────────────────────────
    @field_validator("BACKEND_CORS_ORIGINS", "ALLOWED_VIDEO_EXTENSIONS", "ALLOWED_IMAGE_EXTENSIONS", mode="before")
    @classmethod
    def _assemble_csv(cls, v: str | List[str]):
        if isinstance(v, str):
            return _split_csv(v)
        return v

    @field_validator("UPLOAD_URL_PREFIX", mode="before")
    @classmethod
    def _normalize_prefix(cls, v: str | None) -> str:
        s = "/" + (v or "uploads").strip().strip("/")
        return s

    # ── Derived / convenience properties ─────────────────────
    @property
    def is_production(self) -> bool:
        return self.ENV.lower() == "production"

    @property
    def DATABASE_URL(self) -> str:
        """Sync DSN."""
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD.get_secret_value()}"
            f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def ASYNC_DATABASE_URL(self) -> str:
        """Async SQLAlchemy DSN (explicit override wins)."""
        if self.SQLALCHEMY_DATABASE_URI:
            return self.SQLALCHEMY_DATABASE_URI
        return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://")


# Singleton instance
settings = Settings()
