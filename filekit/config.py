# filekit/config.py
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


ENVIRONMENTS = ("web", "native", "generic")


class Settings(BaseSettings):
    """
    filekit settings. Env-driven so the CLI and library callers behave the same.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ---- Host environment ----
    environment: str = Field("generic", alias="FILEKIT_ENVIRONMENT")

    # ---- Fetch controls ----
    http_timeout_sec: int = Field(60, alias="FILEKIT_HTTP_TIMEOUT_SEC")
    fetch_max_mb: int = Field(40, alias="FILEKIT_FETCH_MAX_MB")

    # ---- PDF (web only) ----
    # 0 means read every page
    pdf_max_pages: int = Field(0, alias="FILEKIT_PDF_MAX_PAGES")

    # ---- Logging ----
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    def validate_runtime(self) -> None:
        if self.environment not in ENVIRONMENTS:
            raise ValueError(
                f"FILEKIT_ENVIRONMENT must be one of {', '.join(ENVIRONMENTS)}; got {self.environment!r}"
            )
        if self.http_timeout_sec <= 0:
            raise ValueError(f"FILEKIT_HTTP_TIMEOUT_SEC must be positive; got {self.http_timeout_sec}")
        if self.fetch_max_mb <= 0:
            raise ValueError(f"FILEKIT_FETCH_MAX_MB must be positive; got {self.fetch_max_mb}")
        if self.pdf_max_pages < 0:
            raise ValueError(f"FILEKIT_PDF_MAX_PAGES must be >= 0; got {self.pdf_max_pages}")
