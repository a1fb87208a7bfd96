"""Environment-based settings configuration."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class Settings(BaseSettings):
    """Settings that come from ``CATALOG_*`` environment variables.

    The listen port is the one exception: it is read from plain ``PORT``.
    The document and media paths default to locations under ``data_dir``.
    """

    data_dir: Path = Field(default=_DEFAULT_DATA_DIR)
    database_file: Path | None = Field(default=None)
    upload_dir: Path | None = Field(default=None)

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, validation_alias="PORT")
    log_level: str = Field(default="INFO")
    prune_replaced_images: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @model_validator(mode="after")
    def _derive_paths(self) -> Settings:
        if self.database_file is None:
            self.database_file = self.data_dir / "database.json"
        if self.upload_dir is None:
            self.upload_dir = self.data_dir / "uploads"
        return self
