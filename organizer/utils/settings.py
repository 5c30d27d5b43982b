"""Pydantic settings for the bookmark organizer."""

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.config import CONFIG_DIR


class AppSettings(BaseSettings):
    """Settings for storage paths and engine defaults."""

    model_config = SettingsConfigDict(env_prefix="DEVCONTEXT_")

    base_path: Path = Field(
        Path("."),
        description="Base directory for relative storage paths.",
    )

    storage_path: Path = Field(
        Path("data"),
        description="Directory containing bookmarks.db.",
    )

    config_dir: Path = Field(
        CONFIG_DIR,
        description="Directory containing patterns.yaml and domains.yaml.",
    )

    suggestion_limit: int = Field(
        10,
        ge=1,
        description="Default number of suggestions returned per workspace.",
    )

    log_file_prefix: str = Field(
        "organizer",
        description="Prefix for the rotating log file under ./logs.",
    )

    @model_validator(mode="after")
    def _apply_base_path(self) -> "AppSettings":
        self.storage_path = self._resolve_under_base(self.storage_path)
        return self

    def _resolve_under_base(self, path: Path) -> Path:
        if path.is_absolute():
            return path
        return self.base_path / path
