"""Runtime configuration read from environment variables."""

import os
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


def default_build_id() -> str:
    return datetime.now().strftime("%Y%m%d-%H%M%S")


class Settings(BaseModel):
    """deploygate settings, resolved once per CLI invocation."""

    archive_dir: str | None = Field(
        None, description="Directory to archive reports and verdicts under"
    )
    build_id: str = Field(..., min_length=1, description="Per-run archive folder name")
    pmd_max_priority: int = Field(
        2, ge=1, le=5, description="Least severe PMD priority that blocks"
    )
    log_format: Literal["json", "console"] = Field("json", description="structlog renderer")


def load_settings() -> Settings:
    """
    Build Settings from the environment.

    DEPLOYGATE_BUILD_ID falls back to Jenkins' BUILD_NUMBER, then to a
    timestamp, so every run archives into its own folder.
    """
    return Settings(
        archive_dir=os.getenv("DEPLOYGATE_ARCHIVE_DIR") or None,
        build_id=(
            os.getenv("DEPLOYGATE_BUILD_ID")
            or os.getenv("BUILD_NUMBER")
            or default_build_id()
        ),
        pmd_max_priority=os.getenv("DEPLOYGATE_PMD_MAX_PRIORITY", "2"),
        log_format=os.getenv("DEPLOYGATE_LOG_FORMAT", "json").lower(),
    )
