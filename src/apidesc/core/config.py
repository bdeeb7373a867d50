"""Global configuration for apidesc.

This module provides centralized configuration management with support for
environment variables and sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_DESC_FILES: tuple[str, ...] = (
    "Desc/APIDesc.lua",
    "Desc/Classes/BlockEntities.lua",
    "Desc/Classes/Geometry.lua",
    "Desc/Classes/Network.lua",
    "Desc/Classes/Plugins.lua",
    "Desc/Classes/Projectiles.lua",
    "Desc/Classes/WebAdmin.lua",
)


class ApiDescConfig(BaseSettings):
    """apidesc configuration settings.

    Values can be overridden via environment variables with APIDESC_ prefix.
    Example: APIDESC_OUTPUT_SUFFIX=.converted overrides output_suffix.
    """

    # Inputs
    auto_api_dir: Path = Field(
        default=Path("AutoAPI"),
        description="Directory holding the AutoAPI class files and their _files.lua index",
    )
    desc_files: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DESC_FILES),
        description="Description files converted when none are given on the command line",
    )

    # Output
    output_suffix: str = Field(
        default=".new",
        min_length=1,
        description="Suffix appended to the input file name for the converted output",
    )
    indent: str = Field(
        default="\t",
        min_length=1,
        description="Indent unit used by the serializer",
    )
    self_test: bool = Field(
        default=True,
        description="Re-parse each written file and compare it with the converted document",
    )

    log_level: str = Field(
        default="WARNING",
        description="Log level used by the CLI when --verbose is not given",
    )

    model_config = {
        "env_prefix": "APIDESC_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_config() -> ApiDescConfig:
    """Get cached configuration instance.

    Returns:
        ApiDescConfig singleton instance.
    """
    return ApiDescConfig()


def reload_config() -> ApiDescConfig:
    """Reload configuration (clears cache).

    Returns:
        Fresh ApiDescConfig instance.
    """
    get_config.cache_clear()
    return get_config()
