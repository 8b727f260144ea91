"""Scanner configuration via environment variables and an optional TOML file."""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class ScanSettings(BaseSettings):
    # Reachability
    fan_out_threshold: int = Field(5, ge=1)
    max_data_flow_paths: int = Field(10, ge=0)
    path_collapse_length: int = Field(5, ge=3)

    # Parameter walker
    max_parameter_depth: int = Field(64, ge=1)

    # Execution
    parallel_checks: bool = False
    max_workers: int = Field(4, ge=1)

    # Logging
    log_level: str = "info"
    json_logs: bool = False

    model_config = {
        "env_prefix": "FLOWAUDIT_",
        "frozen": True,
    }


def load_settings(config_path: Path | str | None = None) -> ScanSettings:
    """Build settings from the environment, overlaid with a TOML file.

    The file is optional; when given, its ``[flowaudit]`` table overrides
    environment values key by key.
    """
    if config_path is None:
        return ScanSettings()

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        raw = tomllib.load(f)

    section = raw.get("flowaudit", {})
    return ScanSettings(**section)


settings = ScanSettings()
