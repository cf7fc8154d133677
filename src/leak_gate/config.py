"""Configuration management for leak-gate."""
from __future__ import annotations

import re
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from leak_gate.types import DEFAULT_MOUNT_PATH, RuntimeBackend

SETTINGS_FILENAME = ".leak-gate.yaml"


class GateConfig(BaseModel):
    """Main configuration for leak-gate."""

    # General settings
    log_level: str = "warning"

    # Scanner image and layout
    image: str = "zricethezav/gitleaks"
    mount_path: str = DEFAULT_MOUNT_PATH
    config_filename: str = ".gitleaks.toml"
    baseline_filename: str = ".gitleaks-baseline.json"

    # Runtime selection (None means auto-detect)
    runtime: RuntimeBackend | None = None
    docker_socket: str | None = None
    colima_tools: list[str] = Field(
        default_factory=lambda: ["lima@latest", "colima@latest"]
    )

    # Timeouts, in seconds
    probe_timeout: float = Field(default=10.0, gt=0)
    start_timeout: float = Field(default=60.0, gt=0)
    poll_interval: float = Field(default=2.0, gt=0)
    scan_timeout: float = Field(default=300.0, gt=0)

    # Hook activation
    command_pattern: str = r"^git\s+commit"

    @field_validator("command_pattern")
    @classmethod
    def _compiles(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid command_pattern: {e}") from e
        return value

    @field_validator("mount_path")
    @classmethod
    def _absolute_mount(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("mount_path must be an absolute container path")
        return value.rstrip("/") or "/"


def load_config(path: Path) -> GateConfig:
    """Load configuration from a YAML file."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level")

    return GateConfig(**data)


def discover_config(directory: Path) -> GateConfig:
    """Load ``.leak-gate.yaml`` from *directory* if present, else defaults."""
    candidate = directory / SETTINGS_FILENAME
    if candidate.is_file():
        return load_config(candidate)
    return GateConfig()
