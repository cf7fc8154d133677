"""Pre-tool-use hook protocol: JSON on stdin, verdict as exit code."""
from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from leak_gate.config import SETTINGS_FILENAME, GateConfig, discover_config
from leak_gate.decision import HOOK_CONTINUE
from leak_gate.gate import CommitGate
from leak_gate.utils.console import Diagnostics

logger = structlog.get_logger()


class ToolInput(BaseModel):
    """The tool call the host is about to make."""

    model_config = ConfigDict(extra="ignore")

    command: str = ""


class HookInput(BaseModel):
    """Hook payload; only the fields the gate needs are modeled."""

    model_config = ConfigDict(extra="ignore")

    tool_input: ToolInput = Field(default_factory=ToolInput)
    cwd: str = "."


def parse_hook_input(raw: str) -> HookInput:
    """Parse the hook payload, raising ValueError on malformed input."""
    try:
        data: Any = json.loads(raw) if raw.strip() else {}
    except json.JSONDecodeError as e:
        raise ValueError(f"hook input is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValueError("hook input must be a JSON object")

    # Hosts send null for absent fields
    data = {k: v for k, v in data.items() if v is not None}
    if isinstance(data.get("tool_input"), dict):
        data["tool_input"] = {
            k: v for k, v in data["tool_input"].items() if v is not None
        }

    try:
        return HookInput.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"unexpected hook input: {e}") from e


def is_commit_command(command: str, pattern: str = r"^git\s+commit") -> bool:
    return re.search(pattern, command) is not None


def resolve_cwd(cwd: str) -> Path:
    """Use the hook's cwd if it exists, otherwise stay where we are."""
    candidate = Path(os.path.expanduser(cwd))
    if candidate.is_dir():
        return candidate
    logger.debug("Hook cwd does not exist, using current directory", cwd=cwd)
    return Path.cwd()


def hook_settings(raw: str) -> GateConfig | None:
    """Settings discovered from the payload's cwd, or None if unreadable.

    Problems are left for ``run_hook`` to report.
    """
    try:
        payload = parse_hook_input(raw)
        return discover_config(resolve_cwd(payload.cwd))
    except (OSError, ValueError, yaml.YAMLError):
        return None


def run_hook(
    raw: str,
    config: GateConfig | None = None,
    gate: CommitGate | None = None,
    out: Diagnostics | None = None,
) -> int:
    """Handle one hook call and return the exit code for the host.

    Args:
        raw: Hook payload read from stdin
        config: leak-gate settings; discovered from the hook cwd when omitted
        gate: Pre-built gate, mainly for tests

    Returns:
        0 to let the command run, 2 to block it
    """
    out = out or (gate.out if gate else Diagnostics())

    try:
        payload = parse_hook_input(raw)
    except ValueError as e:
        out.warning(f"Could not read hook input ({e}) - skipping secret scan")
        return HOOK_CONTINUE

    cwd = resolve_cwd(payload.cwd)
    if config is None:
        try:
            config = discover_config(cwd)
        except (OSError, ValueError, yaml.YAMLError) as e:
            out.warning(f"Ignoring invalid {SETTINGS_FILENAME}: {e}")
            config = GateConfig()

    command = payload.tool_input.command
    if not is_commit_command(command, config.command_pattern):
        return HOOK_CONTINUE

    out.info("Intercepting git commit - scanning staged files for secrets...")

    gate = gate or CommitGate(config, out=out)
    decision = gate.run(cwd)
    decision.render(out)
    logger.info("Gate decision", verdict=decision.verdict.value, command=command)
    return decision.hook_exit_code
