"""Read-only git queries."""
from __future__ import annotations

import subprocess
from pathlib import Path

from leak_gate.errors import StagingIOError


def run_git(args: list[str], cwd: Path) -> bytes:
    """Run a git command and return its raw stdout.

    Args:
        args: Git command arguments (without 'git' prefix)
        cwd: Working directory for command

    Returns:
        Command output as bytes

    Raises:
        StagingIOError: If git is missing or the command fails
    """
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise StagingIOError("git executable not found") from e
    except subprocess.CalledProcessError as e:
        stderr = e.stderr.decode(errors="replace").strip()
        raise StagingIOError(f"git {' '.join(args)} failed: {stderr}") from e
    except OSError as e:
        raise StagingIOError(f"git {' '.join(args)} failed: {e}") from e
    return result.stdout


def repo_root(cwd: Path) -> Path:
    """Return the top-level directory of the repository containing *cwd*."""
    out = run_git(["rev-parse", "--show-toplevel"], cwd)
    return Path(out.decode().strip())
