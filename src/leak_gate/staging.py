"""Export the git index into a throwaway scan root."""
from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

import structlog

from leak_gate.errors import StagingIOError
from leak_gate.utils.git import run_git

logger = structlog.get_logger()

GITLINK_MODE = "160000"
MISSING_MODE = "000000"


@dataclass(frozen=True)
class StagedEntry:
    """A path in the index together with its staged blob."""

    path: str
    blob: str
    mode: str


@dataclass
class StagingExport:
    """A populated staging root."""

    root: Path
    files: list[str] = field(default_factory=list)
    config_path: Path | None = None
    baseline_path: Path | None = None


def list_staged(repo: Path) -> list[StagedEntry]:
    """List staged additions and modifications.

    Deletions have no content to scan and submodule pointers are not files,
    so both are left out. An empty result means there is nothing to scan.
    """
    out = run_git(
        [
            "diff",
            "--cached",
            "--raw",
            "-z",
            "--no-abbrev",
            "--no-renames",
            "--diff-filter=d",
        ],
        repo,
    )
    return _parse_raw(out)


def _parse_raw(out: bytes) -> list[StagedEntry]:
    """Parse ``git diff --raw -z`` output.

    Each record is ``:<old mode> <new mode> <old sha> <new sha> <status>``
    followed by a NUL and the path.
    """
    tokens = out.split(b"\0")
    entries: list[StagedEntry] = []
    i = 0
    while i < len(tokens) - 1:
        meta = tokens[i].decode()
        if not meta.startswith(":"):
            i += 1
            continue
        path = os.fsdecode(tokens[i + 1])
        i += 2

        _, new_mode, _, new_sha, _status = meta[1:].split()
        if new_mode in (GITLINK_MODE, MISSING_MODE):
            logger.debug("Skipping non-file index entry", path=path, mode=new_mode)
            continue
        entries.append(StagedEntry(path=path, blob=new_sha, mode=new_mode))
    return entries


def _target(root: Path, relative: str) -> Path:
    parts = PurePosixPath(relative).parts
    if not parts or PurePosixPath(relative).is_absolute() or ".." in parts:
        raise StagingIOError(f"refusing to export unsafe path: {relative!r}")
    return root.joinpath(*parts)


def export_staged(repo: Path, entries: list[StagedEntry], dest: Path) -> list[str]:
    """Write the index version of each entry under *dest*.

    Content comes from the object database only; working-tree files are
    never opened.
    """
    written: list[str] = []
    for entry in entries:
        content = run_git(["cat-file", "blob", entry.blob], repo)
        target = _target(dest, entry.path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            raise StagingIOError(f"cannot write {entry.path}: {e}") from e
        written.append(entry.path)
    return written


def _copy_scanner_file(repo: Path, name: str, dest: Path) -> Path | None:
    source = repo / name
    if not source.is_file():
        return None
    target = dest / source.name
    try:
        shutil.copyfile(source, target)
    except OSError as e:
        raise StagingIOError(f"cannot copy {name}: {e}") from e
    logger.info("Copied scanner file into staging root", file=name)
    return target


@contextmanager
def staging_root(
    repo: Path,
    entries: list[StagedEntry],
    config_filename: str = ".gitleaks.toml",
    baseline_filename: str = ".gitleaks-baseline.json",
) -> Iterator[StagingExport]:
    """Populate a fresh temp directory and remove it on every exit path.

    Args:
        repo: Repository root
        entries: Staged entries from ``list_staged``
        config_filename: Scanner config copied from the repository root
        baseline_filename: Scanner baseline copied from the repository root

    Yields:
        The populated StagingExport
    """
    try:
        root = Path(tempfile.mkdtemp(prefix="leak-gate-"))
    except OSError as e:
        raise StagingIOError(f"cannot create staging directory: {e}") from e

    try:
        files = export_staged(repo, entries, root)
        export = StagingExport(
            root=root,
            files=files,
            config_path=_copy_scanner_file(repo, config_filename, root),
            baseline_path=_copy_scanner_file(repo, baseline_filename, root),
        )
        logger.debug("Staging root ready", root=str(root), files=len(files))
        yield export
    finally:
        shutil.rmtree(root, ignore_errors=True)
        if root.exists():
            logger.warning("Staging directory could not be removed", root=str(root))
