"""Command-line interface for leak-gate."""
from __future__ import annotations

import signal
import sys
from pathlib import Path

import click
import yaml

from leak_gate import __version__
from leak_gate.config import GateConfig, discover_config, load_config
from leak_gate.hook import hook_settings, run_hook
from leak_gate.scan import run_scan
from leak_gate.types import RuntimeBackend, RuntimeState
from leak_gate.utils.logging import setup_logging

RUNTIME_CHOICES = [backend.value for backend in RuntimeBackend]


def _exit_on_sigterm() -> None:
    """Turn SIGTERM into SystemExit so context managers clean up."""

    def handle_signal(signum: int, frame: object) -> None:
        raise SystemExit(128 + signum)

    signal.signal(signal.SIGTERM, handle_signal)


def _settings(path: Path | None, fallback_dir: Path) -> GateConfig:
    if path:
        return load_config(path)
    return discover_config(fallback_dir)


settings_option = click.option(
    "--settings",
    "-s",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to a leak-gate YAML settings file",
)

log_level_option = click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default=None,
    help="Logging level (overrides settings)",
)


@click.group()
@click.version_option(version=__version__, prog_name="leak-gate")
def main() -> int | None:
    """leak-gate - containerized secret scanning for git commits."""
    return None


@main.command()
@settings_option
@log_level_option
def hook(settings: Path | None, log_level: str | None) -> None:
    """Run as a pre-tool-use hook, reading the tool call from stdin.

    Exits 0 to let the command proceed and 2 to block a commit that
    contains secrets.
    """
    cfg = None
    config_error = None
    if settings:
        try:
            cfg = load_config(settings)
        except (OSError, ValueError, yaml.YAMLError) as e:
            config_error = e

    raw = click.get_text_stream("stdin").read()
    if settings is None:
        cfg = hook_settings(raw)

    setup_logging(log_level or (cfg.log_level if cfg else "warning"))
    if config_error:
        # Broken settings must not block commits
        click.echo(f"[gitleaks] Ignoring settings {settings}: {config_error}", err=True)
        cfg = GateConfig()
    _exit_on_sigterm()

    sys.exit(run_hook(raw, config=cfg))


@main.command()
@click.option(
    "--runtime",
    "-R",
    type=click.Choice(RUNTIME_CHOICES),
    default=None,
    help="Container runtime (auto-detects if not specified)",
)
@click.option(
    "--report",
    "-r",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Generate JSON report to specified path",
)
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(path_type=Path),
    default=None,
    help="Use custom gitleaks config file",
)
@click.option(
    "--baseline",
    "-b",
    type=click.Path(path_type=Path),
    default=None,
    help="Use baseline file to ignore known findings",
)
@click.option(
    "--path",
    "-p",
    "scan_path",
    type=click.Path(path_type=Path),
    default=Path("."),
    show_default=True,
    help="Path to scan",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug logging")
@settings_option
@log_level_option
def scan(
    runtime: str | None,
    report: Path | None,
    config_file: Path | None,
    baseline: Path | None,
    scan_path: Path,
    verbose: bool,
    settings: Path | None,
    log_level: str | None,
) -> None:
    """Scan a directory for secrets with gitleaks in a container.

    Exit codes: 0 clean, 1 secrets found, >1 tool or configuration error.
    """
    try:
        cfg = _settings(settings, scan_path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        click.echo(f"Configuration error: {e}", err=True)
        raise SystemExit(2) from e

    setup_logging("debug" if verbose else (log_level or cfg.log_level))
    _exit_on_sigterm()

    sys.exit(
        run_scan(
            path=scan_path,
            runtime=runtime,
            report=report,
            config_file=config_file,
            baseline=baseline,
            config=cfg,
        )
    )


@main.command("detect-runtime")
@settings_option
def detect_runtime(settings: Path | None) -> None:
    """Detect the container runtime that would be used."""
    setup_logging("warning")
    from leak_gate.runtime.detector import default_providers
    from leak_gate.runtime.detector import detect_runtime as select
    from leak_gate.runtime.docker_engine import DockerProvider

    cfg = _settings(settings, Path.cwd())
    providers = default_providers(cfg)

    for provider in providers:
        if not provider.detect():
            state = RuntimeState.NOT_INSTALLED
        elif provider.is_live():
            state = RuntimeState.RUNNING
        else:
            state = RuntimeState.INSTALLED_STOPPED
        click.echo(f"  {provider.name:<10} {provider.display_name:<20} {state.value}")

    selected = select(providers, preferred=cfg.runtime)
    if selected is None:
        click.echo("Detected runtime: none", err=True)
        raise SystemExit(1)

    click.echo(f"Detected runtime: {selected.name}")
    if isinstance(selected, DockerProvider):
        click.echo(f"Docker endpoint: {selected.base_url()}")


@main.command("validate-config")
@click.option(
    "--settings",
    "-s",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Path to a leak-gate YAML settings file",
)
def validate_config(settings: Path) -> None:
    """Validate a settings file."""
    try:
        cfg = load_config(settings)
        click.echo(f"Configuration valid: {settings}")
        click.echo(f"  Image: {cfg.image}")
        click.echo(f"  Runtime: {cfg.runtime.value if cfg.runtime else 'auto'}")
        click.echo(f"  Start timeout: {cfg.start_timeout:g}s")
        click.echo(f"  Scan timeout: {cfg.scan_timeout:g}s")
    except Exception as e:
        click.echo(f"Configuration error: {e}", err=True)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
