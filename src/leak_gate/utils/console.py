"""Colored, labeled operator diagnostics written to stderr."""
from __future__ import annotations

from rich.console import Console
from rich.text import Text

LABEL = "[gitleaks]"


class Diagnostics:
    """Prints ``[gitleaks]``-labeled lines in the color of their severity."""

    def __init__(self, console: Console | None = None, label: str = LABEL) -> None:
        self.console = console or Console(stderr=True, highlight=False)
        self.label = label

    def _emit(self, style: str, message: str) -> None:
        self.console.print(
            Text.assemble((self.label, style), " ", message),
            soft_wrap=True,
        )

    def info(self, message: str) -> None:
        self._emit("cyan", message)

    def success(self, message: str) -> None:
        self._emit("green", message)

    def warning(self, message: str) -> None:
        self._emit("yellow", message)

    def error(self, message: str) -> None:
        self._emit("red", message)

    def passthrough(self, output: str) -> None:
        """Echo raw scanner output without labels or markup."""
        text = output.rstrip("\n")
        if text:
            self.console.print(Text(text), soft_wrap=True)
