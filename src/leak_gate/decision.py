"""Map scanner exit codes to commit gate decisions."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from leak_gate.utils.console import Diagnostics

# Hook host exit codes: 0 lets the tool call proceed, 2 blocks it
HOOK_CONTINUE = 0
HOOK_BLOCK = 2

REMEDIATION = (
    "Remove the secret from the file",
    "Use environment variables instead",
    "Add to .gitleaks-baseline.json if false positive",
)


class Verdict(str, Enum):
    """Gate outcomes."""

    ALLOW = "allow"
    BLOCK = "block"
    ALLOW_WITH_WARNING = "allow_with_warning"


@dataclass(frozen=True)
class GateDecision:
    """A verdict plus the reason shown to the operator."""

    verdict: Verdict
    reason: str
    remediation: tuple[str, ...] = ()

    @property
    def hook_exit_code(self) -> int:
        return HOOK_BLOCK if self.verdict is Verdict.BLOCK else HOOK_CONTINUE

    @property
    def blocked(self) -> bool:
        return self.verdict is Verdict.BLOCK

    def render(self, out: Diagnostics) -> None:
        """Print the decision as labeled diagnostic lines."""
        if self.verdict is Verdict.ALLOW:
            out.success(self.reason)
            return

        if self.verdict is Verdict.ALLOW_WITH_WARNING:
            for line in self.reason.splitlines():
                out.warning(line)
            return

        out.error(f"{self.reason.upper()}!")
        out.error("Commit blocked. Remove secrets before committing.")
        out.error("")
        out.error("Options:")
        for number, option in enumerate(self.remediation, start=1):
            out.error(f"  {number}. {option}")


def allow(reason: str) -> GateDecision:
    return GateDecision(Verdict.ALLOW, reason)


def warn(reason: str) -> GateDecision:
    return GateDecision(Verdict.ALLOW_WITH_WARNING, reason)


def decide(exit_code: int) -> GateDecision:
    """Translate a scanner exit code into a gate decision.

    Total over all integers: 0 allows, 1 blocks, anything else means the
    scanner itself misbehaved and the commit is allowed with a warning.
    """
    if exit_code == 0:
        return allow("No secrets detected in staged files")
    if exit_code == 1:
        return GateDecision(Verdict.BLOCK, "Secrets detected in staged files", REMEDIATION)
    return warn(
        f"Gitleaks scan failed (exit code: {exit_code})\n"
        "Allowing commit - check gitleaks configuration"
    )
