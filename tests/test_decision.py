"""Tests for exit code to gate decision mapping."""
import pytest

from leak_gate.decision import REMEDIATION, Verdict, decide


class TestDecide:
    def test_zero_allows(self):
        decision = decide(0)
        assert decision.verdict is Verdict.ALLOW
        assert decision.hook_exit_code == 0

    def test_one_blocks_with_remediation(self):
        decision = decide(1)
        assert decision.verdict is Verdict.BLOCK
        assert decision.blocked
        assert decision.hook_exit_code == 2
        assert decision.remediation == REMEDIATION

    @pytest.mark.parametrize("code", [2, -1, 125, 126, 127, 255, -9])
    def test_anything_else_warns(self, code):
        decision = decide(code)
        assert decision.verdict is Verdict.ALLOW_WITH_WARNING
        assert decision.hook_exit_code == 0
        assert f"exit code: {code}" in decision.reason


class TestRender:
    def test_block_lists_options(self, diagnostics, buffer):
        decide(1).render(diagnostics)
        output = buffer.getvalue()

        assert "[gitleaks] SECRETS DETECTED IN STAGED FILES!" in output
        assert "Commit blocked" in output
        assert "1. Remove the secret from the file" in output
        assert "2. Use environment variables instead" in output
        assert "3. Add to .gitleaks-baseline.json if false positive" in output

    def test_warning_renders_each_line(self, diagnostics, buffer):
        decide(3).render(diagnostics)
        lines = buffer.getvalue().splitlines()

        assert lines == [
            "[gitleaks] Gitleaks scan failed (exit code: 3)",
            "[gitleaks] Allowing commit - check gitleaks configuration",
        ]

    def test_allow_is_one_line(self, diagnostics, buffer):
        decide(0).render(diagnostics)
        assert buffer.getvalue() == "[gitleaks] No secrets detected in staged files\n"
