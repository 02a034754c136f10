"""Tests for the pattern smoke check."""

import unittest
from unittest.mock import MagicMock

import pytest

from copibot.checker import SUCCESS_MESSAGE, Assertion, AssertionFailure, build_assertions, run_checks, verify
from copibot.config import PatternSet
from copibot.patterns import compile_pattern


class TestVerify(unittest.TestCase):
    """Test suite for the non-exiting verification core."""

    def test_verify_built_in_assertions_pass(self) -> None:
        """1. Success: The built-in assertions hold for the default patterns."""
        verify(build_assertions())

    def test_verify_raises_first_failure(self) -> None:
        """2. Failure: The first failing assertion's message is raised."""
        assertions = build_assertions(PatternSet(yes_confirm=r"\b(sí)\b"))
        with pytest.raises(AssertionFailure) as exc_info:
            verify(assertions)
        assert exc_info.value.message == 'No detectó "si agrégalo"'

    def test_verify_short_circuits(self) -> None:
        """3. Short-circuit: Assertions after the first failure are not evaluated."""
        failing = Assertion(pattern=compile_pattern(r"\bfactura\b"), sample="con", message="first")
        never_reached = MagicMock()
        with pytest.raises(AssertionFailure, match="first"):
            verify([failing, never_reached])
        never_reached.holds.assert_not_called()

    def test_verify_reports_later_failure(self) -> None:
        """4. Ordering: A failure in the second assertion is reported by its own message."""
        assertions = build_assertions(PatternSet(with_invoice=r"\bfactura\b"))
        with pytest.raises(AssertionFailure) as exc_info:
            verify(assertions)
        assert exc_info.value.message == 'No detectó "con"'

    def test_verify_empty_sequence(self) -> None:
        """5. Edge Case: An empty sequence of assertions passes."""
        verify([])


class TestAssertion(unittest.TestCase):
    """Test suite for the Assertion value object."""

    def test_holds_matches_sample(self) -> None:
        """1. Match: holds() is True when the pattern is found in the sample."""
        assertion = Assertion(pattern=compile_pattern(r"\bsin\b"), sample="Sin factura", message="m")
        assert assertion.holds()

    def test_holds_no_match(self) -> None:
        """2. No Match: holds() is False when the pattern is absent."""
        assertion = Assertion(pattern=compile_pattern(r"\bsin\b"), sample="con factura", message="m")
        assert not assertion.holds()

    def test_build_assertions_order(self) -> None:
        """3. Order: Built-in assertions check confirm, with invoice, then without invoice."""
        samples = [a.sample for a in build_assertions()]
        assert samples == ["hola, si agrégalo por favor", "con", "sin"]


def test_run_checks_success(capsys: pytest.CaptureFixture[str]) -> None:
    """All built-in assertions pass: exit 0 and a single success line."""
    with pytest.raises(SystemExit) as exc_info:
        run_checks()
    assert exc_info.value.code == 0
    captured = capsys.readouterr()
    assert captured.out == f"{SUCCESS_MESSAGE}\n"
    assert captured.err == ""


def test_run_checks_failure_with_accent_only_pattern(capsys: pytest.CaptureFixture[str]) -> None:
    """A confirm pattern that requires the accent fails on "si": exit 1 and the diagnostic."""
    with pytest.raises(SystemExit) as exc_info:
        run_checks(build_assertions(PatternSet(yes_confirm=r"\b(sí)\b")))
    assert exc_info.value.code == 1
    captured = capsys.readouterr()
    assert captured.err == 'No detectó "si agrégalo"\n'
    assert captured.out == ""
