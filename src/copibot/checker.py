"""
Smoke check for the intent patterns.

Each assertion pairs a pattern with a sample phrase it must match. The check
stops at the first assertion that does not hold, writes its message to stderr
and exits with status 1; otherwise it prints a single confirmation line.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, NoReturn

from .config import PatternSet
from .patterns import compile_pattern, matches

if TYPE_CHECKING:
    from collections.abc import Iterable

    import regex

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Smoke OK"


class AssertionFailure(Exception):  # noqa: N818
    """A pattern did not match the sample it is expected to match."""

    def __init__(self, message: str) -> None:
        """Store the diagnostic message shown to the user."""
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class Assertion:
    """
    A single pattern check paired with its diagnostic message.

    Attributes:
        pattern: The compiled pattern under test.
        sample: The phrase the pattern must find a match in.
        message: Shown verbatim when the pattern does not match.

    """

    pattern: regex.Pattern
    sample: str
    message: str

    def holds(self) -> bool:
        """Evaluate the condition. Only called when the checker reaches this assertion."""
        return matches(self.pattern, self.sample)


def build_assertions(pattern_set: PatternSet | None = None) -> list[Assertion]:
    """Build the built-in assertions from a pattern set (the defaults if omitted)."""
    pattern_set = pattern_set or PatternSet()
    return [
        Assertion(
            pattern=compile_pattern(pattern_set.yes_confirm),
            sample="hola, si agrégalo por favor",
            message='No detectó "si agrégalo"',
        ),
        Assertion(
            pattern=compile_pattern(pattern_set.with_invoice),
            sample="con",
            message='No detectó "con"',
        ),
        Assertion(
            pattern=compile_pattern(pattern_set.without_invoice),
            sample="sin",
            message='No detectó "sin"',
        ),
    ]


def verify(assertions: Iterable[Assertion]) -> None:
    """
    Evaluate assertions in order, stopping at the first failure.

    Raises:
        AssertionFailure: For the first assertion that does not hold.

    """
    for index, assertion in enumerate(assertions, start=1):
        if not assertion.holds():
            logger.debug("Assertion %d failed: '%s' vs %r", index, assertion.pattern.pattern, assertion.sample)
            raise AssertionFailure(assertion.message)
        logger.debug("Assertion %d passed: %r", index, assertion.sample)


def run_checks(assertions: Iterable[Assertion] | None = None) -> NoReturn:
    """
    Run the smoke check and terminate the process.

    Exits with status 0 after printing the success line on stdout, or with
    status 1 after printing the first failing message on stderr.
    """
    if assertions is None:
        assertions = build_assertions()
    try:
        verify(assertions)
    except AssertionFailure as e:
        print(e.message, file=sys.stderr)
        sys.exit(1)
    print(SUCCESS_MESSAGE)
    sys.exit(0)
