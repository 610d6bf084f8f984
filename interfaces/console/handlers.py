from __future__ import annotations

import sys
from typing import Optional, TextIO

from application.orchestrator import TransactionOutcome, TransactionState
from logging_setup import logger


class TextConsole:
    """
    Console surface backed by two text streams.

    Defaults to the process's stdin/stdout; tests pass `io.StringIO`
    objects instead.
    """

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout

    def read_line(self) -> Optional[str]:
        """Return the next line, or None once the input is exhausted or closed."""

        try:
            line = self._stdin.readline()
        except (OSError, ValueError):
            logger.warning("Console input is unavailable, treating it as end of input")
            return None
        if line == "":
            return None
        return line.rstrip("\r\n")

    def write_line(self, text: str) -> None:
        self._stdout.write(f"{text}\n")
        self._stdout.flush()


def render_outcome(outcome: TransactionOutcome) -> str:
    """Text shown to the customer at the end of a loop iteration."""

    if outcome.state is TransactionState.COMPLETE and outcome.drink is not None:
        return f"You've bought {outcome.drink.id}"
    if outcome.state is TransactionState.INVALID_SELECTION:
        return f"{outcome.choice} is an invalid selection"
    if outcome.state is TransactionState.REJECTED:
        return "Invalid credentials"
    if outcome.state is TransactionState.RESTOCKED:
        return "Replenishing inventory"
    return "Error Occurred!"
