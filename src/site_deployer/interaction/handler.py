"""Operator confirmation for gated pipeline steps."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from ..utils.logging import get_logger

logger = get_logger(__name__)

AFFIRMATIVE_ANSWERS = ("y", "yes")


def is_affirmative(answer: Optional[str]) -> bool:
    """Default-deny: only an explicit y/yes (any case) counts as consent."""
    if answer is None:
        return False
    return answer.strip().lower() in AFFIRMATIVE_ANSWERS


class ConfirmationProvider(ABC):
    """Abstract source of yes/no answers."""

    @abstractmethod
    def confirm(self, question: str) -> bool:
        """
        Ask the operator a yes/no question.

        Args:
            question: The question, without the [y/N] suffix

        Returns:
            True only for an affirmative answer
        """
        pass


class CLIConfirmationProvider(ConfirmationProvider):
    """Reads the answer from the terminal."""

    def __init__(self, input_func: Optional[Callable[[str], str]] = None) -> None:
        self._input = input_func or input

    def confirm(self, question: str) -> bool:
        try:
            answer = self._input(f"\n⚠️  {question} [y/N]: ")
        except EOFError:
            # stdin closed, nobody to say yes
            return False
        return is_affirmative(answer)


class AutoConfirmationProvider(ConfirmationProvider):
    """
    Canned answers for unattended runs and tests.

    Every question receives ``answer``; the questions are recorded in
    ``questions`` so callers can assert on what was asked.
    """

    def __init__(self, answer: str = "y") -> None:
        self.answer = answer
        self.questions: List[str] = []

    def confirm(self, question: str) -> bool:
        self.questions.append(question)
        logger.info("Auto-answering %r with %r", question, self.answer)
        return is_affirmative(self.answer)
