"""
Base class of query correction strategies.
"""
from abc import ABC, abstractmethod

from newsearch.models.spell_check import SpellCheckResult


class SpellChecker(ABC):
    """
    One query correction strategy.

    Strategies know nothing about each other; CompositeSpellChecker runs
    them in ascending priority order, feeding each one the output of the
    previous. try_correct should report failures as
    SpellCheckResult.error() rather than raise.
    """

    name: str = "base"
    priority: int = 100

    @abstractmethod
    def try_correct(self, query: str) -> SpellCheckResult:
        """
        Attempt to correct a query.

        Args:
            query: Query text as produced by the previous strategy

        Returns:
            SpellCheckResult
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, priority={self.priority})"
