"""
Built-in stop-word list used to filter tokens and search queries.
"""
from typing import Iterable, Optional, Set

from newsearch.text.preprocessor import normalize


class StopWordsProvider:
    """Holds the set of words ignored by tokenization and query preparation."""

    DEFAULT_STOP_WORDS = (
        "и", "в", "во", "на", "к", "ко", "с", "из", "у", "за",
        "не", "что", "как", "но", "а", "же", "ли", "это", "тот", "эта",
        "я", "мы", "вы", "он", "она", "оно", "они", "его", "ее", "их",
        "для", "по", "при", "о", "об", "от", "до", "бы", "или",
        "так", "также", "уже", "еще", "там", "тут", "зато", "чтобы",
        "если", "куда", "когда", "тогда",
    )

    def __init__(self, words: Optional[Iterable[str]] = None):
        self._stop_words: Set[str] = set()
        self.add(self.DEFAULT_STOP_WORDS if words is None else words)

    @classmethod
    def create_default(cls) -> "StopWordsProvider":
        """Create a provider with the built-in list."""
        return cls()

    def add(self, words: Iterable[str]):
        """Extend the list with additional words."""
        for word in words:
            normalized = normalize(word)
            if normalized:
                self._stop_words.add(normalized)

    @property
    def count(self) -> int:
        return len(self._stop_words)

    def is_stop_word(self, token: Optional[str]) -> bool:
        """Blank tokens count as stop words."""
        normalized = normalize(token)
        return not normalized or normalized in self._stop_words

    def __contains__(self, token: str) -> bool:
        return self.is_stop_word(token)
