"""
Per-run configuration of synonym mining.
"""
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, Optional

from config import (
    MINING_MIN_SIMILARITY, MINING_MIN_CO_OCCURRENCES, MINING_MIN_WORD_FREQUENCY,
    MINING_MAX_SYNONYMS_PER_WORD, MINING_EXCLUDE_PROPER_NOUNS, MINING_EXCLUDE_COMPOUND_TERMS,
    MINING_MIN_COMPOUND_OCCURRENCES, MINING_MORPHOLOGICAL_THRESHOLD
)
from newsearch.text.preprocessor import normalize


def _normalized_set(words: Optional[Iterable[str]]) -> FrozenSet[str]:
    if not words:
        return frozenset()
    return frozenset(w for w in (normalize(word) for word in words) if w)


@dataclass(frozen=True)
class MiningOptions:
    """
    Thresholds and filters for one mining run. Immutable; use
    with_overrides() to derive a variant.
    """
    # Co-occurrence
    min_similarity_threshold: float = 0.25
    min_co_occurrences: int = 1
    max_synonyms_per_word: int = 15
    use_titles: bool = True
    use_content: bool = True

    # Word filters
    min_word_length: int = 3
    max_word_length: int = 30
    min_word_frequency: int = 2
    max_word_frequency: Optional[int] = None
    excluded_words: FrozenSet[str] = field(default_factory=frozenset)
    forbidden_words: FrozenSet[str] = field(default_factory=frozenset)

    # Proper nouns
    exclude_proper_nouns: bool = True
    min_proper_noun_occurrences: int = 2
    proper_noun_capitalization_threshold: float = 0.8

    # Collocations
    exclude_compound_terms: bool = True
    min_compound_occurrences: int = 3

    # Morphology
    morphological_similarity_threshold: float = 0.78

    def __post_init__(self):
        # Accept any iterable for the word lists, store them normalized
        object.__setattr__(self, "excluded_words", _normalized_set(self.excluded_words))
        object.__setattr__(self, "forbidden_words", _normalized_set(self.forbidden_words))
        if not 0.0 <= self.min_similarity_threshold <= 1.0:
            raise ValueError(f"min_similarity_threshold must be in [0, 1], got {self.min_similarity_threshold}")
        if self.min_word_length > self.max_word_length:
            raise ValueError("min_word_length must not exceed max_word_length")

    @classmethod
    def create_default(cls) -> "MiningOptions":
        return cls()

    @classmethod
    def from_config(cls) -> "MiningOptions":
        """Defaults taken from config.py / environment."""
        return cls(
            min_similarity_threshold=MINING_MIN_SIMILARITY,
            min_co_occurrences=MINING_MIN_CO_OCCURRENCES,
            min_word_frequency=MINING_MIN_WORD_FREQUENCY,
            max_synonyms_per_word=MINING_MAX_SYNONYMS_PER_WORD,
            exclude_proper_nouns=MINING_EXCLUDE_PROPER_NOUNS,
            exclude_compound_terms=MINING_EXCLUDE_COMPOUND_TERMS,
            min_compound_occurrences=MINING_MIN_COMPOUND_OCCURRENCES,
            morphological_similarity_threshold=MINING_MORPHOLOGICAL_THRESHOLD,
        )

    def with_overrides(self, **changes) -> "MiningOptions":
        return replace(self, **changes)

    def is_excluded(self, word: str) -> bool:
        return word in self.excluded_words or word in self.forbidden_words

    def within_length(self, word: str) -> bool:
        return self.min_word_length <= len(word) <= self.max_word_length
