"""
Validation of co-occurrence candidates.

Co-occurrence alone produces many false positives: names of people and
places, halves of fixed phrases ("холодная война") and inflections of one
lemma. Each filter below rejects one of those families; a pair survives only
if it passes all of them.
"""
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Sequence, Set, Tuple
import re

from rapidfuzz.distance import Levenshtein

from newsearch.synonyms.options import MiningOptions
from newsearch.text.preprocessor import normalize
from newsearch.text.stop_words import StopWordsProvider
from newsearch.text.tokenizer import iter_word_matches, tokenize_article, word_frequencies
from logger_config import logger

# Punctuation breaks adjacency: "война, холодная" is not a bigram
SEGMENT_SPLIT = re.compile(r"[^\w\s]+")

REJECT_WORD_FILTERED = "word_filtered"
REJECT_IDENTICAL = "identical"
REJECT_COLLOCATION = "collocation"
REJECT_MORPHOLOGICAL = "morphological"

MIN_SUFFIX_LENGTH = 4
MAX_PREFIX_LENGTH = 4


@dataclass
class ValidationReport:
    """Counts of one validation pass."""
    pairs_considered: int = 0
    pairs_accepted: int = 0
    anchors_considered: int = 0
    anchors_accepted: int = 0
    rejections: Counter = field(default_factory=Counter)

    def reject(self, reason: str, count: int = 1):
        self.rejections[reason] += count

    def to_dict(self) -> Dict[str, object]:
        return {
            "pairs_considered": self.pairs_considered,
            "pairs_accepted": self.pairs_accepted,
            "anchors_considered": self.anchors_considered,
            "anchors_accepted": self.anchors_accepted,
            "rejections": dict(self.rejections),
        }


@dataclass
class _CaseStats:
    capitalized: int = 0
    lowercase: int = 0

    @property
    def total(self) -> int:
        return self.capitalized + self.lowercase

    @property
    def capitalized_ratio(self) -> float:
        return self.capitalized / self.total if self.total else 0.0


def common_prefix_length(word1: str, word2: str) -> int:
    count = 0
    for a, b in zip(word1, word2):
        if a != b:
            break
        count += 1
    return count


def common_suffix_length(word1: str, word2: str) -> int:
    return common_prefix_length(word1[::-1], word2[::-1])


def are_morphological_variants(word1: str, word2: str, threshold: float = 0.78) -> bool:
    """
    Whether two words look like inflections of the same lemma.

    True if ANY of these holds:
      - common prefix length >= min(4, shorter length - 1)
      - common suffix length >= 4
      - 1 - levenshtein / max length >= threshold

    Args:
        word1: First word
        word2: Second word
        threshold: Normalized Levenshtein similarity threshold

    Returns:
        True if the words are treated as variants of one word
    """
    word1 = normalize(word1)
    word2 = normalize(word2)
    if word1 == word2:
        return True
    if len(word1) < 3 or len(word2) < 3:
        return False

    shorter = min(len(word1), len(word2))
    if common_prefix_length(word1, word2) >= min(MAX_PREFIX_LENGTH, shorter - 1):
        return True

    if common_suffix_length(word1, word2) >= MIN_SUFFIX_LENGTH:
        return True

    longer = max(len(word1), len(word2))
    similarity = 1.0 - Levenshtein.distance(word1, word2) / longer
    return similarity >= threshold


def _text_segments(text: Optional[str]) -> Iterable[str]:
    if not text:
        return []
    return SEGMENT_SPLIT.split(text.lower())


def count_bigrams(articles: Sequence) -> Counter:
    """
    Count adjacent word pairs over titles and bodies.

    Words are whitespace-separated inside punctuation-free segments, so a
    comma or period between two words breaks the pair.
    """
    bigrams = Counter()
    for article in articles:
        for text in (article.title, article.content):
            for segment in _text_segments(text):
                words = segment.split()
                for first, second in zip(words, words[1:]):
                    bigrams[(first, second)] += 1
    return bigrams


class SynonymValidator:
    """Filter candidate synonym groups down to validated groups."""

    def __init__(self, stop_words: Optional[StopWordsProvider] = None):
        self.stop_words = stop_words or StopWordsProvider.create_default()

    def validate(self, candidates: Dict[str, Set[str]], articles: Sequence,
                 options: Optional[MiningOptions] = None) -> Tuple[Dict[str, Set[str]], ValidationReport]:
        """
        Apply word-level and pair-level filters to candidate groups.

        Args:
            candidates: Anchor -> candidate synonyms
            articles: Corpus the candidates were mined from
            options: Mining options (defaults if None)

        Returns:
            Tuple of (validated groups, report). Validated groups are a
            subset of the candidates and never map a word to itself.
        """
        options = options or MiningOptions.create_default()
        report = ValidationReport()

        frequencies = word_frequencies(
            articles,
            stop_words=self.stop_words,
            include_titles=options.use_titles,
            include_content=options.use_content,
        )
        case_stats = self._build_case_stats(articles) if options.exclude_proper_nouns else {}
        bigrams = count_bigrams(articles) if options.exclude_compound_terms else Counter()

        skipped: Dict[str, bool] = {}

        def should_skip(word: str) -> bool:
            if word not in skipped:
                skipped[word] = self._should_skip_word(word, frequencies, case_stats, options)
            return skipped[word]

        validated: Dict[str, Set[str]] = {}

        for raw_anchor, synonyms in candidates.items():
            anchor = normalize(raw_anchor)
            report.anchors_considered += 1
            report.pairs_considered += len(synonyms)

            if should_skip(anchor):
                report.reject(REJECT_WORD_FILTERED, len(synonyms))
                continue

            accepted: Set[str] = set()
            for raw_synonym in synonyms:
                synonym = normalize(raw_synonym)

                if should_skip(synonym):
                    report.reject(REJECT_WORD_FILTERED)
                    continue

                if synonym == anchor:
                    report.reject(REJECT_IDENTICAL)
                    continue

                if options.exclude_compound_terms and self._is_collocation(anchor, synonym, bigrams, options):
                    report.reject(REJECT_COLLOCATION)
                    continue

                if are_morphological_variants(anchor, synonym, options.morphological_similarity_threshold):
                    report.reject(REJECT_MORPHOLOGICAL)
                    continue

                accepted.add(synonym)

            if accepted:
                validated[anchor] = accepted
                report.anchors_accepted += 1
                report.pairs_accepted += len(accepted)

        logger.info(
            f"Validation done: {report.pairs_accepted}/{report.pairs_considered} pairs accepted, "
            f"rejections: {dict(report.rejections)}"
        )
        return validated, report

    def calculate_context_similarity(self, word1: str, word2: str, articles: Sequence) -> float:
        """Jaccard similarity of the article sets of two words, tokenized afresh."""
        word1 = normalize(word1)
        word2 = normalize(word2)
        docs1: Set[int] = set()
        docs2: Set[int] = set()

        for i, article in enumerate(articles):
            tokens = tokenize_article(article, stop_words=self.stop_words)
            if word1 in tokens:
                docs1.add(i)
            if word2 in tokens:
                docs2.add(i)

        if not docs1 or not docs2:
            return 0.0
        return len(docs1 & docs2) / len(docs1 | docs2)

    def _should_skip_word(self, word: str, frequencies: Dict[str, int],
                          case_stats: Dict[str, _CaseStats], options: MiningOptions) -> bool:
        if not word:
            return True
        if options.is_excluded(word):
            return True
        if frequencies.get(word, 0) < options.min_word_frequency:
            return True
        if not options.within_length(word):
            return True
        if options.exclude_proper_nouns and self._is_proper_noun(word, case_stats, options):
            return True
        return False

    @staticmethod
    def _build_case_stats(articles: Sequence) -> Dict[str, _CaseStats]:
        stats: Dict[str, _CaseStats] = {}
        for article in articles:
            for text in (article.title, article.content):
                for original in iter_word_matches(text):
                    if len(original) < 3:
                        continue
                    entry = stats.setdefault(normalize(original), _CaseStats())
                    if original[0].isupper():
                        entry.capitalized += 1
                    else:
                        entry.lowercase += 1
        return stats

    @staticmethod
    def _is_proper_noun(word: str, case_stats: Dict[str, _CaseStats], options: MiningOptions) -> bool:
        stats = case_stats.get(word)
        if stats is None:
            return False
        if stats.capitalized < options.min_proper_noun_occurrences:
            return False
        return stats.capitalized_ratio >= options.proper_noun_capitalization_threshold

    @staticmethod
    def _is_collocation(word1: str, word2: str, bigrams: Counter, options: MiningOptions) -> bool:
        if options.min_compound_occurrences <= 0:
            return False
        occurrences = bigrams.get((word1, word2), 0) + bigrams.get((word2, word1), 0)
        return occurrences >= options.min_compound_occurrences
