"""
Tokenization for synonym mining and query expansion.

Tokens are contiguous alphabetic runs, normalized (lowercase, trimmed),
filtered by length and by the stop-word list. Every function here is pure.
"""
from typing import Dict, Iterable, Iterator, List, Optional, Set
import re

from newsearch.text.preprocessor import normalize
from newsearch.text.stop_words import StopWordsProvider

# Letters only: no digits, no underscore
WORD_PATTERN = re.compile(r"[^\W\d_]+")

DEFAULT_MIN_LENGTH = 3
DEFAULT_MAX_LENGTH = 50

_default_stop_words: Optional[StopWordsProvider] = None


def _stop_words_or_default(stop_words: Optional[StopWordsProvider]) -> StopWordsProvider:
    global _default_stop_words
    if stop_words is not None:
        return stop_words
    if _default_stop_words is None:
        _default_stop_words = StopWordsProvider.create_default()
    return _default_stop_words


def iter_word_matches(text: Optional[str]) -> Iterator[str]:
    """Yield raw alphabetic runs in their original casing."""
    if not text:
        return
    for match in WORD_PATTERN.finditer(text):
        yield match.group(0)


def tokenize(text: Optional[str],
             stop_words: Optional[StopWordsProvider] = None,
             min_length: int = DEFAULT_MIN_LENGTH,
             max_length: int = DEFAULT_MAX_LENGTH) -> Set[str]:
    """
    Extract the set of unique normalized tokens from text.

    Args:
        text: Input text (None and blank give an empty set)
        stop_words: Stop words to drop (built-in list by default)
        min_length: Minimum token length
        max_length: Maximum token length

    Returns:
        Set of tokens
    """
    if not text or not text.strip():
        return set()

    stop_words = _stop_words_or_default(stop_words)
    tokens: Set[str] = set()

    for raw in iter_word_matches(text):
        word = normalize(raw)
        if not word:
            continue
        if len(word) < min_length or len(word) > max_length:
            continue
        if stop_words.is_stop_word(word):
            continue
        tokens.add(word)

    return tokens


def tokenize_article(article,
                     stop_words: Optional[StopWordsProvider] = None,
                     include_titles: bool = True,
                     include_content: bool = True,
                     min_length: int = DEFAULT_MIN_LENGTH,
                     max_length: int = DEFAULT_MAX_LENGTH) -> Set[str]:
    """Union of title and body tokens of one article."""
    tokens: Set[str] = set()
    if include_titles:
        tokens |= tokenize(article.title, stop_words, min_length, max_length)
    if include_content:
        tokens |= tokenize(article.content, stop_words, min_length, max_length)
    return tokens


def word_frequencies(articles: Iterable,
                     stop_words: Optional[StopWordsProvider] = None,
                     include_titles: bool = True,
                     include_content: bool = True) -> Dict[str, int]:
    """
    Document frequency of every token: each word counts once per article.

    Args:
        articles: Article records with title/content
        stop_words: Stop words to drop
        include_titles: Tokenize titles
        include_content: Tokenize bodies

    Returns:
        Mapping word -> number of articles containing it
    """
    frequencies: Dict[str, int] = {}
    for article in articles:
        for word in tokenize_article(article, stop_words, include_titles, include_content):
            frequencies[word] = frequencies.get(word, 0) + 1
    return frequencies


def filter_by_frequency(frequencies: Dict[str, int],
                        min_frequency: int = 2,
                        max_frequency: Optional[int] = None) -> Set[str]:
    """Words whose frequency falls inside [min_frequency, max_frequency]."""
    return {
        word for word, frequency in frequencies.items()
        if frequency >= min_frequency and (max_frequency is None or frequency <= max_frequency)
    }


def split_query(query: Optional[str]) -> List[str]:
    """Normalized whitespace tokens of a query, in order, without duplicates."""
    seen: Set[str] = set()
    tokens: List[str] = []
    for part in normalize(query).split():
        if part not in seen:
            seen.add(part)
            tokens.append(part)
    return tokens
