"""
Text normalization, stop words and tokenization.
"""
from newsearch.text.preprocessor import normalize, normalize_or_none
from newsearch.text.stop_words import StopWordsProvider
from newsearch.text.tokenizer import (
    tokenize, tokenize_article, word_frequencies, filter_by_frequency, split_query
)

__all__ = [
    "normalize", "normalize_or_none", "StopWordsProvider",
    "tokenize", "tokenize_article", "word_frequencies", "filter_by_frequency", "split_query",
]
