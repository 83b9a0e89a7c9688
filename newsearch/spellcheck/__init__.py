"""
Query correction strategies and the composite chain that runs them.
"""
from newsearch.spellcheck.base import SpellChecker
from newsearch.spellcheck.keyboard_layout import KeyboardLayoutSpellChecker
from newsearch.spellcheck.dictionary import DictionarySpellChecker
from newsearch.spellcheck.phonetic import PhoneticSpellChecker, russian_soundex
from newsearch.spellcheck.search_analytics import (
    SearchQueryStats, SearchAnalyticsStore, SearchAnalyticsSpellChecker
)
from newsearch.spellcheck.ollama_checker import OllamaSpellChecker
from newsearch.spellcheck.composite import CompositeSpellChecker, build_spell_checker

__all__ = [
    "SpellChecker", "KeyboardLayoutSpellChecker", "DictionarySpellChecker",
    "PhoneticSpellChecker", "russian_soundex",
    "SearchQueryStats", "SearchAnalyticsStore", "SearchAnalyticsSpellChecker",
    "OllamaSpellChecker", "CompositeSpellChecker", "build_spell_checker",
]
