"""
Composite query corrector: runs correction strategies as an ordered chain.
"""
from typing import Any, Dict, List, Optional, Type, Union
import threading
import time

from cachetools import TTLCache

from config import (
    SPELLCHECK_CACHE_SIZE, SPELLCHECK_CACHE_TTL, OLLAMA_ENABLED, SPELLCHECK_DICTIONARY_ENABLED,
    SPELLCHECK_PHONETIC_ENABLED
)
from newsearch.models.spell_check import CorrectionStep, DetailedSpellCheckResult, SpellCheckResult
from newsearch.spellcheck.base import SpellChecker
from newsearch.spellcheck.dictionary import DictionarySpellChecker
from newsearch.spellcheck.keyboard_layout import KeyboardLayoutSpellChecker
from newsearch.spellcheck.ollama_checker import OllamaSpellChecker
from newsearch.spellcheck.phonetic import PhoneticSpellChecker
from newsearch.spellcheck.search_analytics import SearchAnalyticsSpellChecker, SearchAnalyticsStore
from newsearch.text.preprocessor import normalize
from logger_config import get_logger

logger = get_logger("spellcheck")


class CompositeSpellChecker:
    """
    Run every registered strategy in ascending priority order.

    Each strategy receives the output of the previous one. A strategy that
    raises or reports an error is skipped and the chain continues with the
    last good text. Aggregates are cached by normalized query for
    cache_ttl seconds; a cache hit invokes no strategy. An entry is dropped
    as soon as the analytics store learns a correction for its query.
    """

    def __init__(self, checkers: Optional[List[SpellChecker]] = None,
                 max_cache_size: int = SPELLCHECK_CACHE_SIZE,
                 cache_ttl: float = SPELLCHECK_CACHE_TTL):
        self.max_cache_size = max_cache_size
        self.cache_ttl = cache_ttl
        self._cache = TTLCache(maxsize=max_cache_size, ttl=cache_ttl)
        self._cache_lock = threading.Lock()
        # Replaced, never mutated in place: try_correct iterates a stable list
        self._checkers: List[SpellChecker] = sorted(checkers or [], key=lambda c: c.priority)
        self._checkers_lock = threading.Lock()
        for checker in self._checkers:
            self._subscribe(checker)

    @property
    def checkers(self) -> List[SpellChecker]:
        return list(self._checkers)

    def _subscribe(self, checker: SpellChecker):
        if isinstance(checker, SearchAnalyticsSpellChecker):
            checker.store.add_learning_listener(self._on_correction_learned)

    def _on_correction_learned(self, original_query: str, corrected_query: str):
        if self.invalidate(original_query):
            logger.debug(f"Dropped cached correction of '{original_query}', learned '{corrected_query}'")

    def add_checker(self, checker: SpellChecker):
        with self._checkers_lock:
            self._checkers = sorted(self._checkers + [checker], key=lambda c: c.priority)
        self._subscribe(checker)
        self.clear_cache()

    def remove_checker(self, checker: Union[SpellChecker, str]) -> bool:
        """Remove a checker by instance or by name."""
        with self._checkers_lock:
            for existing in self._checkers:
                if existing is checker or existing.name == checker:
                    self._checkers = [c for c in self._checkers if c is not existing]
                    break
            else:
                return False
        self.clear_cache()
        return True

    def get_checker(self, checker_type: Type[SpellChecker]) -> Optional[SpellChecker]:
        for checker in self._checkers:
            if isinstance(checker, checker_type):
                return checker
        return None

    def try_correct(self, query: str) -> DetailedSpellCheckResult:
        """
        Correct a query through the whole chain.

        Args:
            query: Query as typed

        Returns:
            DetailedSpellCheckResult with one step per applied correction
        """
        started = time.perf_counter()
        key = normalize(query)

        with self._cache_lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached.copy(
                original_query=query,
                from_cache=True,
                elapsed_ms=(time.perf_counter() - started) * 1000,
            )

        current = query
        steps: List[CorrectionStep] = []

        checkers = self._checkers
        for checker in checkers:
            try:
                result = checker.try_correct(current)
            except Exception as e:
                logger.warning(f"Spell checker {checker.name} failed on '{current}': {e}")
                continue

            if not result.success:
                logger.warning(f"Spell checker {checker.name} returned an error: {result.message}")
                continue

            if result.has_correction:
                steps.append(CorrectionStep(
                    method=checker.name,
                    before=current,
                    after=result.corrected_query,
                    confidence=result.confidence,
                    reason=result.message or f"Corrected by {checker.name}",
                ))
                logger.debug(f"{checker.name}: '{current}' -> '{result.corrected_query}'")
                current = result.corrected_query

        aggregate = DetailedSpellCheckResult(
            original_query=query,
            corrected_query=current,
            steps=steps,
            elapsed_ms=(time.perf_counter() - started) * 1000,
        )

        if key and self.max_cache_size > 0:
            with self._cache_lock:
                self._cache[key] = aggregate

        if aggregate.has_correction:
            logger.info(f"Corrected query '{query}' -> '{current}' (confidence {aggregate.confidence:.2f})")
        return aggregate

    def try_correct_simple(self, query: str) -> SpellCheckResult:
        detailed = self.try_correct(query)
        if detailed.has_correction:
            return SpellCheckResult.correction(query, detailed.corrected_query, "Composite", detailed.confidence)
        return SpellCheckResult.no_change(query, "Composite")

    def get_stats(self) -> Dict[str, Any]:
        with self._cache_lock:
            cache_size = len(self._cache)
        return {
            "cache_size": cache_size,
            "max_cache_size": self.max_cache_size,
            "cache_ttl": self.cache_ttl,
            "checkers_count": len(self._checkers),
            "checker_names": [c.name for c in self._checkers],
        }

    def invalidate(self, query: str) -> bool:
        """Drop the cached correction of one query. Returns True if an entry was removed."""
        with self._cache_lock:
            return self._cache.pop(normalize(query), None) is not None

    def clear_cache(self):
        with self._cache_lock:
            self._cache.clear()


def build_spell_checker(search_service=None,
                        analytics_store: Optional[SearchAnalyticsStore] = None,
                        enable_llm: bool = OLLAMA_ENABLED,
                        enable_dictionary: bool = SPELLCHECK_DICTIONARY_ENABLED,
                        enable_phonetic: bool = SPELLCHECK_PHONETIC_ENABLED,
                        max_cache_size: int = SPELLCHECK_CACHE_SIZE,
                        cache_ttl: float = SPELLCHECK_CACHE_TTL) -> CompositeSpellChecker:
    """
    Assemble the default correction chain.

    Args:
        search_service: Search engine used by the analytics strategy
        analytics_store: Shared analytics store (analytics strategy skipped if None)
        enable_llm: Check Ollama once and register it if reachable
        enable_dictionary: Register the dictionary strategy
        enable_phonetic: Register the sound-alike strategy
        max_cache_size: Capacity of the correction cache
        cache_ttl: Seconds a cached correction stays valid

    Returns:
        CompositeSpellChecker
    """
    checkers: List[SpellChecker] = [KeyboardLayoutSpellChecker()]

    if enable_dictionary:
        checkers.append(DictionarySpellChecker())

    if enable_phonetic:
        checkers.append(PhoneticSpellChecker())

    if analytics_store is not None:
        checkers.append(SearchAnalyticsSpellChecker(analytics_store, search_service))

    if enable_llm:
        ollama = OllamaSpellChecker.try_create()
        if ollama is not None:
            checkers.append(ollama)

    composite = CompositeSpellChecker(checkers, max_cache_size=max_cache_size, cache_ttl=cache_ttl)
    logger.info(f"Spell checking chain: {', '.join(c.name for c in composite.checkers)}")
    return composite
