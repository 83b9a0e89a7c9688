"""
Learning from search outcomes.

SearchAnalyticsStore keeps per-query statistics and the learned map
failed query -> query it was successfully corrected into. It is shared
between the search pipeline (which reports outcomes) and
SearchAnalyticsSpellChecker (which reads learned corrections), so every
access goes through its lock.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set
import json
import threading

from rapidfuzz.distance import Levenshtein

from config import (
    ANALYTICS_FILE, ANALYTICS_FLUSH_EVERY, ANALYTICS_MIN_SUCCESS_RATE,
    ANALYTICS_MIN_SEARCH_COUNT, ANALYTICS_MAX_EDIT_DISTANCE
)
from newsearch.models.spell_check import SpellCheckResult
from newsearch.spellcheck.base import SpellChecker
from newsearch.text.preprocessor import normalize
from logger_config import get_logger

logger = get_logger("spellcheck")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: Any) -> datetime:
    if value:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
        except ValueError:
            pass
    return _utcnow()


@dataclass
class SearchQueryStats:
    """Running statistics of one normalized query."""
    query: str
    search_count: int = 0
    successful_searches: int = 0
    total_results: int = 0
    first_seen: datetime = field(default_factory=_utcnow)
    last_seen: datetime = field(default_factory=_utcnow)
    corrected_from: Set[str] = field(default_factory=set)

    @property
    def success_rate(self) -> float:
        return self.successful_searches / self.search_count if self.search_count else 0.0

    @property
    def avg_results(self) -> float:
        return self.total_results / self.search_count if self.search_count else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "searchCount": self.search_count,
            "successfulSearches": self.successful_searches,
            "totalResults": self.total_results,
            "firstSeen": self.first_seen.isoformat(),
            "lastSeen": self.last_seen.isoformat(),
            "correctedFrom": sorted(self.corrected_from),
        }

    @classmethod
    def from_dict(cls, key: str, data: Dict[str, Any]) -> "SearchQueryStats":
        corrected = data.get("correctedFrom") or []
        return cls(
            query=normalize(data.get("query") or key),
            search_count=int(data.get("searchCount", 0) or 0),
            successful_searches=int(data.get("successfulSearches", 0) or 0),
            total_results=int(data.get("totalResults", 0) or 0),
            first_seen=_parse_datetime(data.get("firstSeen")),
            last_seen=_parse_datetime(data.get("lastSeen")),
            corrected_from={normalize(q) for q in corrected if normalize(q)},
        )


class SearchAnalyticsStore:
    """Lock-guarded query statistics with periodic background persistence."""

    def __init__(self, path: str = ANALYTICS_FILE, flush_every: int = ANALYTICS_FLUSH_EVERY,
                 min_success_rate: float = ANALYTICS_MIN_SUCCESS_RATE,
                 min_search_count: int = ANALYTICS_MIN_SEARCH_COUNT,
                 max_edit_distance: int = ANALYTICS_MAX_EDIT_DISTANCE):
        self.path = Path(path)
        self.flush_every = flush_every
        self.min_success_rate = min_success_rate
        self.min_search_count = min_search_count
        self.max_edit_distance = max_edit_distance
        self._lock = threading.RLock()
        self._write_lock = threading.Lock()
        self._stats: Dict[str, SearchQueryStats] = {}
        self._learned: Dict[str, str] = {}
        self._listeners: List[Callable[[str, str], None]] = []
        self._records_since_flush = 0

    def load(self):
        """
        Load statistics from disk, replacing the in-memory state.

        Learned corrections are rebuilt from every query whose success rate
        reaches min_success_rate. A missing or malformed file gives an
        empty store.
        """
        stats: Dict[str, SearchQueryStats] = {}
        if self.path.exists():
            try:
                raw = json.loads(self.path.read_text(encoding="utf-8"))
                if not isinstance(raw, dict):
                    raise ValueError("top-level JSON value is not an object")
                for key, value in raw.items():
                    if isinstance(value, dict):
                        entry = SearchQueryStats.from_dict(key, value)
                        if entry.query:
                            stats[entry.query] = entry
            except (OSError, ValueError) as e:
                logger.warning(f"Could not load search analytics from {self.path}: {e}")
                stats = {}
        else:
            logger.info(f"Search analytics file not found: {self.path}, starting empty")

        learned: Dict[str, str] = {}
        for entry in stats.values():
            if entry.success_rate >= self.min_success_rate:
                for original in entry.corrected_from:
                    if original != entry.query:
                        learned[original] = entry.query

        with self._lock:
            self._stats = stats
            self._learned = learned
            self._records_since_flush = 0

        logger.info(f"Loaded analytics for {len(stats)} queries, {len(learned)} learned corrections")

    def record_search(self, final_query: str, result_count: int, was_successful: bool,
                      corrected_from: Optional[str] = None):
        """
        Record the outcome of one executed search.

        Args:
            final_query: Query that was actually searched (after correction)
            result_count: Number of results returned
            was_successful: Whether the search is considered successful
            corrected_from: Query as it was before correction, if it changed
        """
        query = normalize(final_query)
        if not query:
            return
        original = normalize(corrected_from)
        learned_now = False
        flush_now = False

        with self._lock:
            entry = self._stats.get(query)
            if entry is None:
                entry = SearchQueryStats(query=query)
                self._stats[query] = entry

            entry.search_count += 1
            entry.last_seen = _utcnow()
            entry.total_results += max(0, result_count)
            if was_successful:
                entry.successful_searches += 1

            if original and original != query:
                entry.corrected_from.add(original)
                if was_successful and result_count > 0:
                    learned_now = self._learned.get(original) != query
                    self._learned[original] = query

            self._records_since_flush += 1
            if self.flush_every > 0 and self._records_since_flush >= self.flush_every:
                self._records_since_flush = 0
                flush_now = True

        if learned_now:
            logger.info(f"Learned correction '{original}' -> '{query}'")
            self._notify_learned(original, query)
        if learned_now or flush_now:
            self.save_in_background()

    def add_learning_listener(self, callback: Callable[[str, str], None]):
        """
        Register a callback invoked as callback(original, corrected) whenever
        a new correction is learned. Callbacks run outside the store lock.
        """
        with self._lock:
            if callback not in self._listeners:
                self._listeners.append(callback)

    def _notify_learned(self, original: str, corrected: str):
        with self._lock:
            listeners = list(self._listeners)
        for callback in listeners:
            try:
                callback(original, corrected)
            except Exception as e:
                logger.warning(f"Learning listener failed for '{original}': {e}")

    def get_learned_correction(self, query: str) -> Optional[str]:
        with self._lock:
            return self._learned.get(normalize(query))

    def learned_corrections(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._learned)

    def get_query_stats(self, query: str) -> Optional[SearchQueryStats]:
        with self._lock:
            return self._stats.get(normalize(query))

    def find_similar_successful_query(self, query: str) -> Optional[str]:
        """
        Closest historical query that tends to succeed.

        Candidates need success rate >= min_success_rate, at least
        min_search_count searches and an edit distance between 1 and
        max_edit_distance.
        """
        query = normalize(query)
        if not query:
            return None

        best: Optional[SearchQueryStats] = None
        best_distance = self.max_edit_distance + 1
        with self._lock:
            for entry in self._stats.values():
                if entry.success_rate < self.min_success_rate or entry.search_count < self.min_search_count:
                    continue
                distance = Levenshtein.distance(query, entry.query, score_cutoff=self.max_edit_distance)
                if distance == 0 or distance > self.max_edit_distance:
                    continue
                if (distance < best_distance or
                        (distance == best_distance and best is not None and entry.search_count > best.search_count)):
                    best = entry
                    best_distance = distance
        return best.query if best else None

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            total_searches = sum(s.search_count for s in self._stats.values())
            successful = sum(s.successful_searches for s in self._stats.values())
            return {
                "unique_queries": len(self._stats),
                "total_searches": total_searches,
                "successful_queries": sum(1 for s in self._stats.values() if s.success_rate > 0.5),
                "learned_corrections": len(self._learned),
                "success_rate": successful / total_searches if total_searches else 0.0,
            }

    def _snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {key: entry.to_dict() for key, entry in self._stats.items()}

    def save(self) -> bool:
        """
        Write the statistics to disk synchronously.

        The snapshot is taken while holding the write lock, so concurrent
        saves land on disk in the order their snapshots were taken.
        """
        try:
            with self._write_lock:
                snapshot = self._snapshot()
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text(json.dumps(snapshot, ensure_ascii=False, indent=2), encoding="utf-8")
            logger.debug(f"Saved analytics for {len(snapshot)} queries to {self.path}")
            return True
        except OSError as e:
            logger.warning(f"Error saving search analytics to {self.path}: {e}")
            return False

    def save_in_background(self) -> threading.Thread:
        """Fire-and-forget save in a daemon thread."""
        thread = threading.Thread(target=self.save, daemon=True)
        thread.start()
        return thread


class SearchAnalyticsSpellChecker(SpellChecker):
    """
    Correct queries with what past searches have taught.

    A learned replacement is applied directly. Otherwise, when a search
    service is available and the query currently finds nothing, a similar
    historically successful query is suggested.
    """

    name = "SearchAnalytics"
    priority = 4
    learned_confidence = 0.95
    suggestion_confidence = 0.7

    def __init__(self, store: SearchAnalyticsStore, search_service=None):
        self.store = store
        self.search_service = search_service

    def try_correct(self, query: str) -> SpellCheckResult:
        normalized = normalize(query)
        if not normalized:
            return SpellCheckResult.no_change(query, self.name)

        learned = self.store.get_learned_correction(normalized)
        if learned:
            return SpellCheckResult.correction(query, learned, self.name, self.learned_confidence)

        if self.search_service is None:
            return SpellCheckResult.no_change(query, self.name)

        try:
            total = self.search_service.search(query, limit=1).get("total", 0)
        except Exception as e:
            logger.warning(f"Search service failed while checking '{query}': {e}")
            return SpellCheckResult.error(query, self.name, str(e))

        if total == 0:
            suggestion = self.store.find_similar_successful_query(normalized)
            if suggestion:
                return SpellCheckResult.correction(query, suggestion, self.name, self.suggestion_confidence)

        return SpellCheckResult.no_change(query, self.name)
