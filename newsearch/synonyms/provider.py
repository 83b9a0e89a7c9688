"""
Synonym dictionary store and confidence-gated query expansion.

Groups are stored keyed by anchor word. A reverse index member -> anchors is
derived on every load so that a lookup of a non-anchor member still reaches
the group it belongs to.
"""
from collections import deque
from pathlib import Path
from typing import Dict, List, Optional, Set
import json

from config import SYNONYM_MIN_CONFIDENCE, SYNONYMS_FILE
from newsearch.models.synonym_data import SynonymData
from newsearch.text.preprocessor import normalize
from newsearch.text.tokenizer import split_query
from logger_config import logger


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


class SynonymProvider:
    """Holds validated synonym groups and expands queries with them."""

    def __init__(self, min_confidence: float = SYNONYM_MIN_CONFIDENCE):
        self._min_confidence = _clamp(min_confidence)
        self._synonyms: Dict[str, Set[str]] = {}
        self._confidence_scores: Dict[str, float] = {}
        self._reverse: Dict[str, Set[str]] = {}
        self._data: Optional[SynonymData] = None

    @property
    def data(self) -> Optional[SynonymData]:
        """The SynonymData last loaded, None after manual edits or clear()."""
        return self._data

    def load_from_file(self, file_path: Optional[str] = None):
        """
        Load groups from a JSON file, replacing the current state.

        A missing, unreadable or malformed file leaves the provider empty
        (logged as a warning); it never raises.

        Args:
            file_path: Path to synonyms JSON (config.SYNONYMS_FILE by default)
        """
        path = Path(file_path or SYNONYMS_FILE)
        if not path.exists():
            logger.warning(f"Synonyms file not found: {path}, starting with an empty dictionary")
            self.clear()
            return

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(raw, dict):
                raise ValueError("top-level JSON value is not an object")
            data = SynonymData.from_dict(raw)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load synonyms from {path}: {e}, starting with an empty dictionary")
            self.clear()
            return

        self.load_from_data(data)
        logger.info(f"Loaded {self.group_count} synonym groups from {path}")

    def save_to_file(self, data: SynonymData, file_path: Optional[str] = None):
        """
        Persist SynonymData as UTF-8 JSON and make it the current state.

        Args:
            data: Mining result to persist
            file_path: Target path (config.SYNONYMS_FILE by default)
        """
        path = Path(file_path or SYNONYMS_FILE)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(data.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error(f"Error saving synonyms to {path}: {e}")
            raise

        logger.info(f"Saved {data.total_groups} synonym groups to {path.resolve()}")
        self.load_from_data(data)

    def load_from_data(self, data: Optional[SynonymData]):
        """Replace the current groups with `data` (never merged)."""
        self.clear()
        if data is None:
            return

        for raw_anchor, raw_members in data.synonyms.items():
            anchor = normalize(raw_anchor)
            if not anchor:
                continue
            members = {normalize(m) for m in raw_members}
            members.discard("")
            members.discard(anchor)
            if members:
                self._synonyms.setdefault(anchor, set()).update(members)

        for raw_word, score in data.confidence_scores.items():
            word = normalize(raw_word)
            if word:
                self._confidence_scores[word] = _clamp(float(score))

        self._rebuild_reverse_index()
        self._data = data

    def _rebuild_reverse_index(self):
        self._reverse = {}
        for anchor, members in self._synonyms.items():
            for member in members:
                self._reverse.setdefault(member, set()).add(anchor)

    def _resolve_threshold(self, override: Optional[float]) -> float:
        return self._min_confidence if override is None else _clamp(override)

    def _passes(self, anchor: str, threshold: float) -> bool:
        # Manually added groups carry no score and are always trusted
        score = self._confidence_scores.get(anchor)
        return score is None or score >= threshold

    def get_synonyms(self, word: Optional[str], min_confidence: Optional[float] = None) -> Set[str]:
        """
        Synonyms of a word, looked up in both directions.

        Args:
            word: Word to look up
            min_confidence: Threshold override (provider default if None)

        Returns:
            Union of the word's own group and of every group it is a member
            of, each gated on its anchor's confidence. Never contains `word`.
        """
        normalized = normalize(word)
        if not normalized:
            return set()

        threshold = self._resolve_threshold(min_confidence)
        result: Set[str] = set()

        if normalized in self._synonyms and self._passes(normalized, threshold):
            result |= self._synonyms[normalized]

        for anchor in self._reverse.get(normalized, ()):
            if self._passes(anchor, threshold):
                result.add(anchor)
                result |= self._synonyms[anchor]

        result.discard(normalized)
        return result

    def has_synonyms(self, word: Optional[str], min_confidence: Optional[float] = None) -> bool:
        return bool(self.get_synonyms(word, min_confidence))

    def expand_query(self, query: Optional[str], confidence_threshold: Optional[float] = None) -> str:
        """
        Append synonyms of every query token to the query.

        Original tokens come first in their original order; synonyms follow.
        Duplicates are dropped.

        Args:
            query: Corrected query
            confidence_threshold: Threshold override (provider default if None)

        Returns:
            Expanded query, "" for a blank query
        """
        tokens = split_query(query)
        if not tokens:
            return ""

        terms: List[str] = list(tokens)
        seen: Set[str] = set(tokens)

        for token in tokens:
            for synonym in sorted(self.get_synonyms(token, confidence_threshold)):
                if synonym not in seen:
                    seen.add(synonym)
                    terms.append(synonym)

        if len(terms) > len(tokens):
            logger.debug(f"Expanded query '{query}' with {len(terms) - len(tokens)} synonyms")
        return " ".join(terms)

    def get_synonym_groups(self, min_confidence: Optional[float] = None) -> List[Set[str]]:
        """
        Merge overlapping groups into disjoint synonym sets.

        Two words end up in the same set when a chain of groups whose
        anchors pass the confidence threshold connects them. Words only
        reachable through failing anchors are left out.

        Args:
            min_confidence: Threshold override (provider default if None)

        Returns:
            Sets of at least two words, ordered by their smallest word
        """
        threshold = self._resolve_threshold(min_confidence)
        adjacency: Dict[str, Set[str]] = {}
        for anchor, members in self._synonyms.items():
            if not self._passes(anchor, threshold):
                continue
            for member in members:
                adjacency.setdefault(anchor, set()).add(member)
                adjacency.setdefault(member, set()).add(anchor)

        groups: List[Set[str]] = []
        visited: Set[str] = set()
        for word in sorted(adjacency):
            if word in visited:
                continue
            group: Set[str] = set()
            queue = deque([word])
            visited.add(word)
            while queue:
                current = queue.popleft()
                group.add(current)
                for neighbor in adjacency[current]:
                    if neighbor not in visited:
                        visited.add(neighbor)
                        queue.append(neighbor)
            if len(group) > 1:
                groups.append(group)
        return groups

    def build_elastic_synonym_rules(self, min_confidence: Optional[float] = None) -> List[str]:
        """
        Synonym groups in Elasticsearch synonym-filter format.

        Each rule is the sorted, comma separated word list of one group,
        e.g. "авто, автомобиль, машина". Identical groups give one rule.
        """
        rules: List[str] = []
        seen: Set[str] = set()
        for group in self.get_synonym_groups(min_confidence):
            rule = ", ".join(sorted(group))
            if rule not in seen:
                seen.add(rule)
                rules.append(rule)
        return rules

    def add_synonym_group(self, *words: str):
        """Add a manual group: every word becomes a synonym of every other."""
        normalized = []
        for word in words:
            value = normalize(word)
            if value and value not in normalized:
                normalized.append(value)
        if len(normalized) < 2:
            return

        for word in normalized:
            self._synonyms.setdefault(word, set()).update(w for w in normalized if w != word)
        self._rebuild_reverse_index()
        self._data = None

    @property
    def group_count(self) -> int:
        return len(self._synonyms)

    def get_all_synonyms(self) -> Dict[str, Set[str]]:
        return {anchor: set(members) for anchor, members in self._synonyms.items()}

    def get_confidence(self, word: str) -> Optional[float]:
        return self._confidence_scores.get(normalize(word))

    def set_min_confidence(self, value: float):
        self._min_confidence = _clamp(value)

    def get_min_confidence(self) -> float:
        return self._min_confidence

    def clear(self):
        self._synonyms = {}
        self._confidence_scores = {}
        self._reverse = {}
        self._data = None
