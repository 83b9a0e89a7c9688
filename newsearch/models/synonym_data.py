"""
Persisted synonym dictionary and mining statistics.

JSON layout (hand-editable):
{
  "synonyms": {"word": ["synonym", ...]},
  "confidenceScores": {"word": 0.42},
  "statistics": {...},
  "lastUpdated": "2024-01-01T00:00:00+00:00",
  "totalGroups": 1
}
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Set


@dataclass
class MiningStatistics:
    """Run statistics of one mining pass."""
    total_words: int = 0
    total_pairs: int = 0
    pairs_considered: int = 0
    pairs_accepted: int = 0
    rejections: Dict[str, int] = field(default_factory=dict)
    min_similarity: float = 0.0
    avg_similarity: float = 0.0
    max_similarity: float = 0.0
    articles_analyzed: int = 0
    duration_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalWords": self.total_words,
            "totalPairs": self.total_pairs,
            "pairsConsidered": self.pairs_considered,
            "pairsAccepted": self.pairs_accepted,
            "rejections": dict(self.rejections),
            "minSimilarity": self.min_similarity,
            "avgSimilarity": self.avg_similarity,
            "maxSimilarity": self.max_similarity,
            "articlesAnalyzed": self.articles_analyzed,
            "durationSeconds": self.duration_seconds,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "MiningStatistics":
        if not isinstance(data, dict):
            return cls()
        rejections = data.get("rejections") or {}
        return cls(
            total_words=int(data.get("totalWords", 0) or 0),
            total_pairs=int(data.get("totalPairs", 0) or 0),
            pairs_considered=int(data.get("pairsConsidered", 0) or 0),
            pairs_accepted=int(data.get("pairsAccepted", 0) or 0),
            rejections={str(k): int(v) for k, v in rejections.items()} if isinstance(rejections, dict) else {},
            min_similarity=float(data.get("minSimilarity", 0.0) or 0.0),
            avg_similarity=float(data.get("avgSimilarity", 0.0) or 0.0),
            max_similarity=float(data.get("maxSimilarity", 0.0) or 0.0),
            articles_analyzed=int(data.get("articlesAnalyzed", 0) or 0),
            duration_seconds=float(data.get("durationSeconds", 0.0) or 0.0),
        )


@dataclass
class SynonymData:
    """Validated synonym groups with per-anchor confidence."""
    synonyms: Dict[str, Set[str]] = field(default_factory=dict)
    confidence_scores: Dict[str, float] = field(default_factory=dict)
    statistics: Optional[MiningStatistics] = None
    last_updated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_groups(self) -> int:
        return len(self.synonyms)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "synonyms": {word: sorted(values) for word, values in sorted(self.synonyms.items())},
            "confidenceScores": {word: round(score, 6) for word, score in sorted(self.confidence_scores.items())},
            "statistics": self.statistics.to_dict() if self.statistics else None,
            "lastUpdated": self.last_updated.isoformat(),
            "totalGroups": self.total_groups,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SynonymData":
        """
        Parse the JSON layout. Values that are not lists/numbers are skipped
        rather than rejected, so a hand-edited file loads as far as it can.
        """
        synonyms: Dict[str, Set[str]] = {}
        raw_synonyms = data.get("synonyms") or {}
        if isinstance(raw_synonyms, dict):
            for word, values in raw_synonyms.items():
                if isinstance(values, (list, tuple, set)):
                    synonyms[str(word)] = {str(v) for v in values if v is not None}

        scores: Dict[str, float] = {}
        raw_scores = data.get("confidenceScores") or {}
        if isinstance(raw_scores, dict):
            for word, score in raw_scores.items():
                try:
                    scores[str(word)] = float(score)
                except (TypeError, ValueError):
                    continue

        last_updated = datetime.now(timezone.utc)
        raw_updated = data.get("lastUpdated")
        if raw_updated:
            try:
                last_updated = datetime.fromisoformat(str(raw_updated).replace("Z", "+00:00"))
            except ValueError:
                pass

        statistics = data.get("statistics")
        return cls(
            synonyms=synonyms,
            confidence_scores=scores,
            statistics=MiningStatistics.from_dict(statistics) if statistics else None,
            last_updated=last_updated,
        )
