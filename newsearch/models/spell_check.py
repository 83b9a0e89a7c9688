"""
Results produced by query correction strategies and by the composite chain.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class SpellCheckResult:
    """
    Outcome of one correction attempt by one strategy.

    A tagged result: failures (timeouts, unreachable services, bad responses)
    are reported with success=False instead of raising.
    """
    original_query: str
    corrected_query: str
    has_correction: bool
    success: bool
    source: str
    confidence: float = 1.0
    message: Optional[str] = None

    @classmethod
    def no_change(cls, query: str, source: str = "none") -> "SpellCheckResult":
        return cls(query, query, False, True, source)

    @classmethod
    def correction(cls, query: str, corrected: str, source: str,
                   confidence: float = 0.8) -> "SpellCheckResult":
        changed = query.strip().lower() != corrected.strip().lower()
        return cls(query, corrected, changed, True, source, confidence if changed else 1.0)

    @classmethod
    def error(cls, query: str, source: str, message: Optional[str] = None) -> "SpellCheckResult":
        return cls(query, query, False, False, source, 0.0, message)


@dataclass
class CorrectionStep:
    """One transformation applied by the chain, kept for debugging and analytics."""
    method: str
    before: str
    after: str
    confidence: float
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "before": self.before,
            "after": self.after,
            "confidence": self.confidence,
            "reason": self.reason,
        }


@dataclass
class DetailedSpellCheckResult:
    """Aggregate of the whole correction chain for one query."""
    original_query: str
    corrected_query: str
    steps: List[CorrectionStep] = field(default_factory=list)
    elapsed_ms: float = 0.0
    from_cache: bool = False

    @property
    def has_correction(self) -> bool:
        return self.original_query.strip().lower() != self.corrected_query.strip().lower()

    @property
    def confidence(self) -> float:
        """The chain is as trustworthy as its weakest step."""
        if not self.steps:
            return 1.0
        return min(step.confidence for step in self.steps)

    def copy(self, **changes) -> "DetailedSpellCheckResult":
        changes.setdefault("steps", list(self.steps))
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original_query": self.original_query,
            "corrected_query": self.corrected_query,
            "has_correction": self.has_correction,
            "confidence": self.confidence,
            "elapsed_ms": self.elapsed_ms,
            "from_cache": self.from_cache,
            "steps": [step.to_dict() for step in self.steps],
        }
