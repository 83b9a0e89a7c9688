"""
Data records shared across the package.
"""
from newsearch.models.article import Article, load_articles
from newsearch.models.synonym_data import SynonymData, MiningStatistics
from newsearch.models.spell_check import SpellCheckResult, CorrectionStep, DetailedSpellCheckResult

__all__ = [
    "Article", "load_articles", "SynonymData", "MiningStatistics",
    "SpellCheckResult", "CorrectionStep", "DetailedSpellCheckResult",
]
