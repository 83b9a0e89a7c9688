"""
Synonym mining from the corpus and query expansion with mined synonyms.
"""
from newsearch.synonyms.options import MiningOptions
from newsearch.synonyms.cooccurrence import CoOccurrenceAnalyzer, WordSimilarity
from newsearch.synonyms.validator import SynonymValidator, ValidationReport
from newsearch.synonyms.miner import SynonymMiner
from newsearch.synonyms.provider import SynonymProvider

__all__ = [
    "MiningOptions", "CoOccurrenceAnalyzer", "WordSimilarity",
    "SynonymValidator", "ValidationReport", "SynonymMiner", "SynonymProvider",
]
