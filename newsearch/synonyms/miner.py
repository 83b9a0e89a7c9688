"""
Synonym mining: co-occurrence analysis -> validation -> statistics.
"""
from typing import Dict, List, Optional, Sequence, Set
import time

from config import ARTICLES_FILE
from newsearch.models.article import load_articles
from newsearch.models.synonym_data import MiningStatistics, SynonymData
from newsearch.synonyms.cooccurrence import CoOccurrenceAnalyzer, WordSimilarity
from newsearch.synonyms.options import MiningOptions
from newsearch.synonyms.validator import SynonymValidator
from newsearch.text.stop_words import StopWordsProvider
from logger_config import logger

# Confidence of an anchor whose accepted pairs carry no similarity data
DEFAULT_CONFIDENCE = 0.5


class SynonymMiner:
    """
    Mine synonym groups from a corpus of articles.

    One run is synchronous and self-contained; the result replaces any
    previously persisted dictionary, it is never merged into it.
    """

    def __init__(self,
                 analyzer: Optional[CoOccurrenceAnalyzer] = None,
                 validator: Optional[SynonymValidator] = None,
                 stop_words: Optional[StopWordsProvider] = None):
        stop_words = stop_words or StopWordsProvider.create_default()
        self.analyzer = analyzer or CoOccurrenceAnalyzer(stop_words)
        self.validator = validator or SynonymValidator(stop_words)

    def mine(self, articles: Sequence, options: Optional[MiningOptions] = None) -> SynonymData:
        """
        Run the full mining pipeline.

        Args:
            articles: Corpus articles
            options: Mining options (defaults if None)

        Returns:
            SynonymData with validated groups, confidence scores and
            statistics. Empty (zero groups) when the corpus is empty or no
            candidates are found.
        """
        options = options or MiningOptions.create_default()

        if not articles:
            logger.warning("No articles to mine, zero synonym groups produced")
            return SynonymData()

        logger.info(f"Starting synonym mining over {len(articles)} articles")
        started = time.perf_counter()

        similarities = self.analyzer.find_potential_synonyms(articles, options)
        if not similarities:
            logger.warning("No synonym candidates found, try lowering min_similarity_threshold")
            return SynonymData(statistics=MiningStatistics(
                articles_analyzed=len(articles),
                duration_seconds=time.perf_counter() - started,
            ))

        candidates = self.analyzer.group_synonyms(similarities)
        validated, report = self.validator.validate(candidates, articles, options)

        statistics = self.calculate_statistics(similarities, validated, len(articles))
        statistics.pairs_considered = report.pairs_considered
        statistics.pairs_accepted = report.pairs_accepted
        statistics.rejections = dict(report.rejections)
        statistics.duration_seconds = time.perf_counter() - started

        confidence_scores = self.calculate_confidence_scores(validated, similarities)

        logger.info(
            f"Mining done in {statistics.duration_seconds:.2f}s: {len(validated)} groups, "
            f"{statistics.total_pairs} pairs, avg similarity {statistics.avg_similarity:.3f}"
        )
        return SynonymData(
            synonyms=validated,
            confidence_scores=confidence_scores,
            statistics=statistics,
        )

    def mine_from_json_file(self, file_path: str = ARTICLES_FILE,
                            options: Optional[MiningOptions] = None) -> SynonymData:
        """Load articles from a JSON file and mine them."""
        articles = load_articles(file_path)
        return self.mine(articles, options)

    @staticmethod
    def _accepted_similarities(anchor: str, synonyms: Set[str],
                               similarities: Dict[str, List[WordSimilarity]]) -> List[float]:
        return [
            sim.jaccard_similarity
            for sim in similarities.get(anchor, [])
            if sim.other(anchor) in synonyms
        ]

    def calculate_statistics(self, similarities: Dict[str, List[WordSimilarity]],
                             validated: Dict[str, Set[str]], articles_count: int) -> MiningStatistics:
        values: List[float] = []
        for anchor, synonyms in validated.items():
            values.extend(self._accepted_similarities(anchor, synonyms, similarities))

        return MiningStatistics(
            total_words=len(similarities),
            total_pairs=len(values),
            min_similarity=min(values) if values else 0.0,
            avg_similarity=sum(values) / len(values) if values else 0.0,
            max_similarity=max(values) if values else 0.0,
            articles_analyzed=articles_count,
        )

    def calculate_confidence_scores(self, validated: Dict[str, Set[str]],
                                    similarities: Dict[str, List[WordSimilarity]]) -> Dict[str, float]:
        """Confidence of an anchor is the mean similarity of its accepted synonyms."""
        scores: Dict[str, float] = {}
        for anchor, synonyms in validated.items():
            values = self._accepted_similarities(anchor, synonyms, similarities)
            if not values:
                scores[anchor] = DEFAULT_CONFIDENCE
                continue
            scores[anchor] = min(1.0, sum(values) / len(values))
        return scores
