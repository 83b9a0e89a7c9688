"""
Search pipeline: correct -> expand -> search -> learn from the outcome.
"""
from typing import Any, Dict, Optional, Sequence

from config import SPELLCHECK_MIN_QUERY_LENGTH, SYNONYMS_FILE
from newsearch.models.spell_check import DetailedSpellCheckResult
from newsearch.models.synonym_data import SynonymData
from newsearch.spellcheck.composite import CompositeSpellChecker
from newsearch.spellcheck.search_analytics import SearchAnalyticsStore
from newsearch.synonyms.miner import SynonymMiner
from newsearch.synonyms.options import MiningOptions
from newsearch.synonyms.provider import SynonymProvider
from newsearch.text.preprocessor import normalize
from newsearch.text.stop_words import StopWordsProvider
from logger_config import logger


class SearchPipeline:
    """
    Query-time orchestration over a search service.

    The search service is anything with
    search(query, offset, limit, category, author) -> {"documents", "total", "highlights"},
    normally ElasticsearchStore.
    """

    def __init__(self,
                 search_service,
                 synonym_provider: SynonymProvider,
                 spell_checker: Optional[CompositeSpellChecker] = None,
                 analytics_store: Optional[SearchAnalyticsStore] = None,
                 stop_words: Optional[StopWordsProvider] = None,
                 miner: Optional[SynonymMiner] = None):
        self.search_service = search_service
        self.synonym_provider = synonym_provider
        self.spell_checker = spell_checker
        self.analytics_store = analytics_store
        self.stop_words = stop_words or StopWordsProvider.create_default()
        self.miner = miner or SynonymMiner(stop_words=self.stop_words)

    def prepare_query(self, raw_query: Optional[str]) -> str:
        """Normalize a query and drop stop words."""
        words = [w for w in normalize(raw_query).split() if not self.stop_words.is_stop_word(w)]
        return " ".join(words)

    def correct_query(self, query: str) -> Optional[DetailedSpellCheckResult]:
        """Run the correction chain; None if disabled, too short or failed."""
        if self.spell_checker is None or len(query) < SPELLCHECK_MIN_QUERY_LENGTH:
            return None
        try:
            return self.spell_checker.try_correct(query)
        except Exception as e:
            logger.warning(f"Spell checking failed for '{query}', searching as typed: {e}")
            return None

    def search(self,
               raw_query: str,
               offset: int = 0,
               limit: int = 10,
               category: Optional[str] = None,
               author: Optional[str] = None,
               synonym_confidence: Optional[float] = None) -> Dict[str, Any]:
        """
        Execute one search.

        Args:
            raw_query: Query as typed by the user
            offset: Pagination offset
            limit: Number of results
            category: Optional category filter
            author: Optional author filter
            synonym_confidence: Expansion confidence threshold override

        Returns:
            Dict with query, corrected_query, expanded_query, correction,
            total, documents, highlights

        Raises:
            ValueError: If the query is blank
        """
        # A query made only of stop words is searched as typed
        query = self.prepare_query(raw_query) or normalize(raw_query)
        if not query:
            raise ValueError("Search query is empty")

        correction = self.correct_query(query)
        corrected = normalize(correction.corrected_query) if correction else query
        corrected = corrected or query

        expanded = self.synonym_provider.expand_query(corrected, synonym_confidence) or corrected
        logger.info(f"Search: '{raw_query}' -> corrected '{corrected}' -> expanded '{expanded}'")

        result = self.search_service.search(expanded, offset=offset, limit=limit, category=category, author=author)
        total = int(result.get("total", 0))

        self.record_search_outcome(
            corrected,
            total,
            total > 0,
            original_query=query if corrected != query else None,
        )

        return {
            "query": query,
            "corrected_query": corrected,
            "expanded_query": expanded,
            "correction": correction,
            "total": total,
            "documents": result.get("documents", []),
            "highlights": result.get("highlights", {}),
        }

    def record_search_outcome(self, final_query: str, result_count: int, was_successful: bool,
                              original_query: Optional[str] = None):
        """Report an executed search back to analytics."""
        if self.analytics_store is None:
            return
        try:
            self.analytics_store.record_search(final_query, result_count, was_successful, original_query)
        except Exception as e:
            logger.warning(f"Could not record search outcome for '{final_query}': {e}")

    def remine_synonyms(self, articles: Sequence, options: Optional[MiningOptions] = None,
                        path: str = SYNONYMS_FILE) -> SynonymData:
        """Mine synonyms from scratch, persist them and replace the loaded dictionary."""
        data = self.miner.mine(articles, options or MiningOptions.from_config())
        self.synonym_provider.save_to_file(data, path)
        if self.spell_checker is not None:
            self.spell_checker.clear_cache()
        logger.info(f"Re-mined synonyms: {data.total_groups} groups saved to {path}")
        return data
