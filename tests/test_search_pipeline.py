"""
Tests for the correct -> expand -> search -> learn pipeline.
"""
import pytest
import os
from unittest.mock import Mock

from newsearch.core.search_pipeline import SearchPipeline
from newsearch.models.spell_check import DetailedSpellCheckResult
from newsearch.models.synonym_data import SynonymData
from newsearch.spellcheck.composite import CompositeSpellChecker
from newsearch.spellcheck.keyboard_layout import KeyboardLayoutSpellChecker
from newsearch.spellcheck.search_analytics import SearchAnalyticsStore, SearchAnalyticsSpellChecker
from newsearch.synonyms.options import MiningOptions
from newsearch.synonyms.provider import SynonymProvider


@pytest.fixture
def analytics_store(temp_dir):
    return SearchAnalyticsStore(path=os.path.join(temp_dir, "analytics.json"), flush_every=0)


@pytest.fixture
def synonym_provider():
    provider = SynonymProvider()
    provider.add_synonym_group("путин", "президент")
    return provider


@pytest.fixture
def pipeline(mock_search_service, synonym_provider, analytics_store):
    spell_checker = CompositeSpellChecker([
        KeyboardLayoutSpellChecker(),
        SearchAnalyticsSpellChecker(analytics_store),
    ])
    return SearchPipeline(mock_search_service, synonym_provider, spell_checker, analytics_store)


class TestSearchPipeline:
    """Test SearchPipeline.search()."""

    @pytest.mark.unit
    def test_prepare_query_drops_stop_words(self, pipeline):
        assert pipeline.prepare_query("  Путин и  выборы в  России ") == "путин выборы россии"

    @pytest.mark.unit
    def test_stop_word_only_query_searched_as_typed(self, pipeline, mock_search_service):
        result = pipeline.search("И в на")

        assert result["query"] == "и в на"
        assert result["total"] == 1
        assert mock_search_service.search.call_args.args[0] == "и в на"

    @pytest.mark.unit
    def test_blank_query_rejected(self, pipeline, mock_search_service):
        with pytest.raises(ValueError):
            pipeline.search("   ")
        mock_search_service.search.assert_not_called()

    @pytest.mark.unit
    def test_keyboard_layout_then_expansion(self, pipeline, mock_search_service):
        result = pipeline.search("Genby")

        assert result["corrected_query"] == "путин"
        assert result["expanded_query"] == "путин президент"
        assert result["total"] == 1
        assert isinstance(result["correction"], DetailedSpellCheckResult)
        mock_search_service.search.assert_called_once_with(
            "путин президент", offset=0, limit=10, category=None, author=None
        )

    @pytest.mark.unit
    def test_learned_correction_applied(self, pipeline, analytics_store, mock_search_service):
        pipeline.record_search_outcome("путин выступил", 5, True, original_query="путен выступил")

        result = pipeline.search("Путен выступил", category="Политика")

        assert result["corrected_query"] == "путин выступил"
        assert result["expanded_query"] == "путин выступил президент"
        assert result["correction"].steps[0].method == "SearchAnalytics"
        assert mock_search_service.search.call_args.kwargs["category"] == "Политика"
        assert analytics_store.get_query_stats("путин выступил").search_count == 2

    @pytest.mark.unit
    def test_outcome_recorded_with_original(self, pipeline, analytics_store):
        pipeline.search("gjkbnbrf")

        stats = analytics_store.get_query_stats("политика")
        assert stats.search_count == 1
        assert stats.successful_searches == 1
        assert stats.corrected_from == {"gjkbnbrf"}
        assert analytics_store.get_learned_correction("gjkbnbrf") == "политика"

    @pytest.mark.unit
    def test_unsuccessful_search_not_learned(self, empty_search_service, synonym_provider, analytics_store):
        spell_checker = CompositeSpellChecker([KeyboardLayoutSpellChecker()])
        pipeline = SearchPipeline(empty_search_service, synonym_provider, spell_checker, analytics_store)

        result = pipeline.search("gjkbnbrf")

        assert result["total"] == 0
        assert analytics_store.learned_corrections() == {}
        assert analytics_store.get_query_stats("политика").successful_searches == 0

    @pytest.mark.unit
    def test_spell_checker_failure_degrades(self, mock_search_service, synonym_provider):
        spell_checker = Mock()
        spell_checker.try_correct.side_effect = RuntimeError("broken")
        pipeline = SearchPipeline(mock_search_service, synonym_provider, spell_checker)

        result = pipeline.search("путен")

        assert result["corrected_query"] == "путен"
        assert result["correction"] is None
        assert result["total"] == 1

    @pytest.mark.unit
    def test_short_query_skips_correction(self, mock_search_service, synonym_provider):
        spell_checker = Mock()
        pipeline = SearchPipeline(mock_search_service, synonym_provider, spell_checker)

        pipeline.search("ок")

        spell_checker.try_correct.assert_not_called()

    @pytest.mark.unit
    def test_synonym_confidence_override(self, mock_search_service):
        provider = SynonymProvider()
        provider.load_from_data(SynonymData(
            synonyms={"автомобиль": {"машина"}},
            confidence_scores={"автомобиль": 0.3},
        ))
        pipeline = SearchPipeline(mock_search_service, provider)

        assert pipeline.search("машина", synonym_confidence=0.2)["expanded_query"] == "машина автомобиль"
        assert pipeline.search("машина", synonym_confidence=0.5)["expanded_query"] == "машина"

    @pytest.mark.unit
    def test_search_service_errors_propagate(self, synonym_provider):
        service = Mock()
        service.search.side_effect = ConnectionError("down")
        pipeline = SearchPipeline(service, synonym_provider)
        with pytest.raises(ConnectionError):
            pipeline.search("путин")


class TestRemineSynonyms:
    """Test SearchPipeline.remine_synonyms()."""

    @pytest.mark.unit
    def test_remine_replaces_dictionary(self, temp_dir, sample_articles, mock_search_service, synonym_provider):
        spell_checker = Mock()
        pipeline = SearchPipeline(mock_search_service, synonym_provider, spell_checker)
        path = os.path.join(temp_dir, "synonyms.json")

        data = pipeline.remine_synonyms(sample_articles, MiningOptions(), path=path)

        assert data.total_groups == 2
        assert os.path.exists(path)
        assert synonym_provider.get_synonyms("машина") == {"автомобиль"}
        assert synonym_provider.get_synonyms("путин") == set()
        spell_checker.clear_cache.assert_called_once()
