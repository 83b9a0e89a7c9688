"""
Tests for co-occurrence analysis.
"""
import pytest

from newsearch.models.article import Article
from newsearch.synonyms.cooccurrence import CoOccurrenceAnalyzer
from newsearch.synonyms.options import MiningOptions


@pytest.fixture
def analyzer():
    return CoOccurrenceAnalyzer()


class TestInvertedIndex:
    """Test inverted index construction."""

    @pytest.mark.unit
    def test_frequency_filter(self, analyzer, sample_articles):
        index = analyzer.build_inverted_index(sample_articles, MiningOptions())
        assert index["автомобиль"] == {0, 1, 2}
        assert index["машина"] == {0, 1, 2}
        # Words seen in a single article are dropped with min_word_frequency=2
        assert "эксперты" not in index

    @pytest.mark.unit
    def test_excluded_words(self, analyzer, sample_articles):
        options = MiningOptions(excluded_words=["Автомобиль"], forbidden_words={"дождь"})
        index = analyzer.build_inverted_index(sample_articles, options)
        assert "автомобиль" not in index
        assert "дождь" not in index
        assert "машина" in index

    @pytest.mark.unit
    def test_max_frequency(self, analyzer, sample_articles):
        index = analyzer.build_inverted_index(sample_articles, MiningOptions(max_word_frequency=2))
        assert "автомобиль" not in index
        assert "дождь" in index


class TestFindPotentialSynonyms:
    """Test candidate pair scoring."""

    @pytest.mark.unit
    def test_no_transitive_pairs(self, analyzer):
        articles = [
            Article(content="автомобиль дорога"),
            Article(content="машина дорога"),
        ]
        options = MiningOptions(min_similarity_threshold=0.3, min_word_frequency=1)

        similarities = analyzer.find_potential_synonyms(articles, options)
        groups = analyzer.group_synonyms(similarities)

        assert analyzer.similarity("автомобиль", "машина") == 0.0
        assert "машина" not in groups.get("автомобиль", set())
        assert "автомобиль" not in groups.get("машина", set())
        assert groups["дорога"] == {"автомобиль", "машина"}

    @pytest.mark.unit
    def test_jaccard_values(self, analyzer, sample_articles):
        similarities = analyzer.find_potential_synonyms(sample_articles, MiningOptions())
        pair = similarities["автомобиль"][0]
        assert pair.other("автомобиль") == "машина"
        assert pair.jaccard_similarity == pytest.approx(1.0)
        assert pair.co_occurrence_count == 3

    @pytest.mark.unit
    def test_pairs_exposed_under_both_words(self, analyzer, sample_articles):
        groups = analyzer.group_synonyms(analyzer.find_potential_synonyms(sample_articles, MiningOptions()))
        assert "машина" in groups["автомобиль"]
        assert "автомобиль" in groups["машина"]
        for anchor, members in groups.items():
            assert anchor not in members

    @pytest.mark.unit
    def test_similarity_symmetric(self, analyzer, sample_articles):
        analyzer.find_potential_synonyms(sample_articles, MiningOptions())
        words = ["автомобиль", "машина", "дождь", "москве", "неизвестное"]
        for w1 in words:
            for w2 in words:
                assert analyzer.similarity(w1, w2) == analyzer.similarity(w2, w1)

    @pytest.mark.unit
    def test_threshold_filters_pairs(self, analyzer):
        articles = [
            Article(content="альфа бета"),
            Article(content="альфа гамма"),
            Article(content="альфа гамма"),
            Article(content="бета дельта"),
        ]
        options = MiningOptions(min_word_frequency=1, min_similarity_threshold=0.5)
        similarities = analyzer.find_potential_synonyms(articles, options)
        # альфа/гамма: 2/3; альфа/бета: 1/4
        assert [s.other("альфа") for s in similarities["альфа"]] == ["гамма"]

    @pytest.mark.unit
    def test_min_co_occurrences(self, analyzer):
        articles = [
            Article(content="альфа бета"),
            Article(content="альфа гамма"),
            Article(content="альфа гамма"),
        ]
        options = MiningOptions(min_word_frequency=1, min_similarity_threshold=0.1, min_co_occurrences=2)
        similarities = analyzer.find_potential_synonyms(articles, options)
        assert "бета" not in similarities
        assert [s.other("гамма") for s in similarities["гамма"]] == ["альфа"]

    @pytest.mark.unit
    def test_max_synonyms_per_word(self, analyzer):
        articles = [Article(content="центр один два три четыре пять")] * 2
        options = MiningOptions(min_word_frequency=1, max_synonyms_per_word=2)
        similarities = analyzer.find_potential_synonyms(articles, options)
        assert len(similarities["центр"]) == 2

    @pytest.mark.unit
    def test_empty_corpus(self, analyzer):
        assert analyzer.find_potential_synonyms([], MiningOptions()) == {}
        assert analyzer.similarity("а", "б") == 0.0
