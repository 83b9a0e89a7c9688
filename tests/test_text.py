"""
Tests for text normalization, stop words, tokenization and article loading.
"""
import pytest
import json
import os

from newsearch.models.article import Article, load_articles
from newsearch.text.preprocessor import normalize, normalize_or_none
from newsearch.text.stop_words import StopWordsProvider
from newsearch.text.tokenizer import (
    tokenize, tokenize_article, word_frequencies, filter_by_frequency, split_query
)


class TestNormalize:
    """Test normalize()."""

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["  Путин ", "МОСКВА", "", "   ", "mixed Case Text", "уже норм"])
    def test_idempotent(self, value):
        assert normalize(normalize(value)) == normalize(value)

    @pytest.mark.unit
    def test_blank_and_none(self):
        assert normalize(None) == ""
        assert normalize("   ") == ""
        assert normalize_or_none("  ") is None

    @pytest.mark.unit
    def test_lowercases_and_trims(self):
        assert normalize("  Холодная Война ") == "холодная война"


class TestStopWords:
    """Test StopWordsProvider."""

    @pytest.mark.unit
    def test_default_list(self):
        provider = StopWordsProvider.create_default()
        assert provider.is_stop_word("и")
        assert provider.is_stop_word("На")
        assert not provider.is_stop_word("автомобиль")
        assert provider.count > 0

    @pytest.mark.unit
    def test_blank_is_stop_word(self):
        assert StopWordsProvider().is_stop_word("  ")
        assert StopWordsProvider().is_stop_word(None)

    @pytest.mark.unit
    def test_add_words(self):
        provider = StopWordsProvider(words=[])
        assert not provider.is_stop_word("новости")
        provider.add(["Новости"])
        assert "новости" in provider


class TestTokenizer:
    """Test tokenization functions."""

    @pytest.mark.unit
    def test_tokenize_filters_short_stop_and_digits(self):
        tokens = tokenize("В 2024 году Автомобиль и машина, ИИ!")
        assert tokens == {"году", "автомобиль", "машина"}

    @pytest.mark.unit
    def test_tokenize_unique(self):
        assert tokenize("дождь дождь Дождь") == {"дождь"}

    @pytest.mark.unit
    def test_tokenize_blank(self):
        assert tokenize("") == set()
        assert tokenize(None) == set()

    @pytest.mark.unit
    def test_tokenize_length_bounds(self):
        assert tokenize("кот автомобиль", min_length=4, max_length=8) == set()

    @pytest.mark.unit
    def test_tokenize_article_parts(self):
        article = Article(title="Новый автомобиль", content="машина вышла")
        assert tokenize_article(article) == {"новый", "автомобиль", "машина", "вышла"}
        assert tokenize_article(article, include_content=False) == {"новый", "автомобиль"}

    @pytest.mark.unit
    def test_word_frequencies_counts_documents(self, sample_articles):
        frequencies = word_frequencies(sample_articles)
        assert frequencies["автомобиль"] == 3
        # Title and body of one article count once
        assert frequencies["москве"] == 2

    @pytest.mark.unit
    def test_filter_by_frequency(self):
        frequencies = {"а": 1, "б": 2, "в": 5}
        assert filter_by_frequency(frequencies, min_frequency=2) == {"б", "в"}
        assert filter_by_frequency(frequencies, min_frequency=2, max_frequency=4) == {"б"}

    @pytest.mark.unit
    def test_split_query_keeps_order(self):
        assert split_query("  Путин  МОСКВА путин ") == ["путин", "москва"]
        assert split_query("") == []


class TestArticles:
    """Test article records and corpus loading."""

    @pytest.mark.unit
    def test_from_dict_case_insensitive(self):
        article = Article.from_dict({
            "Title": "Заголовок",
            "CONTENT": "Текст",
            "url": "https://news.example/a",
            "PublishDate": "2024-03-01T10:00:00Z",
        })
        assert article.title == "Заголовок"
        assert article.content == "Текст"
        assert article.publish_date.year == 2024

    @pytest.mark.unit
    def test_load_missing_file(self, temp_dir):
        assert load_articles(os.path.join(temp_dir, "missing.json")) == []

    @pytest.mark.unit
    def test_load_invalid_json(self, temp_dir):
        path = os.path.join(temp_dir, "broken.json")
        with open(path, 'w', encoding='utf-8') as f:
            f.write("{not json")
        assert load_articles(path) == []

    @pytest.mark.unit
    def test_load_valid_file(self, temp_dir, sample_articles):
        path = os.path.join(temp_dir, "articles.json")
        with open(path, 'w', encoding='utf-8') as f:
            json.dump([a.to_dict() for a in sample_articles], f, ensure_ascii=False)

        loaded = load_articles(path)
        assert len(loaded) == len(sample_articles)
        assert loaded[0].title == sample_articles[0].title
