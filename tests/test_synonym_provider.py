"""
Tests for the synonym store and query expansion.
"""
import pytest
import json
import os

from newsearch.models.synonym_data import SynonymData
from newsearch.synonyms.provider import SynonymProvider


@pytest.fixture
def synonym_data():
    return SynonymData(
        synonyms={
            "автомобиль": {"машина", "авто"},
            "война": {"конфликт"},
        },
        confidence_scores={"автомобиль": 0.6, "война": 0.3},
    )


@pytest.fixture
def provider(synonym_data):
    provider = SynonymProvider(min_confidence=0.25)
    provider.load_from_data(synonym_data)
    return provider


class TestLookup:
    """Test get_synonyms()."""

    @pytest.mark.unit
    def test_anchor_lookup(self, provider):
        assert provider.get_synonyms("Автомобиль") == {"машина", "авто"}

    @pytest.mark.unit
    def test_member_lookup_is_symmetric(self, provider):
        assert provider.get_synonyms("машина") == {"автомобиль", "авто"}
        assert provider.get_synonyms("конфликт") == {"война"}

    @pytest.mark.unit
    def test_never_returns_word_itself(self, provider):
        for word in ["автомобиль", "машина", "авто", "война", "конфликт"]:
            assert word not in provider.get_synonyms(word)

    @pytest.mark.unit
    def test_confidence_gate(self, provider):
        assert provider.get_synonyms("война", min_confidence=0.5) == set()
        assert provider.get_synonyms("конфликт", min_confidence=0.5) == set()
        assert provider.get_synonyms("машина", min_confidence=0.5) == {"автомобиль", "авто"}

    @pytest.mark.unit
    def test_unknown_and_blank(self, provider):
        assert provider.get_synonyms("неизвестно") == set()
        assert provider.get_synonyms("  ") == set()
        assert not provider.has_synonyms("неизвестно")
        assert provider.has_synonyms("авто")


class TestExpandQuery:
    """Test expand_query()."""

    @pytest.mark.unit
    def test_tokens_first_then_synonyms(self, provider):
        assert provider.expand_query("Машина новости") == "машина новости авто автомобиль"

    @pytest.mark.unit
    def test_blank_query(self, provider):
        assert provider.expand_query("   ") == ""
        assert provider.expand_query(None) == ""

    @pytest.mark.unit
    def test_no_duplicates(self, provider):
        expanded = provider.expand_query("машина автомобиль машина")
        terms = expanded.split()
        assert len(terms) == len(set(terms))
        assert terms[:2] == ["машина", "автомобиль"]

    @pytest.mark.unit
    @pytest.mark.parametrize("query", ["машина", "война машина", "конфликт авто", "новости"])
    def test_raising_threshold_only_removes_terms(self, provider, query):
        tokens = provider.expand_query(query, 0.0).split()[:len(query.split())]
        previous = set(provider.expand_query(query, 0.0).split())
        for threshold in [0.1, 0.3, 0.5, 0.7, 1.0]:
            current = set(provider.expand_query(query, threshold).split())
            assert current <= previous
            assert set(tokens) <= current
            previous = current

    @pytest.mark.unit
    def test_default_threshold(self, provider):
        provider.set_min_confidence(0.5)
        assert provider.expand_query("война") == "война"
        assert provider.get_min_confidence() == 0.5

    @pytest.mark.unit
    def test_unscored_group_always_passes(self):
        provider = SynonymProvider()
        provider.add_synonym_group("Президент", "глава", "президент")
        assert provider.expand_query("глава", 1.0) == "глава президент"
        assert provider.group_count == 2


class TestSynonymGroups:
    """Test group merging and Elasticsearch rule export."""

    @pytest.mark.unit
    def test_groups_follow_confidence(self, provider):
        assert provider.get_synonym_groups() == [{"автомобиль", "машина", "авто"}, {"война", "конфликт"}]
        assert provider.get_synonym_groups(0.5) == [{"автомобиль", "машина", "авто"}]

    @pytest.mark.unit
    def test_overlapping_groups_merge(self):
        provider = SynonymProvider()
        provider.load_from_data(SynonymData(synonyms={
            "автомобиль": {"машина"},
            "машина": {"тачка"},
            "мир": {"покой"},
        }))

        groups = provider.get_synonym_groups()

        assert groups == [{"автомобиль", "машина", "тачка"}, {"мир", "покой"}]

    @pytest.mark.unit
    def test_elastic_rules(self, provider):
        assert provider.build_elastic_synonym_rules() == ["авто, автомобиль, машина", "война, конфликт"]
        assert provider.build_elastic_synonym_rules(0.5) == ["авто, автомобиль, машина"]
        assert provider.build_elastic_synonym_rules(0.9) == []

    @pytest.mark.unit
    def test_manual_group_yields_one_rule(self):
        provider = SynonymProvider()
        provider.add_synonym_group("Президент", "глава")
        assert provider.build_elastic_synonym_rules() == ["глава, президент"]


class TestPersistence:
    """Test load/save."""

    @pytest.mark.unit
    def test_save_and_load(self, temp_dir, synonym_data):
        path = os.path.join(temp_dir, "nested", "synonyms.json")
        provider = SynonymProvider()
        provider.save_to_file(synonym_data, path)

        assert provider.get_synonyms("машина") == {"автомобиль", "авто"}

        with open(path, encoding='utf-8') as f:
            content = f.read()
        assert "автомобиль" in content

        reloaded = SynonymProvider()
        reloaded.load_from_file(path)
        assert reloaded.get_all_synonyms() == provider.get_all_synonyms()

    @pytest.mark.unit
    def test_save_replaces_previous_groups(self, temp_dir, provider):
        path = os.path.join(temp_dir, "synonyms.json")
        provider.save_to_file(SynonymData(synonyms={"мир": {"покой"}}), path)
        assert provider.group_count == 1
        assert provider.get_synonyms("машина") == set()

    @pytest.mark.unit
    def test_missing_file(self, temp_dir, provider):
        provider.load_from_file(os.path.join(temp_dir, "missing.json"))
        assert provider.group_count == 0

    @pytest.mark.unit
    @pytest.mark.parametrize("content", ["{broken", "[1, 2]", ""])
    def test_malformed_file(self, temp_dir, provider, content):
        path = os.path.join(temp_dir, "synonyms.json")
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        provider.load_from_file(path)
        assert provider.group_count == 0

    @pytest.mark.unit
    def test_hand_edited_file_is_normalized(self, temp_dir):
        path = os.path.join(temp_dir, "synonyms.json")
        with open(path, 'w', encoding='utf-8') as f:
            json.dump({
                "synonyms": {" Автомобиль ": ["МАШИНА", "автомобиль", ""]},
                "confidenceScores": {"Автомобиль": 7},
            }, f, ensure_ascii=False)

        provider = SynonymProvider()
        provider.load_from_file(path)

        assert provider.get_all_synonyms() == {"автомобиль": {"машина"}}
        assert provider.get_confidence("автомобиль") == 1.0
