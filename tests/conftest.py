"""
Pytest configuration and shared fixtures for all tests.
"""
import pytest
import os
import sys
import tempfile
import shutil
from unittest.mock import Mock
from typing import Generator, List

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from newsearch.models.article import Article


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_articles() -> List[Article]:
    """
    Small corpus: "автомобиль" and "машина" share every article without
    ever being adjacent; "Москве" is always capitalized.
    """
    return [
        Article(
            title="Лучший автомобиль года",
            content="Эксперты считают, что машина стала лучшей.",
            category="Авто",
            url="https://news.example/1",
        ),
        Article(
            title="Продажи выросли",
            content="Каждый автомобиль продан, любая машина нашла покупателя.",
            category="Экономика",
            url="https://news.example/2",
        ),
        Article(
            title="Новый автомобиль",
            content="Завод показал, новая машина вышла весной.",
            category="Авто",
            url="https://news.example/3",
        ),
        Article(
            title="Погода в Москве",
            content="В Москве ожидается дождь.",
            category="Погода",
            url="https://news.example/4",
        ),
        Article(
            title="Снег в Москве",
            content="Синоптики обещают дождь.",
            category="Погода",
            url="https://news.example/5",
        ),
    ]


@pytest.fixture
def cold_war_articles() -> List[Article]:
    """Corpus where "холодная" and "война" always appear as one phrase."""
    return [
        Article(title="История", content="Холодная война закончилась давно, холодная война забыта."),
        Article(title="Архив", content="Документы про холодная война открыты."),
        Article(title="Лекция", content="Профессор рассказал: холодная война изменила мир."),
    ]


@pytest.fixture
def mock_search_service():
    """Mock search service returning one document."""
    mock_service = Mock()
    mock_service.search.return_value = {
        "documents": [{"id": "doc1", "title": "Путин выступил", "score": 1.0}],
        "total": 1,
        "highlights": {"doc1": ["<em>Путин</em> выступил"]},
    }
    mock_service.count_all_documents.return_value = 1
    return mock_service


@pytest.fixture
def empty_search_service():
    """Mock search service that never finds anything."""
    mock_service = Mock()
    mock_service.search.return_value = {"documents": [], "total": 0, "highlights": {}}
    return mock_service


@pytest.fixture
def mock_ollama_response():
    """Mock successful /api/generate HTTP response."""
    mock_response = Mock()
    mock_response.status_code = 200
    mock_response.text = '{"response": "путин"}'
    mock_response.json.return_value = {"response": "путин\n"}
    return mock_response
