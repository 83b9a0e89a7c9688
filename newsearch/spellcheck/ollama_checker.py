"""
LLM-backed query correction through a local Ollama server, last in the chain.
"""
from typing import Optional
import threading

from cachetools import LRUCache

from config import OLLAMA_BASE_URL, OLLAMA_MODEL, OLLAMA_TIMEOUT
from newsearch.clients.ollama_client import OllamaClient
from newsearch.models.spell_check import SpellCheckResult
from newsearch.spellcheck.base import SpellChecker
from newsearch.text.preprocessor import normalize
from logger_config import get_logger

logger = get_logger("spellcheck")

CORRECTION_PROMPT = """Исправь опечатки в поисковом запросе на русском языке для новостного сайта.
Контекст: политика, общество, Россия, Украина, США, Европа.
Верни только исправленный запрос без кавычек и объяснений.
Если опечаток нет, верни исходный запрос.
Запрос: {query}
Ответ:"""


def build_prompt(query: str) -> str:
    return CORRECTION_PROMPT.format(query=query)


def clean_suggestion(raw: Optional[str], fallback: str) -> str:
    """First non-empty line of the model output with quotes stripped."""
    if not raw or not raw.strip():
        return fallback
    first_line = next((line.strip() for line in raw.splitlines() if line.strip()), raw.strip())
    cleaned = first_line.strip("'\"` ")
    return cleaned or fallback


class OllamaSpellChecker(SpellChecker):
    """Ask a small local model to fix typos the other strategies missed."""

    name = "Ollama"
    priority = 10
    confidence = 0.6

    def __init__(self, client: OllamaClient, cache_size: int = 256):
        self.client = client
        self._cache = LRUCache(maxsize=cache_size)
        self._cache_lock = threading.Lock()

    @classmethod
    def try_create(cls, base_url: str = OLLAMA_BASE_URL, model: str = OLLAMA_MODEL,
                   timeout: float = OLLAMA_TIMEOUT) -> Optional["OllamaSpellChecker"]:
        """
        Create the checker only if the Ollama server answers.

        Availability is probed once; an unreachable server means the checker
        is not created at all.

        Returns:
            OllamaSpellChecker or None
        """
        client = OllamaClient(base_url=base_url, model=model, timeout=timeout)
        if not client.check_connection():
            logger.warning(f"Ollama is not reachable at {client.base_url}, LLM spell checking disabled")
            return None
        logger.info(f"Ollama spell checking ready, model: {client.model}")
        return cls(client)

    def try_correct(self, query: str) -> SpellCheckResult:
        if not query or not query.strip():
            return SpellCheckResult.no_change(query, self.name)

        key = normalize(query)
        with self._cache_lock:
            cached = self._cache.get(key)
        if cached is not None:
            return SpellCheckResult.correction(query, cached, self.name, self.confidence)

        result = self.client.generate(build_prompt(query))
        if not result.success:
            return SpellCheckResult.error(query, self.name, result.error)

        suggestion = clean_suggestion(result.text, query)
        if normalize(suggestion) == key:
            return SpellCheckResult.no_change(query, self.name)

        with self._cache_lock:
            self._cache[key] = suggestion
        return SpellCheckResult.correction(query, suggestion, self.name, self.confidence)
