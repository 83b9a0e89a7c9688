"""
Ollama client for querying a local LLM with retry logic.
"""
from dataclasses import dataclass
from typing import List, Optional

import requests
from tenacity import retry, stop_after_attempt, stop_after_delay, wait_exponential, retry_if_exception_type

from config import OLLAMA_BASE_URL, OLLAMA_MODEL, OLLAMA_TIMEOUT, OLLAMA_MAX_RETRIES
from logger_config import logger

PROBE_TIMEOUT = 3


@dataclass
class GenerationResult:
    """Outcome of one generate call. Failures are reported, not raised."""
    success: bool
    text: str = ""
    error: Optional[str] = None


class OllamaClient:
    """Client for the Ollama HTTP API."""

    def __init__(self, base_url: str = OLLAMA_BASE_URL, model: str = OLLAMA_MODEL,
                 timeout: float = OLLAMA_TIMEOUT):
        """
        Initialize Ollama client.

        Args:
            base_url: Base URL of the Ollama server (default: http://localhost:11434)
            model: Model name to use
            timeout: Hard timeout of one generate request in seconds
        """
        self.base_url = base_url.rstrip('/')
        self.model = model
        self.timeout = timeout
        self.generate_endpoint = f"{self.base_url}/api/generate"

    @retry(
        stop=(stop_after_attempt(OLLAMA_MAX_RETRIES) | stop_after_delay(OLLAMA_TIMEOUT)),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        retry=retry_if_exception_type(requests.exceptions.ConnectionError),
        reraise=True
    )
    def _post_generate(self, payload: dict) -> requests.Response:
        return requests.post(self.generate_endpoint, json=payload, timeout=self.timeout)

    def generate(self, prompt: str, temperature: float = 0.1, max_tokens: int = 64,
                 top_p: float = 0.9, repeat_penalty: float = 1.05) -> GenerationResult:
        """
        Generate a completion for a prompt.

        Connection errors are retried a bounded number of times, timeouts
        are not.

        Args:
            prompt: Prompt text
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            top_p: Nucleus sampling threshold
            repeat_penalty: Repetition penalty

        Returns:
            GenerationResult with the generated text or the error
        """
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": temperature,
                "top_p": top_p,
                "num_predict": max_tokens,
                "repeat_penalty": repeat_penalty,
            },
        }

        try:
            logger.debug(f"Calling Ollama API, model {self.model}")
            response = self._post_generate(payload)
        except requests.exceptions.Timeout:
            logger.warning(f"Ollama API timeout after {self.timeout}s")
            return GenerationResult(False, error=f"Ollama API timeout after {self.timeout}s")
        except requests.exceptions.RequestException as e:
            logger.warning(f"Error calling Ollama API: {e}")
            return GenerationResult(False, error=f"Error calling Ollama API: {e}")

        if response.status_code != 200:
            logger.warning(f"Ollama API error ({response.status_code}): {response.text}")
            return GenerationResult(False, error=f"HTTP {response.status_code}: {response.text}")

        try:
            result = response.json()
        except ValueError as e:
            logger.warning(f"Unexpected response from Ollama: {e}")
            return GenerationResult(False, error=f"Invalid JSON response: {e}")

        text = result.get("response") if isinstance(result, dict) else None
        if text is None:
            logger.warning(f"Unexpected response format: {result}")
            return GenerationResult(False, error="Response has no 'response' field")

        logger.debug(f"Generated response: {len(text)} characters")
        return GenerationResult(True, text=text)

    def check_connection(self) -> bool:
        """Check if Ollama is accessible."""
        try:
            response = requests.get(f"{self.base_url}/api/version", timeout=PROBE_TIMEOUT)
            return response.status_code == 200
        except requests.exceptions.RequestException:
            return False

    def list_models(self) -> List[str]:
        """Get list of models pulled into Ollama."""
        try:
            response = requests.get(f"{self.base_url}/api/tags", timeout=PROBE_TIMEOUT)
            response.raise_for_status()
            models = response.json()
            return [model['name'] for model in models.get('models', [])]
        except (requests.exceptions.RequestException, ValueError):
            return []
