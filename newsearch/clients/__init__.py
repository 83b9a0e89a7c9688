"""
Clients for external services.
"""
from newsearch.clients.ollama_client import OllamaClient, GenerationResult

__all__ = ["OllamaClient", "GenerationResult"]
