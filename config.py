"""
Configuration file for the search layer.
Set environment variables or modify defaults here.
"""
import os
from dotenv import load_dotenv

load_dotenv()

# Elasticsearch Configuration
ELASTICSEARCH_URL = os.getenv("ELASTICSEARCH_URL", "http://localhost:9200")
ELASTICSEARCH_USER = os.getenv("ELASTICSEARCH_USER", None)
ELASTICSEARCH_PASSWORD = os.getenv("ELASTICSEARCH_PASSWORD", None)  # Must be set via environment variable
ELASTICSEARCH_VERIFY_CERTS = os.getenv("ELASTICSEARCH_VERIFY_CERTS", "false").lower() == "true"
ELASTICSEARCH_INDEX = os.getenv("ELASTICSEARCH_INDEX", "articles")
ELASTICSEARCH_TIMEOUT = int(os.getenv("ELASTICSEARCH_TIMEOUT", "30"))

# Ollama Configuration (LLM spell checking, last resort in the chain)
OLLAMA_ENABLED = os.getenv("OLLAMA_ENABLED", "true").lower() == "true"
OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "qwen2.5:0.5b")
OLLAMA_TIMEOUT = int(os.getenv("OLLAMA_TIMEOUT", "15"))
OLLAMA_MAX_RETRIES = int(os.getenv("OLLAMA_MAX_RETRIES", "2"))

# Data files
ARTICLES_FILE = os.getenv("ARTICLES_FILE", "articles.json")
SYNONYMS_FILE = os.getenv("SYNONYMS_FILE", "synonyms.json")
ANALYTICS_FILE = os.getenv("ANALYTICS_FILE", "search_analytics.json")

# Synonym Expansion Configuration
SYNONYM_MIN_CONFIDENCE = float(os.getenv("SYNONYM_MIN_CONFIDENCE", "0.25"))

# Synonym Mining Configuration (defaults for MiningOptions.from_config)
MINING_MIN_SIMILARITY = float(os.getenv("MINING_MIN_SIMILARITY", "0.25"))
MINING_MIN_CO_OCCURRENCES = int(os.getenv("MINING_MIN_CO_OCCURRENCES", "1"))
MINING_MIN_WORD_FREQUENCY = int(os.getenv("MINING_MIN_WORD_FREQUENCY", "2"))
MINING_MAX_SYNONYMS_PER_WORD = int(os.getenv("MINING_MAX_SYNONYMS_PER_WORD", "15"))
MINING_EXCLUDE_PROPER_NOUNS = os.getenv("MINING_EXCLUDE_PROPER_NOUNS", "true").lower() == "true"
MINING_EXCLUDE_COMPOUND_TERMS = os.getenv("MINING_EXCLUDE_COMPOUND_TERMS", "true").lower() == "true"
MINING_MIN_COMPOUND_OCCURRENCES = int(os.getenv("MINING_MIN_COMPOUND_OCCURRENCES", "3"))
MINING_MORPHOLOGICAL_THRESHOLD = float(os.getenv("MINING_MORPHOLOGICAL_THRESHOLD", "0.78"))

# Spell Checking Configuration
SPELLCHECK_CACHE_SIZE = int(os.getenv("SPELLCHECK_CACHE_SIZE", "1000"))
SPELLCHECK_CACHE_TTL = int(os.getenv("SPELLCHECK_CACHE_TTL", "3600"))  # seconds
SPELLCHECK_MIN_QUERY_LENGTH = int(os.getenv("SPELLCHECK_MIN_QUERY_LENGTH", "3"))
SPELLCHECK_DICTIONARY_ENABLED = os.getenv("SPELLCHECK_DICTIONARY_ENABLED", "false").lower() == "true"
SPELLCHECK_PHONETIC_ENABLED = os.getenv("SPELLCHECK_PHONETIC_ENABLED", "true").lower() == "true"

# Search Analytics Configuration
ANALYTICS_FLUSH_EVERY = int(os.getenv("ANALYTICS_FLUSH_EVERY", "10"))
ANALYTICS_MIN_SUCCESS_RATE = float(os.getenv("ANALYTICS_MIN_SUCCESS_RATE", "0.7"))
ANALYTICS_MIN_SEARCH_COUNT = int(os.getenv("ANALYTICS_MIN_SEARCH_COUNT", "2"))
ANALYTICS_MAX_EDIT_DISTANCE = int(os.getenv("ANALYTICS_MAX_EDIT_DISTANCE", "2"))

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", None)  # None = console only
LOG_CONSOLE_LEVEL = os.getenv("LOG_CONSOLE_LEVEL", "INFO")
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", str(10 * 1024 * 1024)))
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "5"))
# Client libraries that log every HTTP request at INFO
LOG_QUIET_LIBRARIES = [name.strip() for name in os.getenv(
    "LOG_QUIET_LIBRARIES", "elasticsearch,elastic_transport,urllib3"
).split(",") if name.strip()]
