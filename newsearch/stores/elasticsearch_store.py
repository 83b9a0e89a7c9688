"""
Elasticsearch integration for full-text article search.
Provides:
- Article index creation with an explicit mapping
- Bulk indexing with URL-derived ids (re-indexing never duplicates)
- Multi-field fuzzy search with category/author filters and highlighting
"""
from typing import List, Dict, Any, Optional, Sequence, Tuple
import base64
import hashlib

from elasticsearch import Elasticsearch, NotFoundError
from elasticsearch.helpers import bulk

from config import (
    ELASTICSEARCH_URL, ELASTICSEARCH_USER, ELASTICSEARCH_PASSWORD,
    ELASTICSEARCH_VERIFY_CERTS, ELASTICSEARCH_INDEX, ELASTICSEARCH_TIMEOUT
)
from newsearch.models.article import Article
from logger_config import logger

SEARCH_FIELDS = ["title^3", "content", "author", "category"]

ARTICLE_MAPPING = {
    "properties": {
        "id": {"type": "keyword"},
        "title": {"type": "text"},
        "url": {"type": "keyword"},
        "content": {"type": "text"},
        "category": {"type": "keyword"},
        "author": {"type": "keyword"},
        "publish_date": {"type": "date"},
        "tags": {"type": "keyword"}
    }
}

INDEX_SETTINGS = {
    "number_of_shards": 1,
    "number_of_replicas": 0
}


def document_id(url: str) -> str:
    """URL-safe base64 of the SHA-256 of the article URL, without padding."""
    digest = hashlib.sha256(url.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


class ElasticsearchStore:
    """
    Elasticsearch store for news articles.
    This is the search service consumed by the search pipeline and by the
    analytics spell checker.
    """

    def __init__(self,
                 url: str = ELASTICSEARCH_URL,
                 username: Optional[str] = ELASTICSEARCH_USER,
                 password: Optional[str] = ELASTICSEARCH_PASSWORD,
                 verify_certs: bool = ELASTICSEARCH_VERIFY_CERTS,
                 index_name: str = ELASTICSEARCH_INDEX,
                 request_timeout: int = ELASTICSEARCH_TIMEOUT):
        """
        Initialize Elasticsearch client.

        Args:
            url: Elasticsearch URL
            username: Optional username for authentication
            password: Optional password for authentication
            verify_certs: Whether to verify SSL certificates
            index_name: Article index name
            request_timeout: Request timeout in seconds
        """
        connection_params = {
            "request_timeout": request_timeout,
            "verify_certs": verify_certs if url.startswith("https") else False
        }

        # Add authentication if provided
        if username and password:
            connection_params["basic_auth"] = (username, password)

        self.url = url
        self.index_name = index_name
        self.client = Elasticsearch(url, **connection_params)
        logger.debug(f"Elasticsearch client created for {url}, index {index_name}")

    def ping(self) -> bool:
        """Check if Elasticsearch is reachable."""
        try:
            return bool(self.client.ping())
        except Exception as e:
            logger.warning(f"Elasticsearch ping failed: {e}")
            return False

    def ensure_index(self) -> bool:
        """Create the article index if it does not exist."""
        try:
            if self.client.indices.exists(index=self.index_name):
                logger.debug(f"Index {self.index_name} already exists")
                return True
            self.client.indices.create(index=self.index_name, mappings=ARTICLE_MAPPING, settings=INDEX_SETTINGS)
            logger.info(f"Created index: {self.index_name}")
            return True
        except Exception as e:
            logger.error(f"Error creating index {self.index_name}: {e}")
            return False

    def delete_index(self) -> bool:
        try:
            self.client.indices.delete(index=self.index_name, ignore_unavailable=True)
            logger.info(f"Deleted index: {self.index_name}")
            return True
        except Exception as e:
            logger.error(f"Error deleting index {self.index_name}: {e}")
            return False

    def index_articles(self, articles: Sequence[Article]) -> Tuple[bool, int, int]:
        """
        Bulk index articles.

        Articles are keyed by a hash of their URL; repeated URLs in the
        batch are dropped and re-indexing an article overwrites it.

        Args:
            articles: Articles to index

        Returns:
            Tuple of (all succeeded, indexed count, duplicates removed)
        """
        actions = []
        seen = set()
        duplicates = 0

        for article in articles:
            if not article.url:
                logger.debug(f"Skipping article without URL: {article.title[:50]}")
                continue
            doc_id = document_id(article.url)
            if doc_id in seen:
                duplicates += 1
                continue
            seen.add(doc_id)

            source = {
                "id": doc_id,
                "title": article.title,
                "url": article.url,
                "content": article.content,
                "category": article.category,
                "author": article.author,
                "publish_date": article.publish_date.isoformat() if article.publish_date else None,
                "tags": list(article.tags)
            }
            actions.append({"_index": self.index_name, "_id": doc_id, "_source": source})

        if duplicates:
            logger.info(f"Removed {duplicates} duplicate articles before indexing")
        if not actions:
            logger.warning("No articles to index")
            return True, 0, duplicates

        try:
            success, failed = bulk(self.client, actions, chunk_size=500, raise_on_error=False)
        except Exception as e:
            logger.error(f"Error bulk indexing articles: {e}")
            raise

        if failed:
            logger.warning(f"Failed to index {len(failed)} articles")
        logger.info(f"Indexed {success} articles into {self.index_name}")
        return not failed, success, duplicates

    def build_search_body(self,
                          query: str,
                          category: Optional[str] = None,
                          author: Optional[str] = None) -> Dict[str, Any]:
        """Query clause: fuzzy multi_match, wrapped in bool when filters are given."""
        query_clause: Dict[str, Any] = {
            "multi_match": {
                "query": query,
                "fields": SEARCH_FIELDS,
                "type": "best_fields",
                "fuzziness": "AUTO"
            }
        }

        filters = []
        if category:
            filters.append({"term": {"category": category}})
        if author:
            filters.append({"term": {"author": author}})

        if filters:
            query_clause = {
                "bool": {
                    "must": [query_clause],
                    "filter": filters
                }
            }
        return query_clause

    def search(self,
               query: str,
               offset: int = 0,
               limit: int = 10,
               category: Optional[str] = None,
               author: Optional[str] = None) -> Dict[str, Any]:
        """
        Full-text search over articles.

        Args:
            query: Search query (usually the expanded query)
            offset: Pagination offset
            limit: Number of results to return
            category: Optional category filter
            author: Optional author filter

        Returns:
            Dict with "documents" (list of article sources), "total" and
            "highlights" (document id -> highlighted fragments)
        """
        try:
            response = self.client.search(
                index=self.index_name,
                query=self.build_search_body(query, category, author),
                from_=offset,
                size=limit,
                track_total_hits=True,
                highlight={"fields": {"title": {}, "content": {}}}
            )
        except Exception as e:
            logger.error(f"Error in full-text search for '{query}': {e}")
            raise

        hits = response["hits"]
        total = hits.get("total", 0)
        if isinstance(total, dict):
            total = total.get("value", 0)

        documents: List[Dict[str, Any]] = []
        highlights: Dict[str, List[str]] = {}
        for hit in hits.get("hits", []):
            source = dict(hit.get("_source", {}))
            source.setdefault("id", hit.get("_id"))
            source["score"] = float(hit.get("_score") or 0.0)
            documents.append(source)

            fragments = [fragment for values in (hit.get("highlight") or {}).values() for fragment in values]
            if fragments and hit.get("_id"):
                highlights[hit["_id"]] = fragments

        logger.debug(f"Search '{query}': {total} hits")
        return {"documents": documents, "total": int(total), "highlights": highlights}

    def count_all_documents(self) -> int:
        try:
            return int(self.client.count(index=self.index_name)["count"])
        except NotFoundError:
            return 0
        except Exception as e:
            logger.error(f"Error counting documents in {self.index_name}: {e}")
            raise

    def close(self):
        """Close Elasticsearch connection."""
        if hasattr(self, 'client'):
            self.client.close()
