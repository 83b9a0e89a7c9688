"""
Search engine storage.
"""
from newsearch.stores.elasticsearch_store import ElasticsearchStore, document_id

__all__ = ["ElasticsearchStore", "document_id"]
