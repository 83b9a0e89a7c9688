from newsearch.core.search_pipeline import SearchPipeline

__all__ = ["SearchPipeline"]
