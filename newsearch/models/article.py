"""
Article records produced by the crawler and consumed by mining and indexing.
"""
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional
import json

from config import ARTICLES_FILE
from logger_config import logger


@dataclass
class Article:
    """One news article from the corpus."""
    title: str = ""
    content: str = ""
    category: str = ""
    author: str = ""
    url: str = ""
    publish_date: Optional[datetime] = None
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Article":
        """
        Build an article from a crawler JSON object.
        Keys are matched case-insensitively; unknown keys are ignored.
        """
        lowered = {str(k).lower(): v for k, v in data.items()}

        publish_date = None
        raw_date = lowered.get("publishdate") or lowered.get("publish_date")
        if raw_date:
            try:
                publish_date = datetime.fromisoformat(str(raw_date).replace("Z", "+00:00"))
            except ValueError:
                logger.debug(f"Unparsable publish date: {raw_date}")

        tags = lowered.get("tags") or []
        return cls(
            title=lowered.get("title") or "",
            content=lowered.get("content") or "",
            category=lowered.get("category") or "",
            author=lowered.get("author") or "",
            url=lowered.get("url") or "",
            publish_date=publish_date,
            tags=[str(t) for t in tags] if isinstance(tags, list) else [],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "category": self.category,
            "author": self.author,
            "url": self.url,
            "publishDate": self.publish_date.isoformat() if self.publish_date else None,
            "tags": list(self.tags),
        }


def load_articles(file_path: str = ARTICLES_FILE) -> List[Article]:
    """
    Load the corpus from a JSON array of article objects.

    Missing, empty or unparsable files give an empty list (logged), so a
    mining run over them produces zero groups instead of failing.

    Args:
        file_path: Path to the corpus JSON file (config.ARTICLES_FILE by default)

    Returns:
        List of articles
    """
    path = Path(file_path)
    if not path.exists():
        logger.warning(f"Articles file not found: {path}")
        return []

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning(f"Could not read articles file {path}: {e}")
        return []

    if not raw.strip():
        logger.warning(f"Articles file is empty: {path}")
        return []

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Invalid JSON in articles file {path}: {e}")
        return []

    if not isinstance(data, list):
        logger.warning(f"Articles file {path} does not contain a JSON array")
        return []

    articles = [Article.from_dict(item) for item in data if isinstance(item, dict)]
    logger.info(f"Loaded {len(articles)} articles from {path}")
    return articles
