"""
In-memory implementation of the article index.

Nothing is persisted: the listing starts empty on every restart while the
rendered pages stay on disk.
"""
from typing import List

from src.article import Article
from src.article_store import ArticleStore


class MemoryArticleStore(ArticleStore):
    """Article index kept only in process memory."""

    def _read(self) -> List[Article]:
        return []

    def _write(self, articles: List[Article]) -> None:
        pass
