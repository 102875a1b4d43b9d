"""
Abstract interface for article index backends.

The store owns the authoritative list of submitted articles. All mutations go
through ``append``, which holds a single lock around the
append-then-persist sequence so concurrent submissions never race on the
full-collection rewrite and memory never diverges from the persisted copy.
"""
import logging
import threading
from abc import ABC, abstractmethod
from typing import List

from src.article import Article

logger = logging.getLogger(__name__)


class ArticleStore(ABC):
    """Abstract base class for article index backends."""

    def __init__(self):
        self._articles: List[Article] = []
        self._lock = threading.Lock()

    @abstractmethod
    def _read(self) -> List[Article]:
        """
        Read persisted articles in insertion order.

        Returns:
            List of articles, empty if nothing has been persisted yet.

        Raises:
            StorageUnavailable: if persisted state exists but cannot be read.
        """

    @abstractmethod
    def _write(self, articles: List[Article]) -> None:
        """
        Persist the full collection, replacing what was stored before.

        Args:
            articles: All articles in insertion order.

        Raises:
            StorageUnavailable: if the collection cannot be written.
        """

    def load(self) -> List[Article]:
        """
        Reload the in-memory list from persisted state.

        Returns:
            Loaded articles, most-recent-first.

        Raises:
            StorageUnavailable: if persisted state cannot be read.
        """
        articles = self._read()
        with self._lock:
            self._articles = list(articles)
        logger.info("Loaded %d articles", len(articles))
        return self.list()

    def append(self, article: Article) -> None:
        """
        Add one article and persist the updated collection.

        Only call this after the article's page (and upload, if any) has been
        written, so the listing never points at a missing page.

        Raises:
            StorageUnavailable: if persisting fails. The in-memory list is left
                as it was before the call.
        """
        with self._lock:
            updated = self._articles + [article]
            self._write(updated)
            self._articles = updated
        logger.info("Stored article %d", article.id)

    def list(self) -> List[Article]:
        """Snapshot of stored articles, most-recent-first."""
        with self._lock:
            return list(reversed(self._articles))

    def max_id(self) -> int:
        """Highest stored id, or 0 when the store is empty."""
        with self._lock:
            return max((a.id for a in self._articles), default=0)

    def __len__(self) -> int:
        with self._lock:
            return len(self._articles)
