"""
Local disk implementation of the article index.

Stores article metadata as a JSON file on the local filesystem.
Default location: data/articles.json
"""
import json
import logging
import os
from typing import List

from src.article import Article
from src.article_store import ArticleStore
from src.errors import StorageUnavailable
from src.file_utils import load_json_file, save_json_file

logger = logging.getLogger(__name__)

INDEX_VERSION = "1.0"


class LocalDiskArticleStore(ArticleStore):
    """
    Local disk implementation of the article index.

    Every append rewrites the whole file. Fine for a few thousand articles.
    """

    def __init__(self, data_dir: str = "data"):
        """
        Initialize local disk store.

        Args:
            data_dir: Directory for the index file (default: "data")
        """
        super().__init__()
        self.data_dir = data_dir

    def _get_filepath(self) -> str:
        """Get the full file path for the index."""
        return os.path.join(self.data_dir, "articles.json")

    def _read(self) -> List[Article]:
        filepath = self._get_filepath()
        try:
            data = load_json_file(filepath, {"version": INDEX_VERSION, "articles": []})
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to read article index %s: %s", filepath, e)
            raise StorageUnavailable() from e

        # Bare lists are what an index without a version wrapper looks like
        records = data if isinstance(data, list) else data.get("articles", [])
        try:
            return [Article.from_dict(record) for record in records]
        except (KeyError, ValueError, TypeError) as e:
            logger.error("Malformed record in article index %s: %s", filepath, e)
            raise StorageUnavailable() from e

    def _write(self, articles: List[Article]) -> None:
        filepath = self._get_filepath()
        data = {
            "version": INDEX_VERSION,
            "articles": [article.to_dict() for article in articles],
        }
        try:
            save_json_file(filepath, data)
        except OSError as e:
            logger.error("Failed to write article index %s: %s", filepath, e)
            raise StorageUnavailable() from e
