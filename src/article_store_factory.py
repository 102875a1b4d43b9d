"""
Factory function for creating article stores.
"""
from src.article_store import ArticleStore
from src.local_disk_article_store import LocalDiskArticleStore
from src.memory_article_store import MemoryArticleStore


def create_article_store(data_dir: str = "data", storage_type: str = "local") -> ArticleStore:
    """
    Create an article store for the configured backend.

    The backend name normally comes from ``Config.storage_type``
    (ARTICLE_STORAGE_TYPE):
    - 'local': LocalDiskArticleStore (default)
    - 'memory': MemoryArticleStore

    Args:
        data_dir: Directory for local disk storage (default: "data")
        storage_type: Backend name (default: "local")

    Returns:
        ArticleStore: Configured article store instance
    """
    if storage_type.lower() == 'memory':
        return MemoryArticleStore()
    else:
        # Default to local disk storage
        return LocalDiskArticleStore(data_dir=data_dir)
