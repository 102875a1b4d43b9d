"""
Unit tests for ArticleStore implementations.
"""
import json
import os
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest

from src.article import Article, MediaKind
from src.errors import StorageUnavailable
from tests.unit.test_store_base import BaseStoreTests


class TestLocalDiskArticleStore(BaseStoreTests):
    """Test suite for LocalDiskArticleStore."""

    @pytest.fixture
    def store(self, data_dir):
        """Create a LocalDiskArticleStore instance."""
        from src.local_disk_article_store import LocalDiskArticleStore
        return LocalDiskArticleStore(data_dir=data_dir)

    def test_implements_interface(self, store):
        """Test that LocalDiskArticleStore implements ArticleStore interface."""
        from src.article_store import ArticleStore
        assert isinstance(store, ArticleStore)

    def test_load_empty_by_default(self, store):
        """Test that load returns empty list when no file exists."""
        assert store.load() == []
        assert store.list() == []
        assert store.max_id() == 0

    def test_append_and_list(self, store):
        """Test appending an article and listing it."""
        store.append(Article(id=1, title="Title 1"))
        articles = store.list()
        assert len(articles) == 1
        assert articles[0].id == 1
        assert articles[0].title == "Title 1"

    def test_list_is_most_recent_first(self, store):
        """Test that the listing shows the newest article first."""
        store.append(Article(id=1, title="First"))
        store.append(Article(id=2, title="Second"))
        store.append(Article(id=3, title="Third"))
        assert [a.id for a in store.list()] == [3, 2, 1]

    def test_persists_to_file(self, store, data_dir):
        """Test that articles are persisted to disk in insertion order."""
        store.append(Article(id=1, title="First", attachment="upload", media_kind=MediaKind.IMAGE))
        store.append(Article(id=2, title="Second"))
        articles_file = os.path.join(data_dir, "articles.json")
        assert os.path.exists(articles_file)
        with open(articles_file, "r") as f:
            data = json.load(f)
        assert data["version"] == "1.0"
        assert [a["id"] for a in data["articles"]] == [1, 2]
        assert data["articles"][0]["attachment"] == "upload"
        assert data["articles"][0]["media_kind"] == "image"
        assert data["articles"][1]["media_kind"] == "none"

    def test_loads_from_existing_file(self, data_dir):
        """Test that articles are loaded from an existing file."""
        from src.local_disk_article_store import LocalDiskArticleStore
        articles_file = os.path.join(data_dir, "articles.json")
        with open(articles_file, "w") as f:
            json.dump({"version": "1.0", "articles": [
                {"id": 4, "title": "Four", "attachment": None, "media_kind": "none",
                 "created_at": "2026-01-01T00:00:00Z"},
            ]}, f)
        store = LocalDiskArticleStore(data_dir=data_dir)
        articles = store.load()
        assert len(articles) == 1
        assert articles[0].id == 4
        assert articles[0].created_at == "2026-01-01T00:00:00Z"
        assert store.max_id() == 4

    def test_loads_bare_list_of_id_and_title(self, data_dir):
        """Test that an index holding only id and title records loads."""
        from src.local_disk_article_store import LocalDiskArticleStore
        with open(os.path.join(data_dir, "articles.json"), "w") as f:
            json.dump([{"id": 2, "title": "Two"}, {"id": 1, "title": "One"}], f)
        store = LocalDiskArticleStore(data_dir=data_dir)
        articles = store.load()
        assert {a.id for a in articles} == {1, 2}
        assert all(a.media_kind == MediaKind.NONE for a in articles)

    def test_round_trip_across_instances(self, store, data_dir):
        """Test that a new store instance reproduces the same listing."""
        from src.local_disk_article_store import LocalDiskArticleStore
        for i in range(1, 6):
            store.append(Article(id=i, title=f"Title {i}"))
        reloaded = LocalDiskArticleStore(data_dir=data_dir)
        articles = reloaded.load()
        assert [(a.id, a.title) for a in articles] == [(a.id, a.title) for a in store.list()]

    def test_corrupt_file_raises_storage_unavailable(self, data_dir):
        """Test that unreadable JSON surfaces as StorageUnavailable."""
        from src.local_disk_article_store import LocalDiskArticleStore
        with open(os.path.join(data_dir, "articles.json"), "w") as f:
            f.write("{not json")
        store = LocalDiskArticleStore(data_dir=data_dir)
        with pytest.raises(StorageUnavailable):
            store.load()

    def test_malformed_record_raises_storage_unavailable(self, data_dir):
        """Test that a record without a title surfaces as StorageUnavailable."""
        from src.local_disk_article_store import LocalDiskArticleStore
        with open(os.path.join(data_dir, "articles.json"), "w") as f:
            json.dump({"articles": [{"id": 1}]}, f)
        store = LocalDiskArticleStore(data_dir=data_dir)
        with pytest.raises(StorageUnavailable):
            store.load()

    def test_failed_write_leaves_memory_unchanged(self, store):
        """Test that a failed persist does not add the article in memory."""
        store.append(Article(id=1, title="Kept"))
        with patch("src.local_disk_article_store.save_json_file", side_effect=OSError("disk full")):
            with pytest.raises(StorageUnavailable):
                store.append(Article(id=2, title="Lost"))
        assert [a.id for a in store.list()] == [1]

    def test_no_temp_files_left_behind(self, store, data_dir):
        """Test that writes do not leave temporary files in the data directory."""
        store.append(Article(id=1, title="One"))
        store.append(Article(id=2, title="Two"))
        assert os.listdir(data_dir) == ["articles.json"]

    def test_concurrent_appends_are_all_persisted(self, store, data_dir):
        """Test that concurrent appends neither lose nor corrupt entries."""
        from src.local_disk_article_store import LocalDiskArticleStore
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda i: store.append(Article(id=i, title=f"T{i}")), range(1, 41)))
        reloaded = LocalDiskArticleStore(data_dir=data_dir)
        assert sorted(a.id for a in reloaded.load()) == list(range(1, 41))


class TestMemoryArticleStore:
    """Test suite for MemoryArticleStore."""

    @pytest.fixture
    def store(self):
        """Create a MemoryArticleStore instance."""
        from src.memory_article_store import MemoryArticleStore
        return MemoryArticleStore()

    def test_load_is_always_empty(self, store):
        """Test that load starts from nothing."""
        assert store.load() == []

    def test_append_and_list(self, store):
        """Test appending and listing most-recent-first."""
        store.append(Article(id=1, title="One"))
        store.append(Article(id=2, title="Two"))
        assert [a.id for a in store.list()] == [2, 1]
        assert len(store) == 2

    def test_reload_forgets_articles(self, store):
        """Test that reloading drops the in-memory listing."""
        store.append(Article(id=1, title="One"))
        store.load()
        assert store.list() == []


class TestArticleStoreFactory(BaseStoreTests):
    """Test suite for create_article_store."""

    def test_defaults_to_local_disk(self, data_dir):
        """Test that the local disk store is used without a storage type."""
        from src.article_store_factory import create_article_store
        from src.local_disk_article_store import LocalDiskArticleStore
        store = create_article_store(data_dir=data_dir)
        assert isinstance(store, LocalDiskArticleStore)
        assert store.data_dir == data_dir

    def test_memory_storage_type(self):
        """Test that storage_type='memory' selects the memory store."""
        from src.article_store_factory import create_article_store
        from src.memory_article_store import MemoryArticleStore
        assert isinstance(create_article_store(storage_type="memory"), MemoryArticleStore)
        assert isinstance(create_article_store(storage_type="MEMORY"), MemoryArticleStore)

    def test_environment_is_read_through_config_only(self, data_dir, monkeypatch):
        """Test that ARTICLE_STORAGE_TYPE reaches the factory only via Config."""
        from src.article_store_factory import create_article_store
        from src.config import Config
        from src.local_disk_article_store import LocalDiskArticleStore
        from src.memory_article_store import MemoryArticleStore
        monkeypatch.setenv("ARTICLE_STORAGE_TYPE", "memory")
        assert isinstance(create_article_store(data_dir=data_dir), LocalDiskArticleStore)
        config = Config()
        assert isinstance(create_article_store(storage_type=config.storage_type), MemoryArticleStore)
