"""Shared pytest fixtures for all tests."""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Generator

import pytest

from fileservice.blob_store import BlobStore
from fileservice.database import init_database
from fileservice.ranking_client import TextRankingClient
from fileservice.service_locator import set_blob_store, set_ranking_client
from fileservice.types import FileRecord

NOW = datetime(2024, 6, 1, 12, 0, 0)


@pytest.fixture
def test_db(tmp_path, monkeypatch) -> Generator[Path, None, None]:
    """
    Create a temporary test database for each test.
    """
    db_path = tmp_path / "test.db"
    monkeypatch.setattr("fileservice.database.DATABASE_PATH", str(db_path))
    monkeypatch.setattr("fileservice.config.DATABASE_PATH", str(db_path))
    init_database()
    yield db_path


@pytest.fixture
def blob_store(tmp_path) -> Generator[BlobStore, None, None]:
    """
    Blob store rooted in a temporary directory, installed as the process-wide store.
    """
    store = BlobStore(root=str(tmp_path / "blobs"), signing_key="test-key", base_url="http://testserver")
    set_blob_store(store)
    yield store
    set_blob_store(None)


@pytest.fixture
def offline_ranking() -> Generator[TextRankingClient, None, None]:
    """
    Unconfigured ranking client: every AI path takes its fallback.
    """
    client = TextRankingClient(api_key="")
    set_ranking_client(client)
    yield client
    set_ranking_client(None)


@pytest.fixture
def make_record():
    """
    Factory for FileRecord instances with sensible defaults.
    """
    counter = {"n": 0}

    def factory(**overrides) -> FileRecord:
        counter["n"] += 1
        n = counter["n"]
        values = dict(
            file_id=f"file-{n}",
            owner_id="owner-1",
            owner_email="owner@example.com",
            file_name=f"file{n}.txt",
            original_file_name=f"file{n}.txt",
            content_type="text/plain",
            file_size=100,
            blob_name=f"file{n}.txt",
            container_name="files",
            created_date=NOW - timedelta(minutes=n),
            updated_date=NOW - timedelta(minutes=n),
        )
        values.update(overrides)
        return FileRecord(**values)

    return factory
