"""Shared pytest fixtures for all tests."""

from pathlib import Path
from typing import Generator

import pytest

from gridstore.database import init_database
from gridstore.repositories import ChunkRepository, FileRepository, InMemoryCollection


@pytest.fixture
def files_collection():
    """
    Empty in-memory files collection.
    """
    return InMemoryCollection("fs.files")


@pytest.fixture
def chunks_collection():
    """
    Empty in-memory chunks collection.
    """
    return InMemoryCollection("fs.chunks")


@pytest.fixture
def test_db(tmp_path, monkeypatch) -> Generator[Path, None, None]:
    """
    Create a temporary SQLite database with an initialized "fs" bucket.

    Args:
        tmp_path: pytest tmp_path fixture
        monkeypatch: pytest monkeypatch fixture

    Returns:
        Path to the database file
    """
    db_path = tmp_path / "gridstore.db"
    monkeypatch.setattr("gridstore.database.DATABASE_PATH", str(db_path))
    monkeypatch.setattr("gridstore.config.DATABASE_PATH", str(db_path))
    init_database("fs")
    yield db_path


@pytest.fixture
def sqlite_collections(test_db):
    """
    SQLite-backed (files, chunks) collections for the "fs" bucket.
    """
    return FileRepository("fs"), ChunkRepository("fs")


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample binary file spanning several small chunks.

    Returns:
        Path to the sample file
    """
    file_path = tmp_path / "sample.bin"
    file_path.write_bytes(bytes(range(256)) * 4 + b"tail")
    return file_path
