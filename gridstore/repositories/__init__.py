"""Document-store collections used by upload streams."""

from gridstore.repositories.chunk_repository import ChunkRepository
from gridstore.repositories.file_repository import FileRepository
from gridstore.repositories.memory import InMemoryCollection

__all__ = [
    "ChunkRepository",
    "FileRepository",
    "InMemoryCollection",
]
