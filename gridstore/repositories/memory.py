"""In-process document collection for embedding and tests."""

import copy
import threading
from typing import Any, Dict, List, Optional

from common.logging_config import get_logger

logger = get_logger(__name__)


def _matches(document: Dict[str, Any], filter: Optional[Dict[str, Any]]) -> bool:
    if not filter:
        return True
    return all(field in document and document[field] == value for field, value in filter.items())


class InMemoryCollection:
    """
    Thread-safe list-backed collection with equality filters.

    Inserted documents are copied, so later mutation by the caller does not
    reach the stored document.
    """

    def __init__(self, name: str):
        self.name = name
        self._documents: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def insert_one(self, document: Dict[str, Any]) -> None:
        stored = copy.deepcopy(document)
        with self._lock:
            self._documents.append(stored)

    def delete_many(self, filter: Dict[str, Any]) -> int:
        with self._lock:
            kept = [doc for doc in self._documents if not _matches(doc, filter)]
            deleted = len(self._documents) - len(kept)
            self._documents = kept

        logger.debug(f"Deleted {deleted} documents from {self.name} [filter={filter}]")
        return deleted

    def find(self, filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        with self._lock:
            return [copy.deepcopy(doc) for doc in self._documents if _matches(doc, filter)]

    def find_one(self, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        documents = self.find(filter)
        return documents[0] if documents else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._documents)
