"""Chunk collection backed by SQLite."""

import sqlite3
from typing import Any, Dict, List, Optional

from common.logging_config import get_logger
from gridstore.database import build_where_clause, chunks_table, get_db_connection, row_to_dict, validate_bucket_name
from gridstore.exceptions import InvalidArgumentError, StoreError

logger = get_logger(__name__)

CHUNK_FIELDS = ("files_id", "n", "data")


class ChunkRepository:
    """
    The ``<bucket>.chunks`` collection: one row per flushed chunk.
    """

    def __init__(self, bucket_name: str):
        self.bucket_name = validate_bucket_name(bucket_name)
        self._table = chunks_table(bucket_name)

    def insert_one(self, document: Dict[str, Any]) -> None:
        missing = [field for field in CHUNK_FIELDS if field not in document]
        if missing:
            raise InvalidArgumentError(f"Chunk document missing field(s): {', '.join(missing)}")

        files_id = document["files_id"]
        n = document["n"]
        logger.debug(f"Inserting chunk [files_id={files_id}, n={n}]")
        try:
            with get_db_connection() as conn:
                conn.execute(
                    f"INSERT INTO {self._table} (files_id, n, data) VALUES (?, ?, ?)",
                    (files_id, n, sqlite3.Binary(bytes(document["data"])))
                )
                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Failed to insert chunk [files_id={files_id}, n={n}]: {e}", exc_info=True)
            raise StoreError(f"Failed to insert chunk {n} of file {files_id}: {e}") from e

    def delete_many(self, filter: Dict[str, Any]) -> int:
        where, params = build_where_clause(filter, CHUNK_FIELDS)
        logger.debug(f"Deleting chunks [filter={filter}]")
        try:
            with get_db_connection() as conn:
                cursor = conn.execute(f"DELETE FROM {self._table}{where}", params)
                conn.commit()
                deleted = cursor.rowcount
        except sqlite3.Error as e:
            logger.error(f"Failed to delete chunks [filter={filter}]: {e}", exc_info=True)
            raise StoreError(f"Failed to delete chunks: {e}") from e

        logger.info(f"Deleted {deleted} chunks [filter={filter}]")
        return deleted

    def find(self, filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        where, params = build_where_clause(filter, CHUNK_FIELDS)
        try:
            with get_db_connection() as conn:
                rows = conn.execute(
                    f"SELECT files_id, n, data FROM {self._table}{where} ORDER BY files_id, n",
                    params
                ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read chunks: {e}") from e

        documents = [row_to_dict(row) for row in rows]
        for document in documents:
            document["data"] = bytes(document["data"])
        return documents

    def find_one(self, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        documents = self.find(filter)
        return documents[0] if documents else None
