"""File collection backed by SQLite."""

import json
import sqlite3
from datetime import datetime
from typing import Any, Dict, List, Optional

from common.logging_config import get_logger
from gridstore.database import build_where_clause, files_table, get_db_connection, row_to_dict, validate_bucket_name
from gridstore.exceptions import InvalidArgumentError, StoreError

logger = get_logger(__name__)

FILE_FIELDS = ("_id", "length", "chunkSize", "uploadDate", "md5", "filename", "metadata")
REQUIRED_FILE_FIELDS = FILE_FIELDS[:-1]


class FileRepository:
    """
    The ``<bucket>.files`` collection: one row per successfully closed upload.
    """

    def __init__(self, bucket_name: str):
        self.bucket_name = validate_bucket_name(bucket_name)
        self._table = files_table(bucket_name)

    def insert_one(self, document: Dict[str, Any]) -> None:
        missing = [field for field in REQUIRED_FILE_FIELDS if field not in document]
        if missing:
            raise InvalidArgumentError(f"File document missing field(s): {', '.join(missing)}")

        file_id = document["_id"]
        upload_date = document["uploadDate"]
        metadata = document.get("metadata")
        try:
            metadata_json = json.dumps(metadata) if metadata else None
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to encode metadata [file_id={file_id}]: {e}")
            raise StoreError(f"Failed to encode metadata of file {file_id}: {e}") from e

        logger.debug(f"Inserting file [file_id={file_id}, filename={document['filename']}]")
        try:
            with get_db_connection() as conn:
                conn.execute(
                    f"""
                    INSERT INTO {self._table} (_id, length, chunkSize, uploadDate, md5, filename, metadata)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        file_id,
                        document["length"],
                        document["chunkSize"],
                        upload_date.isoformat() if isinstance(upload_date, datetime) else upload_date,
                        document["md5"],
                        document["filename"],
                        metadata_json,
                    )
                )
                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Failed to insert file [file_id={file_id}]: {e}", exc_info=True)
            raise StoreError(f"Failed to insert file {file_id}: {e}") from e

    def delete_many(self, filter: Dict[str, Any]) -> int:
        where, params = build_where_clause(filter, REQUIRED_FILE_FIELDS)
        try:
            with get_db_connection() as conn:
                cursor = conn.execute(f"DELETE FROM {self._table}{where}", params)
                conn.commit()
                deleted = cursor.rowcount
        except sqlite3.Error as e:
            logger.error(f"Failed to delete files [filter={filter}]: {e}", exc_info=True)
            raise StoreError(f"Failed to delete files: {e}") from e

        logger.info(f"Deleted {deleted} files [filter={filter}]")
        return deleted

    def find(self, filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        where, params = build_where_clause(filter, REQUIRED_FILE_FIELDS)
        try:
            with get_db_connection() as conn:
                rows = conn.execute(
                    f"""
                    SELECT _id, length, chunkSize, uploadDate, md5, filename, metadata
                    FROM {self._table}{where}
                    ORDER BY uploadDate
                    """,
                    params
                ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read files: {e}") from e

        return [self._row_to_document(row) for row in rows]

    def find_one(self, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        documents = self.find(filter)
        return documents[0] if documents else None

    @staticmethod
    def _row_to_document(row: sqlite3.Row) -> Dict[str, Any]:
        document = row_to_dict(row)
        document["uploadDate"] = datetime.fromisoformat(document["uploadDate"])
        metadata = document.pop("metadata")
        if metadata is not None:
            document["metadata"] = json.loads(metadata)
        return document
