"""Database schema and connection management for SQLite."""

import re
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, Iterable, List, Optional, Tuple

from common.constants import CHUNKS_COLLECTION_SUFFIX, FILES_COLLECTION_SUFFIX
from gridstore.config import DATABASE_PATH
from gridstore.exceptions import InvalidArgumentError

_BUCKET_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")


def validate_bucket_name(bucket_name: str) -> str:
    if not isinstance(bucket_name, str) or not _BUCKET_NAME_PATTERN.match(bucket_name):
        raise InvalidArgumentError(f"Invalid bucket name: {bucket_name!r}")
    return bucket_name


def files_table(bucket_name: str) -> str:
    """
    Quoted table name of the files collection for a bucket (e.g. "fs.files").
    """
    return f'"{validate_bucket_name(bucket_name)}.{FILES_COLLECTION_SUFFIX}"'


def chunks_table(bucket_name: str) -> str:
    """
    Quoted table name of the chunks collection for a bucket (e.g. "fs.chunks").
    """
    return f'"{validate_bucket_name(bucket_name)}.{CHUNKS_COLLECTION_SUFFIX}"'


def init_database(bucket_name: str) -> None:
    """
    Initialize database and create the bucket's tables if they don't exist.
    """
    validate_bucket_name(bucket_name)

    db_path = Path(DATABASE_PATH)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    with get_db_connection() as conn:
        cursor = conn.cursor()

        cursor.execute(f"""
            CREATE TABLE IF NOT EXISTS {files_table(bucket_name)} (
                _id TEXT PRIMARY KEY,
                length INTEGER NOT NULL,
                chunkSize INTEGER NOT NULL,
                uploadDate TEXT NOT NULL,
                md5 TEXT NOT NULL,
                filename TEXT NOT NULL,
                metadata TEXT
            )
        """)

        cursor.execute(f"""
            CREATE TABLE IF NOT EXISTS {chunks_table(bucket_name)} (
                files_id TEXT NOT NULL,
                n INTEGER NOT NULL,
                data BLOB NOT NULL,
                UNIQUE(files_id, n)
            )
        """)

        conn.commit()


@contextmanager
def get_db_connection() -> Generator[sqlite3.Connection, None, None]:
    """
    Context manager for database connections.
    """
    conn = sqlite3.connect(DATABASE_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def build_where_clause(filter: Optional[Dict[str, Any]], allowed_fields: Iterable[str]) -> Tuple[str, List[Any]]:
    """
    Translate an equality filter document into a SQL WHERE clause.

    Args:
        filter: Mapping of field name to required value, or None to match everything
        allowed_fields: Column names the filter may reference

    Returns:
        Tuple of (clause, parameters); clause is empty when filter is empty

    Raises:
        InvalidArgumentError: If the filter names an unknown field
    """
    if not filter:
        return "", []

    allowed = set(allowed_fields)
    unknown = [field for field in filter if field not in allowed]
    if unknown:
        raise InvalidArgumentError(f"Unsupported filter field(s): {', '.join(sorted(unknown))}")

    conditions = [f'"{field}" = ?' for field in filter]
    return " WHERE " + " AND ".join(conditions), list(filter.values())


def row_to_dict(row: Optional[sqlite3.Row]) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    return {key: row[key] for key in row.keys()}
