"""Bucket-level entry points for opening and driving upload streams."""

from typing import Any, BinaryIO, Dict, Optional

from pydantic import ValidationError

from common.logging_config import get_logger
from gridstore.config import BUCKET_NAME, CHUNK_SIZE_BYTES, HASH_ALGORITHM
from gridstore.database import init_database
from gridstore.exceptions import InvalidArgumentError
from gridstore.repositories import ChunkRepository, FileRepository
from gridstore.schemas import UploadOptions
from gridstore.upload_stream import GridUploadStream
from gridstore.utils import generate_file_id

logger = get_logger(__name__)


class GridBucket:
    """
    Pair of files/chunks collections sharing a bucket name.

    When no collections are given, the SQLite repositories for
    ``<bucket_name>.files`` and ``<bucket_name>.chunks`` are created and used.
    """

    def __init__(
        self,
        bucket_name: str = BUCKET_NAME,
        chunk_size_bytes: int = CHUNK_SIZE_BYTES,
        files_collection=None,
        chunks_collection=None,
        hash_algorithm: str = HASH_ALGORITHM,
    ):
        self.bucket_name = bucket_name
        self.chunk_size_bytes = self._validate_options(chunk_size_bytes, None).chunk_size_bytes
        self.hash_algorithm = hash_algorithm

        if files_collection is None or chunks_collection is None:
            init_database(bucket_name)
        self.files_collection = files_collection if files_collection is not None else FileRepository(bucket_name)
        self.chunks_collection = chunks_collection if chunks_collection is not None else ChunkRepository(bucket_name)

    def open_upload_stream(
        self,
        filename: str,
        chunk_size_bytes: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> GridUploadStream:
        return self.open_upload_stream_with_id(generate_file_id(), filename, chunk_size_bytes, metadata)

    def open_upload_stream_with_id(
        self,
        file_id: Any,
        filename: str,
        chunk_size_bytes: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> GridUploadStream:
        options = self._validate_options(
            self.chunk_size_bytes if chunk_size_bytes is None else chunk_size_bytes,
            metadata,
        )
        logger.debug(f"Opening upload stream [file_id={file_id}, filename={filename}]")
        return GridUploadStream(
            self.files_collection,
            self.chunks_collection,
            file_id,
            filename,
            options.chunk_size_bytes,
            options.metadata,
            hash_algorithm=self.hash_algorithm,
        )

    def upload_from_stream(
        self,
        filename: str,
        source: BinaryIO,
        chunk_size_bytes: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Upload the contents of a binary file-like object.

        Returns:
            The generated file id
        """
        file_id = generate_file_id()
        self.upload_from_stream_with_id(file_id, filename, source, chunk_size_bytes, metadata)
        return file_id

    def upload_from_stream_with_id(
        self,
        file_id: Any,
        filename: str,
        source: BinaryIO,
        chunk_size_bytes: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Upload the contents of a binary file-like object under ``file_id``.

        On failure every chunk already written is removed and the exception
        is re-raised.
        """
        stream = self.open_upload_stream_with_id(file_id, filename, chunk_size_bytes, metadata)
        try:
            while True:
                data = source.read(stream.chunk_size_bytes)
                if not data:
                    break
                stream.write(data)
            stream.close()
        except Exception as e:
            logger.error(f"Upload failed for file {file_id}: {e}")
            try:
                self._discard(stream)
            except Exception as cleanup_error:
                logger.error(f"Failed to clean up chunks for file {file_id}: {cleanup_error}", exc_info=True)
            raise

        logger.info(f"Uploaded file {file_id} ({stream.length} bytes)")

    def _discard(self, stream: GridUploadStream) -> None:
        if not stream.closed:
            stream.abort()
        else:
            # close() failed after marking the stream closed, so abort() is no longer allowed.
            deleted = self.chunks_collection.delete_many({"files_id": stream.file_id})
            logger.info(f"Cleaned up {deleted} orphaned chunks [file_id={stream.file_id}]")

    @staticmethod
    def _validate_options(chunk_size_bytes: int, metadata: Optional[Dict[str, Any]]) -> UploadOptions:
        try:
            return UploadOptions(chunk_size_bytes=chunk_size_bytes, metadata=metadata)
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid upload options: {e}") from e
