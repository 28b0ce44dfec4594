"""Sequential writer that splits a byte stream into fixed-size chunk records."""

import json
import threading
from typing import Any, Dict, Optional

from common.logging_config import get_logger
from common.types import ChunkRecord, FileRecord
from gridstore.checksum import IncrementalChecksumCalculator
from gridstore.config import HASH_ALGORITHM
from gridstore.exceptions import InvalidArgumentError, StreamClosedError
from gridstore.utils import get_current_timestamp

logger = get_logger(__name__)


class GridUploadStream:
    """
    Write side of a chunked object.

    Bytes passed to ``write`` are buffered up to ``chunk_size_bytes`` and each
    full buffer is inserted into the chunks collection as
    ``{"files_id", "n", "data"}``. ``close`` flushes the trailing partial chunk
    and inserts the file record; ``abort`` deletes every chunk written so far.

    The collections only need ``insert_one(document)`` and
    ``delete_many(filter)``. Store failures propagate unchanged. A failure
    during a flush leaves the byte counters advanced although the chunk was
    not persisted, so the stream must not be reused; abort it and upload again
    under a new file id.

    Only ``close``/``abort`` may race each other. ``write`` calls must be
    serialized by the caller.
    """

    def __init__(
        self,
        files_collection,
        chunks_collection,
        file_id: Any,
        filename: str,
        chunk_size_bytes: int,
        metadata: Optional[Dict[str, Any]] = None,
        hash_algorithm: str = HASH_ALGORITHM,
    ):
        if files_collection is None:
            raise InvalidArgumentError("files collection can not be None")
        if chunks_collection is None:
            raise InvalidArgumentError("chunks collection can not be None")
        if file_id is None:
            raise InvalidArgumentError("file id can not be None")
        if filename is None:
            raise InvalidArgumentError("filename can not be None")
        if isinstance(chunk_size_bytes, bool) or not isinstance(chunk_size_bytes, int) or chunk_size_bytes <= 0:
            raise InvalidArgumentError(f"chunk size must be a positive integer, got {chunk_size_bytes!r}")
        _check_metadata(metadata)

        self._files_collection = files_collection
        self._chunks_collection = chunks_collection
        self._file_id = file_id
        self._filename = filename
        self._chunk_size_bytes = chunk_size_bytes
        self._metadata = metadata

        self._checksum = IncrementalChecksumCalculator(hash_algorithm)

        self._buffer: Optional[bytearray] = bytearray(chunk_size_bytes)
        self._buffer_offset = 0
        self._chunk_index = 0
        self._length_in_bytes = 0

        self._close_lock = threading.Lock()
        self._closed = False

    @property
    def file_id(self) -> Any:
        return self._file_id

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def chunk_size_bytes(self) -> int:
        return self._chunk_size_bytes

    @property
    def metadata(self) -> Optional[Dict[str, Any]]:
        return self._metadata

    @property
    def length(self) -> int:
        """Total number of bytes accepted so far."""
        return self._length_in_bytes

    @property
    def closed(self) -> bool:
        with self._close_lock:
            return self._closed

    def get_file_id(self) -> Any:
        return self._file_id

    def write(self, data, offset: int = 0, length: Optional[int] = None) -> None:
        """
        Append ``data[offset:offset + length]`` to the stream.

        Args:
            data: bytes, bytearray or memoryview
            offset: Index of the first byte to take from data
            length: Number of bytes to take; defaults to the rest of data

        Raises:
            StreamClosedError: If the stream was closed or aborted
            InvalidArgumentError: If data is missing or the range is out of bounds
            StoreError: If a chunk insert fails
        """
        self._check_closed()

        if data is None:
            raise InvalidArgumentError("data can not be None")
        try:
            view = memoryview(data).cast("B")
        except TypeError as e:
            raise InvalidArgumentError(f"data must be bytes-like, got {type(data).__name__}") from e

        if length is None:
            length = len(view) - offset if isinstance(offset, int) and not isinstance(offset, bool) else -1
        if (
            isinstance(offset, bool)
            or isinstance(length, bool)
            or not isinstance(offset, int)
            or not isinstance(length, int)
            or offset < 0
            or length < 0
            or offset > len(view)
            or offset + length > len(view)
        ):
            raise InvalidArgumentError(
                f"offset {offset!r} and length {length!r} out of range for {len(view)} bytes"
            )
        if length == 0:
            return

        position = offset
        remaining = length
        while remaining > 0:
            amount = min(remaining, self._chunk_size_bytes - self._buffer_offset)
            self._buffer[self._buffer_offset:self._buffer_offset + amount] = view[position:position + amount]

            self._buffer_offset += amount
            position += amount
            remaining -= amount
            self._length_in_bytes += amount

            if self._buffer_offset == self._chunk_size_bytes:
                self._write_chunk()

    def write_byte(self, value: int) -> None:
        """Append a single byte (0-255)."""
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
            raise InvalidArgumentError(f"byte value must be in range(256), got {value!r}")
        self.write(bytes((value,)))

    def close(self) -> None:
        """
        Flush the trailing chunk and insert the file record.

        Calling close on an already closed stream does nothing.
        """
        with self._close_lock:
            if self._closed:
                return
            self._closed = True

        self._write_chunk()

        file_record = FileRecord(
            file_id=self._file_id,
            length=self._length_in_bytes,
            chunk_size=self._chunk_size_bytes,
            upload_date=get_current_timestamp(),
            md5=self._checksum.finalize(),
            filename=self._filename,
            metadata=self._metadata,
        )
        self._files_collection.insert_one(file_record.to_document())
        self._buffer = None

        logger.info(
            f"Closed upload stream [file_id={self._file_id}, length={self._length_in_bytes}, "
            f"chunks={self._chunk_index}]"
        )

    def abort(self) -> None:
        """
        Delete every chunk written for this file id without creating a file record.

        Raises:
            StreamClosedError: If the stream was already closed or aborted
        """
        with self._close_lock:
            if self._closed:
                raise StreamClosedError("The upload stream has been closed")
            self._closed = True

        self._buffer = None
        deleted = self._chunks_collection.delete_many({"files_id": self._file_id})
        logger.info(f"Aborted upload stream [file_id={self._file_id}, deleted_chunks={deleted}]")

    def _write_chunk(self) -> None:
        if self._buffer_offset == 0:
            return

        data = bytes(self._buffer[:self._buffer_offset])
        chunk = ChunkRecord(files_id=self._file_id, n=self._chunk_index, data=data)
        self._chunks_collection.insert_one(chunk.to_document())
        self._checksum.update(data)

        logger.debug(f"Flushed chunk [file_id={self._file_id}, n={self._chunk_index}, size={len(data)}]")
        self._chunk_index += 1
        self._buffer_offset = 0

    def _check_closed(self) -> None:
        with self._close_lock:
            if self._closed:
                raise StreamClosedError("The upload stream has been closed")

    def __enter__(self) -> "GridUploadStream":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is None:
            self.close()
        elif not self.closed:
            self.abort()
        return False


def _check_metadata(metadata: Optional[Dict[str, Any]]) -> None:
    """Reject metadata that cannot be stored as a JSON document."""
    if metadata is None:
        return
    if not isinstance(metadata, dict):
        raise InvalidArgumentError(f"metadata must be a dict, got {type(metadata).__name__}")
    try:
        json.dumps(metadata)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"metadata is not a JSON document: {e}") from e
