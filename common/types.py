"""Shared record type definitions (ChunkRecord, FileRecord)."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ChunkRecord:
    """
    One persisted slice of an uploaded object.
    """
    files_id: Any
    n: int
    data: bytes

    def to_document(self) -> Dict[str, Any]:
        return {"files_id": self.files_id, "n": self.n, "data": self.data}

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "ChunkRecord":
        return cls(
            files_id=document["files_id"],
            n=document["n"],
            data=bytes(document["data"]),
        )


@dataclass(frozen=True)
class FileRecord:
    """
    Metadata describing a completely written object.

    The ``metadata`` key is only emitted in the document when it is non-empty.
    """
    file_id: Any
    length: int
    chunk_size: int
    upload_date: datetime
    md5: str
    filename: str
    metadata: Optional[Dict[str, Any]] = None

    def to_document(self) -> Dict[str, Any]:
        document = {
            "_id": self.file_id,
            "length": self.length,
            "chunkSize": self.chunk_size,
            "uploadDate": self.upload_date,
            "md5": self.md5,
            "filename": self.filename,
        }
        if self.metadata:
            document["metadata"] = self.metadata
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "FileRecord":
        return cls(
            file_id=document["_id"],
            length=document["length"],
            chunk_size=document["chunkSize"],
            upload_date=document["uploadDate"],
            md5=document["md5"],
            filename=document["filename"],
            metadata=document.get("metadata"),
        )
