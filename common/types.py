"""Shared data type definitions (FileMetadata, SweepResult)."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class FileMetadata:
    """
    Descriptor of one stored version of a logical file.
    """
    id: str
    filename: str
    length: int
    chunk_size: int
    upload_date: datetime
    checksum: Optional[str]

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "FileMetadata":
        upload_date = document["uploadDate"]
        if isinstance(upload_date, str):
            upload_date = datetime.fromisoformat(upload_date)

        return cls(
            id=document["_id"],
            filename=document["filename"],
            length=document["length"],
            chunk_size=document["chunkSize"],
            upload_date=upload_date,
            checksum=document.get("md5"),
        )


@dataclass(frozen=True)
class SweepResult:
    """
    Outcome of one orphaned-chunk sweep.
    """
    swept_file_ids: tuple
    removed_chunks: int
    skipped_pending: int
