"""Pydantic schemas for file operation endpoints."""

from typing import List, Optional
from pydantic import BaseModel

from common.types import FileMetadata


class FileMetadataResponse(BaseModel):
    """Response model for one file version."""
    file_id: str
    filename: str
    length: int
    chunk_size: int
    upload_date: str
    checksum: Optional[str] = None

    @classmethod
    def from_metadata(cls, file_info: FileMetadata) -> "FileMetadataResponse":
        return cls(
            file_id=file_info.id,
            filename=file_info.filename,
            length=file_info.length,
            chunk_size=file_info.chunk_size,
            upload_date=file_info.upload_date.isoformat(),
            checksum=file_info.checksum,
        )


class ListFilesResponse(BaseModel):
    """Response model for file listing."""
    files: List[FileMetadataResponse]


class ExistsResponse(BaseModel):
    """Response model for existence checks."""
    exists: bool


class DeleteFilesResponse(BaseModel):
    """Response model for file deletion."""
    deleted_count: int
    file_ids: List[str]
