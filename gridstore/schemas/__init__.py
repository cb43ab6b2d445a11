"""Pydantic schemas for API requests and responses."""

from gridstore.schemas.files import (
    DeleteFilesResponse,
    ExistsResponse,
    FileMetadataResponse,
    ListFilesResponse,
)
from gridstore.schemas.common import ErrorResponse

__all__ = [
    "DeleteFilesResponse",
    "ExistsResponse",
    "FileMetadataResponse",
    "ListFilesResponse",
    "ErrorResponse"
]
