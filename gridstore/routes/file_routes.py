"""File operation API routes."""

from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.responses import StreamingResponse

from common.types import FileMetadata
from gridstore.dependencies import get_grid_store
from gridstore.schemas.common import ErrorResponse
from gridstore.schemas.files import (
    DeleteFilesResponse,
    ExistsResponse,
    FileMetadataResponse,
    ListFilesResponse,
)
from gridstore.services.grid_service import GridStore

router = APIRouter(
    prefix="/files",
    tags=["Files"],
    responses={
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)

id_router = APIRouter(
    prefix="/file-ids",
    tags=["Files"],
    responses={
        404: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)

VERSION_LIMIT = 2**31 - 1
VERSION_DESCRIPTION = "1 is the oldest, -1 the newest, 0 any"


def content_disposition(filename: str) -> str:
    """
    Build an attachment header value that is valid for any filename.

    The plain `filename` parameter carries a printable-ASCII fallback; the
    RFC 5987 `filename*` parameter carries the exact UTF-8 name.
    """
    fallback = "".join(
        c if 32 <= ord(c) < 127 and c not in '"\\' else "_"
        for c in filename
    )
    encoded = quote(filename, safe="")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{encoded}"


def _stream_response(store: GridStore, file_info: FileMetadata) -> StreamingResponse:
    return StreamingResponse(
        store.open_download_stream(file_info),
        media_type="application/octet-stream",
        headers={
            "Content-Disposition": content_disposition(file_info.filename),
            "Content-Length": str(file_info.length),
            "X-File-Id": file_info.id,
        }
    )


@router.post("", response_model=FileMetadataResponse, status_code=status.HTTP_201_CREATED)
def upload_file(
    file: UploadFile = File(...),
    filename: Optional[str] = Form(None),
    chunk_size: Optional[int] = Form(None),
    store: GridStore = Depends(get_grid_store),
):
    """
    Upload a file as a new version.

    Parameters:
        - file: File to upload (multipart/form-data)
        - filename: Remote name (defaults to the uploaded file's name)
        - chunk_size: Bytes per chunk (defaults to the configured size)

    Returns:
        - Metadata of the stored version

    Raises:
        - 400: Missing filename or invalid chunk size
        - 409: Upload collected by the sweeper before it was published
        - 503: Backing store failure
    """
    remote_filename = filename or file.filename
    if not remote_filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A filename is required"
        )

    if chunk_size is not None and chunk_size <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="chunk_size must be positive"
        )

    file_info = store.upload(file.file, remote_filename, chunk_size=chunk_size)
    return FileMetadataResponse.from_metadata(file_info)


@router.get("", response_model=ListFilesResponse)
def list_files(
    filename: Optional[str] = Query(None, description="Only list versions of this filename"),
    store: GridStore = Depends(get_grid_store),
):
    """
    List stored file versions, optionally restricted to one filename.
    """
    files = store.find(filename)
    return ListFilesResponse(files=[FileMetadataResponse.from_metadata(f) for f in files])


@router.get("/{filename:path}/metadata", response_model=FileMetadataResponse)
def get_metadata(
    filename: str,
    version: int = Query(-1, ge=-VERSION_LIMIT, le=VERSION_LIMIT, description=VERSION_DESCRIPTION),
    store: GridStore = Depends(get_grid_store),
):
    """
    Get the metadata of one version of a file.

    Raises:
        - 404: No version at that position
    """
    file_info = store.resolve_target(filename, version)
    return FileMetadataResponse.from_metadata(file_info)


@router.get("/{filename:path}/exists", response_model=ExistsResponse)
def file_exists(filename: str, store: GridStore = Depends(get_grid_store)):
    """
    Check whether any version of a file is stored.
    """
    return ExistsResponse(exists=store.exists(filename))


@router.get("/{filename:path}/download")
def download_file(
    filename: str,
    version: int = Query(-1, ge=-VERSION_LIMIT, le=VERSION_LIMIT, description=VERSION_DESCRIPTION),
    store: GridStore = Depends(get_grid_store),
):
    """
    Download one version of a file.

    Returns:
        - StreamingResponse with file data

    Raises:
        - 404: File not found
    """
    file_info = store.resolve_target(filename, version)
    return _stream_response(store, file_info)


@router.delete("/{filename:path}", response_model=DeleteFilesResponse)
def delete_file(filename: str, store: GridStore = Depends(get_grid_store)):
    """
    Delete every version of a file together with its chunks.

    Returns:
        - deleted_count: Number of versions deleted
        - file_ids: Ids of the deleted versions
    """
    deleted = store.delete(filename)
    return DeleteFilesResponse(deleted_count=len(deleted), file_ids=deleted)


@id_router.get("/{file_id}", response_model=FileMetadataResponse)
def get_metadata_by_id(file_id: str, store: GridStore = Depends(get_grid_store)):
    """
    Get the metadata of one file version by id.

    Raises:
        - 404: File not found
    """
    file_info = store.resolve_target({"_id": file_id}, version=0)
    return FileMetadataResponse.from_metadata(file_info)


@id_router.get("/{file_id}/download")
def download_by_id(file_id: str, store: GridStore = Depends(get_grid_store)):
    """
    Download one file version by id.

    Raises:
        - 404: File not found
    """
    file_info = store.resolve_target({"_id": file_id}, version=0)
    return _stream_response(store, file_info)


@id_router.delete("/{file_id}", response_model=DeleteFilesResponse)
def delete_by_id(file_id: str, store: GridStore = Depends(get_grid_store)):
    """
    Delete one file version and its chunks by id.
    """
    deleted = store.delete_by_id(file_id)
    return DeleteFilesResponse(deleted_count=len(deleted), file_ids=deleted)
