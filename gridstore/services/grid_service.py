"""Grid store service: chunked upload, download, lookup and deletion of files."""

from datetime import datetime
from pathlib import Path
from typing import Any, BinaryIO, Callable, Dict, Iterator, List, Mapping, Optional, Union

from common.logging_config import get_logger
from common.types import FileMetadata
from gridstore.chunk_codec import build_chunk, chunk_count, validate_chunk
from gridstore.config import GridStoreSettings, load_settings
from gridstore.database import CHUNKS_SCHEMA, FILES_SCHEMA, PENDING_SCHEMA, init_database
from gridstore.exceptions import (
    ChunkNotFoundError,
    ChunkSizeMismatchError,
    GridFileNotFoundError,
    UploadAbortedError,
)
from gridstore.repositories.command_runner import CommandRunner
from gridstore.repositories.document_collection import DocumentCollection
from gridstore.utils import generate_id, to_timestamp, utc_now
from gridstore.version_resolver import FileMetadataResolver

logger = get_logger(__name__)

Selector = Union[str, Mapping[str, Any], None]
DownloadTarget = Union[FileMetadata, str, Mapping[str, Any]]

NEWEST_VERSION = -1


def selector_to_query(selector: Selector) -> Optional[Dict[str, Any]]:
    """
    Turn a selector into a files-collection predicate.

    A string selects by filename, a mapping is used as the predicate and
    None matches every file.
    """
    if selector is None:
        return None
    if isinstance(selector, str):
        return {"filename": selector}
    return dict(selector)


def read_chunk_from(source: BinaryIO, size: int) -> bytes:
    """
    Read up to `size` bytes, looping over short reads until EOF.
    """
    buffer = bytearray()
    while len(buffer) < size:
        data = source.read(size - len(buffer))
        if not data:
            break
        buffer.extend(data)
    return bytes(buffer)


class GridStore:
    """
    Stores files as fixed-size chunk documents plus one metadata document per version.
    """

    def __init__(
        self,
        files: DocumentCollection,
        chunks: DocumentCollection,
        pending: DocumentCollection,
        commands: CommandRunner,
        settings: Optional[GridStoreSettings] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.files = files
        self.chunks = chunks
        self.pending = pending
        self.commands = commands
        self.settings = settings or load_settings()
        self.clock = clock
        self.resolver = FileMetadataResolver(files)

    @classmethod
    def open(
        cls,
        database_path: Optional[str] = None,
        settings: Optional[GridStoreSettings] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> "GridStore":
        """
        Create the collections if needed and build a store over them.
        """
        settings = settings or load_settings()
        init_database(settings, database_path)

        return cls(
            files=DocumentCollection(settings.files_collection_name, FILES_SCHEMA, database_path),
            chunks=DocumentCollection(settings.chunks_collection_name, CHUNKS_SCHEMA, database_path),
            pending=DocumentCollection(settings.pending_collection_name, PENDING_SCHEMA, database_path),
            commands=CommandRunner(database_path),
            settings=settings,
            clock=clock,
        )

    def find(self, selector: Selector = None) -> List[FileMetadata]:
        """
        All metadata records matching the selector, in store order.
        """
        return list(self.resolver.find_all(selector_to_query(selector)))

    def find_one(self, selector: Selector, version: int = NEWEST_VERSION) -> Optional[FileMetadata]:
        """
        Resolve a selector to one version of a file.

        Args:
            selector: Filename, predicate mapping or None
            version: 1 is the oldest, -1 the newest, 0 any match

        Returns:
            FileMetadata or None when no record sits at that version
        """
        return self.resolver.resolve(selector_to_query(selector), version)

    def find_one_by_id(self, file_id: str) -> Optional[FileMetadata]:
        return self.resolver.resolve_by_id(file_id)

    def exists(self, selector: Selector) -> bool:
        return self.files.count(selector_to_query(selector)) > 0

    def exists_by_id(self, file_id: str) -> bool:
        return self.exists({"_id": file_id})

    def upload(self, source: BinaryIO, remote_filename: str, chunk_size: Optional[int] = None) -> FileMetadata:
        """
        Split a binary stream into chunks and store it as a new file version.

        The metadata document is written last; until then the chunks are
        reachable only through the pending record for this upload.

        Args:
            source: Readable binary stream
            remote_filename: Name to store the file under
            chunk_size: Bytes per chunk (defaults to the configured size)

        Returns:
            Metadata of the stored file

        Raises:
            ValueError: If chunk_size is not positive
            BackingStoreError: If the backing store rejects a write
            UploadAbortedError: If the sweeper collected the upload before it was published
        """
        if chunk_size is None:
            chunk_size = self.settings.default_chunk_size
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")

        self.chunks.ensure_index(["files_id", "n"], unique=True)

        file_id = generate_id()
        self.pending.insert({
            "_id": file_id,
            "filename": remote_filename,
            "startedAt": to_timestamp(self.clock()),
        })
        logger.info(f"Starting upload of {remote_filename} [file_id={file_id}] [chunk_size={chunk_size}]")

        length = 0
        n = 0
        try:
            while True:
                data = read_chunk_from(source, chunk_size)
                if not data:
                    break

                self.chunks.insert(build_chunk(file_id, n, data))
                logger.debug(f"Wrote chunk {n} ({len(data)} bytes) [file_id={file_id}]")
                length += len(data)
                n += 1
                self._touch_pending(file_id, remote_filename)

                if len(data) < chunk_size:
                    break
        except Exception as e:
            logger.error(
                f"Upload of {remote_filename} aborted after {n} chunks ({length} bytes) "
                f"[file_id={file_id}]: {e}"
            )
            raise

        self._check_staged(file_id, remote_filename, n)

        result = self.commands.run_command({
            "filemd5": file_id,
            "root": self.settings.root,
            "chunks": self.settings.chunks_collection_name,
        })

        self.files.insert({
            "_id": file_id,
            "filename": remote_filename,
            "length": length,
            "chunkSize": chunk_size,
            "uploadDate": to_timestamp(self.clock()),
            "md5": result["md5"],
        })
        self.pending.remove({"_id": file_id})

        logger.info(f"Uploaded {remote_filename} [file_id={file_id}] ({n} chunks, {length} bytes)")
        return self.find_one_by_id(file_id)

    def _touch_pending(self, file_id: str, remote_filename: str) -> None:
        """
        Refresh the pending record so the sweeper keeps treating the upload as live.

        Raises:
            UploadAbortedError: If the pending record was already swept
        """
        updated = self.pending.update({"_id": file_id}, {"startedAt": to_timestamp(self.clock())})
        if updated == 0:
            raise UploadAbortedError(file_id, remote_filename, "pending record was swept")

    def _check_staged(self, file_id: str, remote_filename: str, expected_chunks: int) -> None:
        if self.pending.count({"_id": file_id}) == 0:
            raise UploadAbortedError(file_id, remote_filename, "pending record was swept")

        stored = self.chunks.count({"files_id": file_id})
        if stored != expected_chunks:
            raise UploadAbortedError(
                file_id, remote_filename, f"expected {expected_chunks} chunks, found {stored}"
            )

    def upload_file(
        self,
        local_path: Union[str, Path],
        remote_filename: Optional[str] = None,
        chunk_size: Optional[int] = None,
    ) -> FileMetadata:
        """
        Upload a local file. The remote name defaults to the local path.
        """
        if remote_filename is None:
            remote_filename = str(local_path)

        with open(local_path, 'rb') as f:
            return self.upload(f, remote_filename, chunk_size=chunk_size)

    def resolve_target(self, target: DownloadTarget, version: int = NEWEST_VERSION) -> FileMetadata:
        """
        Resolve a download target to metadata.

        Raises:
            GridFileNotFoundError: If no file matches
        """
        if isinstance(target, FileMetadata):
            return target

        query = selector_to_query(target)
        file_info = self.resolver.resolve(query, version)
        if file_info is None:
            raise GridFileNotFoundError(query)
        return file_info

    def open_download_stream(self, file_info: FileMetadata) -> Iterator[bytes]:
        """
        Yield the validated payload of each chunk in order.

        Raises:
            ChunkNotFoundError: If a chunk is missing
            ChunkSizeMismatchError: If a chunk has the wrong length
        """
        number_of_chunks = chunk_count(file_info.length, file_info.chunk_size)

        for n in range(number_of_chunks):
            chunk = self.chunks.find_one({"files_id": file_info.id, "n": n})
            if chunk is None:
                raise ChunkNotFoundError(n, file_info.filename)

            yield validate_chunk(
                chunk,
                n,
                number_of_chunks,
                file_info.length,
                file_info.chunk_size,
                file_info.filename,
            )

    def download(self, sink: BinaryIO, target: DownloadTarget, version: int = NEWEST_VERSION) -> FileMetadata:
        """
        Write a file's bytes to a sink, chunk by chunk.

        Args:
            sink: Writable binary stream
            target: FileMetadata, filename or predicate
            version: Version to resolve when target is not FileMetadata

        Returns:
            Metadata of the downloaded file

        Raises:
            GridFileNotFoundError: If the target resolves to nothing
            ChunkNotFoundError: If a chunk is missing; earlier chunks are already written
            ChunkSizeMismatchError: If a chunk has the wrong length; earlier chunks are already written
        """
        file_info = self.resolve_target(target, version)
        logger.info(f"Starting download of {file_info.filename} [file_id={file_info.id}] ({file_info.length} bytes)")

        bytes_written = 0
        try:
            for data in self.open_download_stream(file_info):
                sink.write(data)
                bytes_written += len(data)
        except (ChunkNotFoundError, ChunkSizeMismatchError) as e:
            logger.error(
                f"Download of {file_info.filename} failed at chunk {e.n}: {e}. "
                f"Wrote {bytes_written}/{file_info.length} bytes before failure."
            )
            raise

        logger.info(f"Downloaded {file_info.filename} [file_id={file_info.id}] ({bytes_written} bytes)")
        return file_info

    def download_file(
        self,
        local_path: Union[str, Path],
        target: Optional[DownloadTarget] = None,
        version: int = NEWEST_VERSION,
    ) -> FileMetadata:
        """
        Download to a local file. The target defaults to the local path as a filename.

        The local file is created only once the target has resolved.
        """
        if target is None:
            target = str(local_path)

        file_info = self.resolve_target(target, version)
        with open(local_path, 'wb') as f:
            return self.download(f, file_info)

    def delete(self, selector: Selector) -> List[str]:
        """
        Delete every matching file: its metadata first, then its chunks.

        Not atomic; a failure part way leaves earlier files deleted.

        Returns:
            Ids of the deleted files
        """
        file_ids = [document["_id"] for document in self.files.find(selector_to_query(selector))]

        for file_id in file_ids:
            self.files.remove({"_id": file_id})
            removed = self.chunks.remove({"files_id": file_id})
            logger.info(f"Deleted file [file_id={file_id}] and {removed} chunks")

        return file_ids

    def delete_by_id(self, file_id: str) -> List[str]:
        return self.delete({"_id": file_id})
