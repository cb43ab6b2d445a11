"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import Optional

from common.logging_config import get_logger
from cli.models import (
    DeleteCommand,
    ExistsCommand,
    GetCommand,
    ListCommand,
    PutCommand,
    SweepCommand,
)
from cli.utils import format_file_size
from gridstore.exceptions import GridStoreException
from gridstore.services.grid_service import GridStore
from gridstore.services.orphan_sweeper import OrphanSweeper

logger = get_logger(__name__)


_store: Optional[GridStore] = None


def get_store() -> GridStore:
    """
    Get or create global GridStore instance.

    Returns:
        GridStore over the configured database
    """
    global _store
    if _store is None:
        logger.debug("Opening GridStore")
        _store = GridStore.open()
    return _store


def handle_put(cmd: PutCommand, store: Optional[GridStore] = None) -> str:
    """
    Handle 'put' command.

    Args:
        cmd: PutCommand with local path, optional remote name and chunk size
        store: Optional GridStore for dependency injection (testing)

    Returns:
        Success or error message
    """
    if store is None:
        store = get_store()

    local = Path(cmd.local_path)
    if not local.is_file():
        return f"Error: local file not found: {cmd.local_path}"

    remote = cmd.remote_filename or local.name
    logger.info(f"Executing put command: {local} -> {remote}")

    try:
        file_info = store.upload_file(local, remote, chunk_size=cmd.chunk_size)
    except (GridStoreException, OSError) as e:
        logger.error(f"Put failed for {remote}: {e}", exc_info=True)
        return f"Error: {e}"

    return (
        f"Stored: {file_info.filename} (ID: {file_info.id}, "
        f"Size: {format_file_size(file_info.length)}, MD5: {file_info.checksum})"
    )


def handle_get(cmd: GetCommand, store: Optional[GridStore] = None) -> str:
    """
    Handle 'get' command.

    Args:
        cmd: GetCommand with remote name, optional local path and version
        store: Optional GridStore for dependency injection (testing)

    Returns:
        Success or error message
    """
    if store is None:
        store = get_store()

    local = cmd.local_path or Path(cmd.remote_filename).name
    logger.info(f"Executing get command: {cmd.remote_filename} (version {cmd.version}) -> {local}")

    try:
        file_info = store.download_file(local, cmd.remote_filename, version=cmd.version)
    except (GridStoreException, OSError) as e:
        logger.error(f"Get failed for {cmd.remote_filename}: {e}")
        return f"Error: {e}"

    return f"Downloaded: {file_info.filename} -> {local} ({format_file_size(file_info.length)})"


def handle_list(cmd: ListCommand, store: Optional[GridStore] = None) -> str:
    """
    Handle 'list' command.

    Args:
        cmd: ListCommand with optional filename
        store: Optional GridStore for dependency injection (testing)

    Returns:
        Formatted list of file versions
    """
    if store is None:
        store = get_store()

    try:
        files = store.find(cmd.filename)
    except GridStoreException as e:
        logger.error(f"List failed: {e}")
        return f"Error: {e}"

    if not files:
        return "No files found."

    lines = [f"Found {len(files)} file(s):"]
    for file_info in sorted(files, key=lambda f: (f.filename, f.upload_date)):
        lines.append(
            f"  {file_info.filename}  {format_file_size(file_info.length)}  "
            f"{file_info.upload_date.isoformat()}  {file_info.id}"
        )
    return "\n".join(lines)


def handle_delete(cmd: DeleteCommand, store: Optional[GridStore] = None) -> str:
    """
    Handle 'delete' command.

    Args:
        cmd: DeleteCommand with filename
        store: Optional GridStore for dependency injection (testing)

    Returns:
        Deletion summary
    """
    if store is None:
        store = get_store()

    try:
        deleted = store.delete(cmd.filename)
    except GridStoreException as e:
        logger.error(f"Delete failed for {cmd.filename}: {e}")
        return f"Error: {e}"

    if not deleted:
        return f"No files named {cmd.filename}."
    return f"Deleted {len(deleted)} version(s) of {cmd.filename}."


def handle_exists(cmd: ExistsCommand, store: Optional[GridStore] = None) -> str:
    """
    Handle 'exists' command.
    """
    if store is None:
        store = get_store()

    try:
        found = store.exists(cmd.filename)
    except GridStoreException as e:
        logger.error(f"Exists check failed for {cmd.filename}: {e}")
        return f"Error: {e}"

    if found:
        return f"{cmd.filename} exists."
    return f"{cmd.filename} does not exist."


def handle_sweep(cmd: SweepCommand, store: Optional[GridStore] = None) -> str:
    """
    Handle 'sweep' command.

    Args:
        cmd: SweepCommand with optional grace period override
        store: Optional GridStore for dependency injection (testing)

    Returns:
        Sweep summary
    """
    if store is None:
        store = get_store()

    kwargs = {}
    if cmd.grace_seconds is not None:
        kwargs["grace_seconds"] = cmd.grace_seconds

    try:
        result = OrphanSweeper.for_store(store, **kwargs).sweep()
    except GridStoreException as e:
        logger.error(f"Sweep failed: {e}", exc_info=True)
        return f"Error: {e}"

    return (
        f"Swept {len(result.swept_file_ids)} abandoned upload(s), "
        f"removed {result.removed_chunks} chunk(s), "
        f"skipped {result.skipped_pending} in progress."
    )
