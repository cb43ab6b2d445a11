"""Configuration settings for the grid store."""

import os
from dataclasses import dataclass

from common.constants import (
    CHUNKS_SUFFIX,
    DEFAULT_CHUNK_SIZE_BYTES,
    DEFAULT_DATABASE_PATH,
    DEFAULT_ORPHAN_GRACE_SECONDS,
    DEFAULT_ROOT,
    DEFAULT_SWEEP_INTERVAL_SECONDS,
    FILES_SUFFIX,
    PENDING_SUFFIX,
)


DATABASE_PATH = os.environ.get("GRIDSTORE_DATABASE_PATH", DEFAULT_DATABASE_PATH)

GRIDSTORE_ROOT = os.environ.get("GRIDSTORE_ROOT", DEFAULT_ROOT)

GRIDSTORE_CHUNK_SIZE = int(os.environ.get("GRIDSTORE_CHUNK_SIZE", str(DEFAULT_CHUNK_SIZE_BYTES)))

GRIDSTORE_HOST = os.environ.get("GRIDSTORE_HOST", "0.0.0.0")

GRIDSTORE_PORT = int(os.environ.get("GRIDSTORE_PORT", "8000"))

ORPHAN_GRACE_SECONDS = int(os.environ.get("GRIDSTORE_ORPHAN_GRACE_SECONDS", str(DEFAULT_ORPHAN_GRACE_SECONDS)))

SWEEP_INTERVAL_SECONDS = int(os.environ.get("GRIDSTORE_SWEEP_INTERVAL_SECONDS", str(DEFAULT_SWEEP_INTERVAL_SECONDS)))


@dataclass(frozen=True)
class GridStoreSettings:
    """
    Collection names and chunking parameters for one grid store root.
    """
    root: str
    files_collection_name: str
    chunks_collection_name: str
    pending_collection_name: str
    default_chunk_size: int

    def __post_init__(self):
        if self.default_chunk_size <= 0:
            raise ValueError(f"default_chunk_size must be positive, got {self.default_chunk_size}")

    @classmethod
    def from_root(cls, root: str = DEFAULT_ROOT, chunk_size: int = DEFAULT_CHUNK_SIZE_BYTES) -> "GridStoreSettings":
        return cls(
            root=root,
            files_collection_name=f"{root}.{FILES_SUFFIX}",
            chunks_collection_name=f"{root}.{CHUNKS_SUFFIX}",
            pending_collection_name=f"{root}.{PENDING_SUFFIX}",
            default_chunk_size=chunk_size,
        )


def load_settings() -> GridStoreSettings:
    """Build settings from the GRIDSTORE_* environment variables."""
    return GridStoreSettings.from_root(GRIDSTORE_ROOT, GRIDSTORE_CHUNK_SIZE)
