"""Project-wide constants (default chunk size, collection naming)."""

DEFAULT_CHUNK_SIZE_BYTES: int = 256 * 1024  # 256 KiB default chunk size

DEFAULT_ROOT: str = "fs"

FILES_SUFFIX: str = "files"
CHUNKS_SUFFIX: str = "chunks"
PENDING_SUFFIX: str = "uploads"

DEFAULT_DATABASE_PATH: str = "./data/gridstore.db"

DEFAULT_ORPHAN_GRACE_SECONDS: int = 3600
DEFAULT_SWEEP_INTERVAL_SECONDS: int = 6 * 3600
