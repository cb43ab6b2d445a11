"""Collection schemas and connection management for SQLite."""

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Generator, Optional

from common.logging_config import get_logger
from gridstore import config
from gridstore.config import GridStoreSettings

logger = get_logger(__name__)


@dataclass(frozen=True)
class CollectionSchema:
    """
    Column layout of a document collection. The first column is the `_id` primary key.
    """
    columns: Dict[str, str]


FILES_SCHEMA = CollectionSchema(
    columns={
        "_id": "TEXT PRIMARY KEY",
        "filename": "TEXT NOT NULL",
        "length": "INTEGER NOT NULL",
        "chunkSize": "INTEGER NOT NULL",
        "uploadDate": "TEXT NOT NULL",
        "md5": "TEXT",
    },
)

CHUNKS_SCHEMA = CollectionSchema(
    columns={
        "_id": "TEXT PRIMARY KEY",
        "files_id": "TEXT NOT NULL",
        "n": "INTEGER NOT NULL",
        "data": "BLOB",
    },
)

PENDING_SCHEMA = CollectionSchema(
    columns={
        "_id": "TEXT PRIMARY KEY",
        "filename": "TEXT NOT NULL",
        "startedAt": "TEXT NOT NULL",
    },
)


def quote_identifier(name: str) -> str:
    """
    Quote a collection or field name for use as an SQLite identifier.
    """
    return '"' + name.replace('"', '""') + '"'


def create_collection(conn: sqlite3.Connection, name: str, schema: CollectionSchema) -> None:
    """
    Create the table backing a collection if it doesn't exist.
    """
    columns = ",\n                ".join(
        f"{quote_identifier(field)} {column_type}" for field, column_type in schema.columns.items()
    )
    conn.execute(f"""
            CREATE TABLE IF NOT EXISTS {quote_identifier(name)} (
                {columns}
            )
        """)


def init_database(settings: GridStoreSettings, database_path: Optional[str] = None) -> None:
    """
    Initialize database and create the files, chunks and pending collections.
    """
    db_path = Path(database_path or config.DATABASE_PATH)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    with get_db_connection(str(db_path)) as conn:
        create_collection(conn, settings.files_collection_name, FILES_SCHEMA)
        create_collection(conn, settings.chunks_collection_name, CHUNKS_SCHEMA)
        create_collection(conn, settings.pending_collection_name, PENDING_SCHEMA)

        conn.execute(f"""
            CREATE INDEX IF NOT EXISTS {quote_identifier('idx_' + settings.files_collection_name + '_filename_uploadDate')}
            ON {quote_identifier(settings.files_collection_name)}("filename", "uploadDate")
        """)

        conn.commit()

    logger.info(f"Database initialized [path={db_path}] [root={settings.root}]")


@contextmanager
def get_db_connection(database_path: Optional[str] = None) -> Generator[sqlite3.Connection, None, None]:
    """
    Context manager for database connections.
    """
    conn = sqlite3.connect(database_path or config.DATABASE_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def row_to_dict(row: Optional[sqlite3.Row]) -> Optional[dict]:
    """
    Convert a sqlite3.Row to a plain document dict.
    """
    if row is None:
        return None
    return {key: row[key] for key in row.keys()}
