"""Server-side commands executed against the backing store."""

import hashlib
import sqlite3
from typing import Any, Dict, Mapping, Optional

from common.constants import CHUNKS_SUFFIX, DEFAULT_ROOT
from common.logging_config import get_logger
from gridstore.database import get_db_connection, quote_identifier
from gridstore.exceptions import BackingStoreError

logger = get_logger(__name__)


class CommandRunner:
    """
    Executes command documents. The command name is the first key of the document.
    """

    def __init__(self, database_path: Optional[str] = None):
        self.database_path = database_path
        self._commands = {
            "filemd5": self._filemd5,
        }

    def run_command(self, command: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Run a command document and return its result document.

        Args:
            command: Command document, e.g. {"filemd5": file_id, "root": "fs"}

        Returns:
            Result document with "ok": 1

        Raises:
            BackingStoreError: If the command is unknown or fails
        """
        if not command:
            raise BackingStoreError("Empty command document")

        name = next(iter(command))
        handler = self._commands.get(name)
        if handler is None:
            raise BackingStoreError(f"no such command: '{name}'")

        logger.debug(f"Running command {name} [argument={command[name]}]")
        try:
            return handler(command)
        except sqlite3.Error as e:
            raise BackingStoreError(f"Command {name} failed: {e}") from e

    def _filemd5(self, command: Mapping[str, Any]) -> Dict[str, Any]:
        files_id = command["filemd5"]
        root = command.get("root", DEFAULT_ROOT)
        chunks_name = command.get("chunks", f"{root}.{CHUNKS_SUFFIX}")

        digest = hashlib.md5()
        num_chunks = 0

        with get_db_connection(self.database_path) as conn:
            cursor = conn.execute(
                f'SELECT "data" FROM {quote_identifier(chunks_name)} WHERE "files_id" = ? ORDER BY "n"',
                (files_id,)
            )
            for row in cursor:
                if row["data"] is not None:
                    digest.update(row["data"])
                num_chunks += 1

        return {"md5": digest.hexdigest(), "numChunks": num_chunks, "ok": 1}
