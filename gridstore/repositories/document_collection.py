"""Generic document collection over an SQLite table."""

import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from common.logging_config import get_logger
from gridstore.database import CollectionSchema, get_db_connection, quote_identifier, row_to_dict
from gridstore.exceptions import BackingStoreError, InvalidQueryError

logger = get_logger(__name__)

Query = Optional[Mapping[str, Any]]
SortSpec = Optional[Sequence[Tuple[str, int]]]


class DocumentCollection:
    """
    A named collection of flat documents.

    Predicates are mappings of field to value, matched by equality on every
    field. Sort specs are sequences of (field, 1 | -1).
    """

    def __init__(self, name: str, schema: CollectionSchema, database_path: Optional[str] = None):
        self.name = name
        self.schema = schema
        self.database_path = database_path
        self._table = quote_identifier(name)

    def __repr__(self) -> str:
        return f"DocumentCollection({self.name!r})"

    @contextmanager
    def _connection(self, operation: str):
        try:
            with get_db_connection(self.database_path) as conn:
                yield conn
        except sqlite3.Error as e:
            raise BackingStoreError(f"{operation} on {self.name} failed: {e}") from e
        except OverflowError as e:
            raise InvalidQueryError(f"{operation} on {self.name} failed: {e}") from e

    def _check_field(self, field: str) -> str:
        if field not in self.schema.columns:
            raise InvalidQueryError(f"Unknown field '{field}' for collection {self.name}")
        return quote_identifier(field)

    def _where(self, query: Query) -> Tuple[str, List[Any]]:
        if not query:
            return "", []

        clauses = []
        params = []
        for field, value in query.items():
            column = self._check_field(field)
            if value is None:
                clauses.append(f"{column} IS NULL")
            else:
                clauses.append(f"{column} = ?")
                params.append(value)

        return " WHERE " + " AND ".join(clauses), params

    def _order_by(self, sort: SortSpec) -> str:
        if not sort:
            return ""

        terms = []
        for field, direction in sort:
            column = self._check_field(field)
            if direction == 1:
                terms.append(f"{column} ASC")
            elif direction == -1:
                terms.append(f"{column} DESC")
            else:
                raise InvalidQueryError(f"Sort direction must be 1 or -1, got {direction!r}")
        return " ORDER BY " + ", ".join(terms)

    def find(self, query: Query = None, sort: SortSpec = None, skip: int = 0, limit: int = 0) -> Iterator[Dict[str, Any]]:
        """
        Lazily iterate over matching documents.

        Args:
            query: Field equality predicate (None matches everything)
            sort: Optional sequence of (field, direction)
            skip: Number of leading matches to skip
            limit: Maximum number of documents to return (0 = unlimited)

        Returns:
            Iterator of documents; rows are fetched as the iterator advances

        Raises:
            InvalidQueryError: If the predicate or sort is malformed
        """
        if skip < 0 or limit < 0:
            raise InvalidQueryError("skip and limit must be non-negative")

        where, params = self._where(query)
        sql = f"SELECT * FROM {self._table}{where}{self._order_by(sort)}"
        if limit or skip:
            sql += " LIMIT ? OFFSET ?"
            params = params + [limit if limit else -1, skip]

        return self._iterate(sql, params)

    def _iterate(self, sql: str, params: List[Any]) -> Iterator[Dict[str, Any]]:
        with self._connection("find") as conn:
            cursor = conn.execute(sql, params)
            while True:
                try:
                    row = cursor.fetchone()
                except sqlite3.Error as e:
                    raise BackingStoreError(f"find on {self.name} failed: {e}") from e
                if row is None:
                    break
                yield row_to_dict(row)

    def find_one(self, query: Query = None, sort: SortSpec = None, skip: int = 0) -> Optional[Dict[str, Any]]:
        """
        Return the first matching document, or None.
        """
        cursor = self.find(query, sort=sort, skip=skip, limit=1)
        try:
            return next(cursor, None)
        finally:
            cursor.close()

    def count(self, query: Query = None) -> int:
        where, params = self._where(query)
        with self._connection("count") as conn:
            row = conn.execute(f"SELECT COUNT(*) FROM {self._table}{where}", params).fetchone()
            return row[0]

    def distinct(self, field: str) -> List[Any]:
        """
        Return the distinct values of a field across the collection.
        """
        column = self._check_field(field)
        with self._connection("distinct") as conn:
            rows = conn.execute(f"SELECT DISTINCT {column} FROM {self._table}").fetchall()
            return [row[0] for row in rows]

    def insert(self, document: Mapping[str, Any]) -> None:
        """
        Insert one document.

        Raises:
            InvalidQueryError: If the document carries an unknown field
            BackingStoreError: On duplicate keys or storage failure
        """
        columns = [self._check_field(field) for field in document]
        placeholders = ", ".join("?" for _ in columns)

        with self._connection("insert") as conn:
            conn.execute(
                f"INSERT INTO {self._table} ({', '.join(columns)}) VALUES ({placeholders})",
                list(document.values())
            )
            conn.commit()

    def remove(self, query: Query = None) -> int:
        """
        Remove matching documents.

        Returns:
            Number of documents removed
        """
        where, params = self._where(query)
        with self._connection("remove") as conn:
            cursor = conn.execute(f"DELETE FROM {self._table}{where}", params)
            conn.commit()
            removed = cursor.rowcount

        logger.debug(f"Removed {removed} documents from {self.name} [query={dict(query or {})}]")
        return removed

    def update(self, query: Query, fields: Mapping[str, Any]) -> int:
        """
        Set fields on matching documents.

        Returns:
            Number of documents updated
        """
        if not fields:
            raise InvalidQueryError("update needs at least one field")

        assignments = ", ".join(f"{self._check_field(field)} = ?" for field in fields)
        where, params = self._where(query)

        with self._connection("update") as conn:
            cursor = conn.execute(
                f"UPDATE {self._table} SET {assignments}{where}",
                list(fields.values()) + params
            )
            conn.commit()
            return cursor.rowcount

    def ensure_index(self, fields: Sequence[str], unique: bool = False) -> str:
        """
        Declare a secondary index. Safe to call repeatedly.

        Returns:
            Name of the index
        """
        columns = [self._check_field(field) for field in fields]
        index_name = f"idx_{self.name}_{'_'.join(fields)}"
        kind = "UNIQUE INDEX" if unique else "INDEX"

        with self._connection("ensure_index") as conn:
            conn.execute(
                f"CREATE {kind} IF NOT EXISTS {quote_identifier(index_name)} "
                f"ON {self._table} ({', '.join(columns)})"
            )
            conn.commit()

        return index_name
