##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
SQLite-based document collection.

This module defines `SQLiteCollection`, which stores JSON records in a table made of
two columns: the record's primary key and the record itself serialized as JSON. Upserts
keep the original row, so `to_array` (which orders by rowid) returns records in the order
they were first inserted.

See also:
    - brewguide.backends.collection_base: Base class
    - brewguide.backends.sqlite.document_store: The collections Brew Guide uses
"""

import json
import logging
import sqlite3
from typing import List, Optional

from brewguide.backends.collection_base import CollectionBase, Record
from brewguide.backends.sqlite.sqlite_connection import SQLiteConnection
from brewguide.exceptions import StorageBackendError


LOG = logging.getLogger(__name__)


class SQLiteCollection(CollectionBase):
    """
    A document collection stored in one SQLite table.

    Attributes:
        name (str): The name of the collection, also used as the table name.
        key_path (str): The record field used as the primary key.
        db_path (str): The path to the SQLite database file.

    Methods:
        create_table_if_not_exists: Create the backing table.
        put: Insert or replace one record.
        bulk_put: Insert or replace many records in a single transaction.
        get: Retrieve a record by primary key.
        to_array: Retrieve every record.
        count: Count the records.
        clear: Remove every record.
        delete: Remove a record by primary key.
        keys: List every primary key.
    """

    def __init__(self, db_path: str, name: str, key_path: str):
        """
        Initialize the collection and create its table.

        Args:
            db_path: The path to the SQLite database file.
            name: The name of the collection.
            key_path: The record field used as the primary key.
        """
        super().__init__(name, key_path)
        self.db_path: str = db_path
        self.create_table_if_not_exists()

    @property
    def _table(self) -> str:
        return f'"{self.name}"'

    def create_table_if_not_exists(self):
        """
        Create the table if it doesn't exist.
        """
        try:
            with SQLiteConnection(self.db_path) as conn:
                conn.execute(f"CREATE TABLE IF NOT EXISTS {self._table} (pk TEXT PRIMARY KEY, data TEXT NOT NULL);")
        except sqlite3.Error as exc:
            raise StorageBackendError(f"Could not create the '{self.name}' collection", cause=exc) from exc

    def _serialize(self, record: Record) -> tuple:
        key = record.get(self.key_path) if isinstance(record, dict) else None
        if key is None or key == "":
            raise StorageBackendError(f"Record for '{self.name}' is missing its '{self.key_path}' field")
        try:
            return str(key), json.dumps(record, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise StorageBackendError(f"Record '{key}' for '{self.name}' is not JSON serializable", cause=exc) from exc

    def _upsert_sql(self) -> str:
        return (
            f"INSERT INTO {self._table} (pk, data) VALUES (?, ?) "
            "ON CONFLICT(pk) DO UPDATE SET data = excluded.data"
        )

    def put(self, record: Record):
        row = self._serialize(record)
        try:
            with SQLiteConnection(self.db_path) as conn:
                conn.execute(self._upsert_sql(), row)
        except sqlite3.Error as exc:
            raise StorageBackendError(f"Could not write '{row[0]}' to '{self.name}'", cause=exc) from exc
        LOG.debug(f"Stored '{row[0]}' in the '{self.name}' collection.")

    def bulk_put(self, records: List[Record]):
        rows = [self._serialize(record) for record in records]
        if not rows:
            return
        try:
            with SQLiteConnection(self.db_path) as conn:
                conn.execute("BEGIN")
                try:
                    conn.executemany(self._upsert_sql(), rows)
                except sqlite3.Error:
                    conn.execute("ROLLBACK")
                    raise
                conn.execute("COMMIT")
        except sqlite3.Error as exc:
            raise StorageBackendError(f"Could not bulk write {len(rows)} records to '{self.name}'", cause=exc) from exc
        LOG.debug(f"Stored {len(rows)} records in the '{self.name}' collection.")

    def get(self, key: str) -> Optional[Record]:
        try:
            with SQLiteConnection(self.db_path) as conn:
                row = conn.execute(f"SELECT data FROM {self._table} WHERE pk = ?", (str(key),)).fetchone()
        except sqlite3.Error as exc:
            raise StorageBackendError(f"Could not read '{key}' from '{self.name}'", cause=exc) from exc
        if row is None:
            return None
        return self._deserialize(row["data"])

    def to_array(self) -> List[Record]:
        try:
            with SQLiteConnection(self.db_path) as conn:
                rows = conn.execute(f"SELECT data FROM {self._table} ORDER BY rowid").fetchall()
        except sqlite3.Error as exc:
            raise StorageBackendError(f"Could not read the '{self.name}' collection", cause=exc) from exc
        return [self._deserialize(row["data"]) for row in rows]

    def count(self) -> int:
        try:
            with SQLiteConnection(self.db_path) as conn:
                return conn.execute(f"SELECT COUNT(*) FROM {self._table}").fetchone()[0]
        except sqlite3.Error as exc:
            raise StorageBackendError(f"Could not count the '{self.name}' collection", cause=exc) from exc

    def clear(self):
        try:
            with SQLiteConnection(self.db_path) as conn:
                conn.execute(f"DELETE FROM {self._table}")
        except sqlite3.Error as exc:
            raise StorageBackendError(f"Could not clear the '{self.name}' collection", cause=exc) from exc

    def delete(self, key: str):
        try:
            with SQLiteConnection(self.db_path) as conn:
                conn.execute(f"DELETE FROM {self._table} WHERE pk = ?", (str(key),))
        except sqlite3.Error as exc:
            raise StorageBackendError(f"Could not delete '{key}' from '{self.name}'", cause=exc) from exc

    def keys(self) -> List[str]:
        try:
            with SQLiteConnection(self.db_path) as conn:
                rows = conn.execute(f"SELECT pk FROM {self._table} ORDER BY rowid").fetchall()
        except sqlite3.Error as exc:
            raise StorageBackendError(f"Could not list the keys of '{self.name}'", cause=exc) from exc
        return [row["pk"] for row in rows]

    def _deserialize(self, data: str) -> Record:
        try:
            return json.loads(data)
        except json.JSONDecodeError as exc:
            raise StorageBackendError(f"A record in '{self.name}' holds invalid JSON", cause=exc) from exc
