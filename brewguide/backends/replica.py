##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Two-tier writes: the document store is the system of record and the key-value
store holds a backup replica of each collection under its legacy flat key.

Replication is one-directional. Records flow from the document store to the
backup and nothing in Brew Guide ever reads the backup back into the record,
apart from the one-shot migration. The backup exists so that an older build of
the app that never migrated still finds consistent data.
"""

import logging
from typing import Any, List

from brewguide.backends.collection_base import Record
from brewguide.backends.key_value.key_value_store import KeyValueStore
from brewguide.backends.sqlite.document_store import DocumentStore
from brewguide.events import EventBus
from brewguide.exceptions import StorageBackendError


LOG = logging.getLogger(__name__)


class ReplicatedWriter:
    """
    Writes records to the document store, then mirrors the affected collection
    to the key-value store.

    A failure writing the record raises. A failure writing the backup is logged
    and swallowed since the system of record already holds the data.

    Attributes:
        document_store (DocumentStore): The system of record.
        key_value_store (KeyValueStore): The backup replica.
        event_bus (EventBus): Receives a `data:changed` event per successful write. May be None.

    Methods:
        put: Upsert one record and mirror the collection.
        delete: Delete one record and mirror the collection.
        replace_all: Replace every record of a collection and mirror it.
        drop: Delete one record and its whole backup key.
        mirror: Write only the backup.
        notify: Publish a `data:changed` event.
        remove_backup: Drop a backup key.
    """

    def __init__(self, document_store: DocumentStore, key_value_store: KeyValueStore, event_bus: EventBus = None):
        self.document_store: DocumentStore = document_store
        self.key_value_store: KeyValueStore = key_value_store
        self.event_bus: EventBus = event_bus

    def put(self, collection_name: str, record: Record, backup_key: str, backup_value: Any, notify: bool = True):
        """
        Upsert `record` into `collection_name` and store `backup_value` under `backup_key`.

        Args:
            collection_name: The document collection to write.
            record: The record to upsert.
            backup_key: The flat key holding the backup copy.
            backup_value: The JSON-serializable backup (usually the full collection).
            notify: Whether to publish a `data:changed` event.

        Raises:
            StorageBackendError: If the document store write fails.
        """
        self.document_store.collection(collection_name).put(record)
        self.mirror(backup_key, backup_value, notify=notify)
        self.notify(collection_name, notify)

    def delete(self, collection_name: str, key: str, backup_key: str, backup_value: Any, notify: bool = True):
        """
        Delete `key` from `collection_name` and store `backup_value` under `backup_key`.

        Args:
            collection_name: The document collection to write.
            key: The primary key to delete.
            backup_key: The flat key holding the backup copy.
            backup_value: The JSON-serializable backup after the deletion.
            notify: Whether to publish a `data:changed` event.

        Raises:
            StorageBackendError: If the document store write fails.
        """
        self.document_store.collection(collection_name).delete(key)
        self.mirror(backup_key, backup_value, notify=notify)
        self.notify(collection_name, notify)

    def replace_all(self, collection_name: str, records: List[Record], backup_key: str, notify: bool = True):
        """
        Replace the contents of `collection_name` with `records` and mirror them
        under `backup_key`.

        Args:
            collection_name: The document collection to write.
            records: The new contents of the collection.
            backup_key: The flat key holding the backup copy.
            notify: Whether to publish a `data:changed` event.

        Raises:
            StorageBackendError: If the document store write fails.
        """
        collection = self.document_store.collection(collection_name)
        collection.clear()
        collection.bulk_put(records)
        self.mirror(backup_key, records, notify=notify)
        self.notify(collection_name, notify)

    def drop(self, collection_name: str, key: str, backup_key: str, notify: bool = True):
        """
        Delete `key` from `collection_name` and remove the backup stored under `backup_key`.

        Args:
            collection_name: The document collection to write.
            key: The primary key to delete.
            backup_key: The flat key to remove.
            notify: Whether to publish a `data:changed` event.

        Raises:
            StorageBackendError: If the document store write fails.
        """
        self.document_store.collection(collection_name).delete(key)
        self.remove_backup(backup_key)
        self.notify(collection_name, notify)

    def mirror(self, backup_key: str, backup_value: Any, notify: bool = True) -> bool:
        """
        Write `backup_value` under `backup_key` in the key-value store.

        Args:
            backup_key: The flat key holding the backup copy.
            backup_value: The JSON-serializable backup.
            notify: Whether the key-value store should publish its change events.

        Returns:
            True if the backup was written, False if it failed.
        """
        try:
            self.key_value_store.set_json(backup_key, backup_value, notify=notify)
            return True
        except StorageBackendError as exc:
            LOG.warning(f"Backup copy '{backup_key}' was not updated: {exc}")
            return False

    def remove_backup(self, backup_key: str):
        """
        Drop the backup stored under `backup_key`.

        Args:
            backup_key: The flat key to remove.
        """
        self.key_value_store.remove(backup_key)

    def notify(self, collection_name: str, notify: bool = True):
        """
        Publish a `data:changed` event for `collection_name`.

        Args:
            collection_name: The collection that changed.
            notify: Publish nothing when False.
        """
        if notify and self.event_bus is not None:
            self.event_bus.notify_data_changed(collection_name)
