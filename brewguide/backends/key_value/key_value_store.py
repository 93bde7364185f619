##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
The uniform adapter that the rest of Brew Guide uses to talk to whichever
key-value backend is configured.

Read operations (`get`, `keys`) and housekeeping (`remove`, `clear`) fail soft:
they log and return an empty result. `set` fails loud since a lost write must
be visible to the caller, and it re-reads what it wrote so a following `get`
is guaranteed to observe the new value. Successful writes are announced on the
event bus.
"""

import json
import logging
from typing import Any, List, Optional

from brewguide.backends.key_value.key_value_backend import KeyValueBackend
from brewguide.events import EventBus
from brewguide.exceptions import StorageBackendError


LOG = logging.getLogger(__name__)


class KeyValueStore:
    """
    Small-capacity string store used for scalar settings and as the backup
    replica of every entity collection.

    Attributes:
        backend (KeyValueBackend): The backend holding the data.
        event_bus (EventBus): Where write notifications are published. May be None.

    Methods:
        get: Read a value; None if missing or unreadable.
        set: Write a value and verify it is readable.
        remove: Delete a key.
        clear: Delete every key.
        keys: List every key.
        get_sync: Bootstrap-safe read that never raises and publishes nothing.
        set_sync: Bootstrap-safe write that never raises and publishes nothing.
        get_json: Read a value and decode it as JSON.
        set_json: Encode a value as JSON and write it.
        close: Release the backend.
    """

    def __init__(self, backend: KeyValueBackend, event_bus: EventBus = None):
        """
        Args:
            backend: The backend to adapt.
            event_bus: The bus receiving `storage:changed` and `data:changed` events.
        """
        self.backend: KeyValueBackend = backend
        self.event_bus: EventBus = event_bus

    @property
    def backend_name(self) -> str:
        """The name of the underlying backend."""
        return self.backend.get_name()

    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under `key`.

        Args:
            key: The key to read.

        Returns:
            The stored string, or None if the key is missing or the read failed.
        """
        try:
            return self.backend.get(key)
        except Exception as exc:  # pylint: disable=broad-except
            LOG.error(f"Failed to read key '{key}' from the {self.backend_name} store: {exc}")
            return None

    def set(self, key: str, value: str, notify: bool = True):
        """
        Write `value` under `key`. The value is read back once the write
        returns; if it does not match, the write is retried once.

        Args:
            key: The key to write.
            value: The string to store.
            notify: Whether to publish change events after the write.

        Raises:
            StorageBackendError: If the backend fails or the value cannot be
                read back after the retry.
        """
        try:
            self.backend.set(key, value)
            if self.backend.get(key) != value:
                LOG.warning(f"Value for key '{key}' did not read back correctly. Retrying the write.")
                self.backend.set(key, value)
                if self.backend.get(key) != value:
                    raise StorageBackendError(f"Value for key '{key}' could not be verified after writing it")
        except StorageBackendError:
            LOG.error(f"Failed to write key '{key}' to the {self.backend_name} store.")
            raise
        except Exception as exc:
            LOG.error(f"Failed to write key '{key}' to the {self.backend_name} store: {exc}")
            raise StorageBackendError(f"Failed to write key '{key}'", cause=exc) from exc

        if notify and self.event_bus is not None:
            self.event_bus.notify_storage_changed(key, source="internal")
            self.event_bus.notify_data_changed(key)

    def remove(self, key: str):
        """
        Delete `key`. Failures are logged, not raised.

        Args:
            key: The key to delete.
        """
        try:
            self.backend.remove(key)
        except Exception as exc:  # pylint: disable=broad-except
            LOG.error(f"Failed to remove key '{key}' from the {self.backend_name} store: {exc}")

    def clear(self):
        """
        Delete every key. Failures are logged, not raised.
        """
        try:
            self.backend.clear()
        except Exception as exc:  # pylint: disable=broad-except
            LOG.error(f"Failed to clear the {self.backend_name} store: {exc}")

    def keys(self) -> List[str]:
        """
        List every key.

        Returns:
            The keys, or an empty list if they could not be listed.
        """
        try:
            return self.backend.keys()
        except Exception as exc:  # pylint: disable=broad-except
            LOG.error(f"Failed to list keys of the {self.backend_name} store: {exc}")
            return []

    def get_sync(self, key: str) -> Optional[str]:
        """
        Read `key` without any side effects. Intended for start-up code that
        runs before anything else can write.

        Args:
            key: The key to read.

        Returns:
            The stored string, or None.
        """
        try:
            return self.backend.get(key)
        except Exception:  # pylint: disable=broad-except
            return None

    def set_sync(self, key: str, value: str) -> bool:
        """
        Write `key` without verification or notifications. Intended for
        start-up code that runs before anything else can write.

        Args:
            key: The key to write.
            value: The string to store.

        Returns:
            True if the backend accepted the write, False otherwise.
        """
        try:
            self.backend.set(key, value)
            return True
        except Exception as exc:  # pylint: disable=broad-except
            LOG.debug(f"Synchronous write of key '{key}' failed: {exc}")
            return False

    def get_json(self, key: str, default: Any = None) -> Any:
        """
        Read `key` and decode it as JSON.

        Args:
            key: The key to read.
            default: What to return if the key is missing or not valid JSON.

        Returns:
            The decoded value or `default`.
        """
        raw = self.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            LOG.error(f"Key '{key}' does not hold valid JSON: {exc}")
            return default

    def set_json(self, key: str, value: Any, notify: bool = True):
        """
        Encode `value` as JSON and write it under `key`.

        Args:
            key: The key to write.
            value: Any JSON-serializable value.
            notify: Whether to publish change events after the write.

        Raises:
            StorageBackendError: If the value cannot be encoded or written.
        """
        try:
            encoded = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise StorageBackendError(f"Value for key '{key}' is not JSON serializable", cause=exc) from exc
        self.set(key, encoded, notify=notify)

    def close(self):
        """Release the backend."""
        self.backend.close()
