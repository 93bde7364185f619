##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Abstract base class for the flat key-value backends used by Brew Guide.

A key-value backend is the small-capacity preference store: every key maps to a
single string. Concrete implementations raise
[`StorageBackendError`][exceptions.StorageBackendError] when the underlying
engine fails; deciding whether to swallow that error is left to
[`KeyValueStore`][backends.key_value.key_value_store.KeyValueStore].
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class KeyValueBackend(ABC):
    """
    Base class for all key-value backends supported in Brew Guide.

    Attributes:
        backend_name (str): The name of the backend (e.g. "file", "redis").

    Methods:
        get_name: Retrieve the name of the backend.
        get: Read a value, or None if the key is missing.
        set: Write a value.
        remove: Delete a key (no-op if missing).
        clear: Delete every key owned by this backend.
        keys: List every key owned by this backend.
        close: Release any held resources.
    """

    def __init__(self, backend_name: str):
        self.backend_name: str = backend_name

    def get_name(self) -> str:
        """
        Get the name of the backend.

        Returns:
            The name of the backend (e.g. redis).
        """
        return self.backend_name

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under `key`.

        Args:
            key: The key to read.

        Returns:
            The stored string, or None if the key does not exist.
        """
        raise NotImplementedError("Subclasses of `KeyValueBackend` must implement a `get` method.")

    @abstractmethod
    def set(self, key: str, value: str):
        """
        Store `value` under `key`, replacing any previous value.

        Args:
            key: The key to write.
            value: The string to store.
        """
        raise NotImplementedError("Subclasses of `KeyValueBackend` must implement a `set` method.")

    @abstractmethod
    def remove(self, key: str):
        """
        Delete `key` if it exists.

        Args:
            key: The key to delete.
        """
        raise NotImplementedError("Subclasses of `KeyValueBackend` must implement a `remove` method.")

    @abstractmethod
    def clear(self):
        """
        Remove every key owned by this backend.
        """
        raise NotImplementedError("Subclasses of `KeyValueBackend` must implement a `clear` method.")

    @abstractmethod
    def keys(self) -> List[str]:
        """
        List every key owned by this backend.

        Returns:
            A list of keys in no particular order.
        """
        raise NotImplementedError("Subclasses of `KeyValueBackend` must implement a `keys` method.")

    def close(self):
        """
        Release any resources held by the backend.
        """
