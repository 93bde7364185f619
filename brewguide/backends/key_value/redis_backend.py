##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Key-value backend that stores preferences in Redis.

Every key is namespaced with a prefix so that several applications can share
one Redis database and `clear()` only ever touches Brew Guide's own keys.
"""

import logging
from typing import List, Optional

from redis import Redis
from redis.exceptions import RedisError

from brewguide.backends.key_value.key_value_backend import KeyValueBackend
from brewguide.exceptions import StorageBackendError


LOG = logging.getLogger(__name__)


class RedisKeyValueBackend(KeyValueBackend):
    """
    A `KeyValueBackend` backed by a Redis server.

    Attributes:
        backend_name (str): The name of the backend.
        client (Redis): The Redis client used for every operation.
        prefix (str): The namespace prepended to every key.

    Methods:
        get: Read a value, or None if the key is missing.
        set: Write a value.
        remove: Delete a key (no-op if missing).
        clear: Delete every key under the prefix.
        keys: List every key under the prefix, without the prefix.
        close: Close the Redis connection pool.
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        backend_name: str = "redis",
        prefix: str = "brewguide",
        client: Redis = None,
    ):
        """
        Args:
            url: The Redis connection URL. Ignored when `client` is given.
            backend_name: The name of the backend.
            prefix: The namespace prepended to every key.
            client: An already configured Redis client, mostly for tests.
        """
        super().__init__(backend_name)
        self.client: Redis = client if client is not None else Redis.from_url(url, decode_responses=True)
        self.prefix: str = prefix

    def _full_key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    def get(self, key: str) -> Optional[str]:
        try:
            return self.client.get(self._full_key(key))
        except RedisError as exc:
            raise StorageBackendError(f"Redis read of '{key}' failed", cause=exc) from exc

    def set(self, key: str, value: str):
        try:
            self.client.set(self._full_key(key), value)
        except RedisError as exc:
            raise StorageBackendError(f"Redis write of '{key}' failed", cause=exc) from exc

    def remove(self, key: str):
        try:
            self.client.delete(self._full_key(key))
        except RedisError as exc:
            raise StorageBackendError(f"Redis delete of '{key}' failed", cause=exc) from exc

    def clear(self):
        try:
            full_keys = list(self.client.scan_iter(match=f"{self.prefix}:*"))
            if full_keys:
                self.client.delete(*full_keys)
            LOG.debug(f"Removed {len(full_keys)} keys under prefix '{self.prefix}'.")
        except RedisError as exc:
            raise StorageBackendError("Redis clear failed", cause=exc) from exc

    def keys(self) -> List[str]:
        strip = len(self.prefix) + 1
        try:
            return [full_key[strip:] for full_key in self.client.scan_iter(match=f"{self.prefix}:*")]
        except RedisError as exc:
            raise StorageBackendError("Redis key listing failed", cause=exc) from exc

    def close(self):
        self.client.close()
