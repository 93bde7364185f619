##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Backend factory for selecting and instantiating key-value backends in Brew Guide.

The factory maintains mappings of backend names and aliases, and raises a clear error
if an unsupported backend is requested. Third-party backends can be added through the
`brewguide.key_value_backends` entry point group.
"""

import os
from typing import Any, Dict

from brewguide.abstracts import BrewGuideBaseFactory
from brewguide.backends.key_value.file_backend import FileKeyValueBackend
from brewguide.backends.key_value.key_value_backend import KeyValueBackend
from brewguide.backends.key_value.memory_backend import MemoryKeyValueBackend
from brewguide.backends.key_value.redis_backend import RedisKeyValueBackend
from brewguide.exceptions import BackendNotSupportedError


class KeyValueBackendFactory(BrewGuideBaseFactory):
    """
    Factory class for managing and instantiating supported key-value backends.

    Attributes:
        _registry (Dict[str, KeyValueBackend]): Maps canonical backend names to backend classes.
        _aliases (Dict[str, str]): Maps alternate names to canonical backend names.

    Methods:
        register: Register a new backend class and optional aliases.
        list_available: Return a list of supported backend names.
        create: Instantiate a backend class by name or alias.
        create_from_config: Instantiate the backend described by the `key_value` config section.
    """

    def _register_builtins(self):
        """
        Register built-in backend implementations.
        """
        self.register("file", FileKeyValueBackend, aliases=["json"])
        self.register("redis", RedisKeyValueBackend, aliases=["rediss"])
        self.register("memory", MemoryKeyValueBackend)

    def _validate_component(self, component_class: Any):
        """
        Ensure registered component is a subclass of KeyValueBackend.

        Args:
            component_class: The class to validate.

        Raises:
            TypeError: If the component does not subclass KeyValueBackend.
        """
        if not issubclass(component_class, KeyValueBackend):
            raise TypeError(f"{component_class} must inherit from KeyValueBackend")

    def _entry_point_group(self) -> str:
        """
        Entry point group used for discovering backend plugins.

        Returns:
            The entry point namespace for Brew Guide key-value backend plugins.
        """
        return "brewguide.key_value_backends"

    def _raise_component_error_class(self, msg: str):
        """
        Raise an appropriate exception for unsupported components.

        Args:
            msg: The message to add to the error being raised.

        Raises:
            BackendNotSupportedError: Always.
        """
        raise BackendNotSupportedError(msg)

    def create_from_config(self, key_value_config: Any, data_dir: str) -> KeyValueBackend:
        """
        Build the backend described by the `key_value` section of the app config.

        Args:
            key_value_config: A namespace with `backend`, `filename` and `url` attributes.
            data_dir: The directory that relative file paths are resolved against.

        Returns:
            A ready to use key-value backend.
        """
        backend = self._aliases.get(key_value_config.backend, key_value_config.backend)
        kwargs: Dict[str, Any] = {}
        if backend == "file":
            kwargs["filepath"] = os.path.join(data_dir, key_value_config.filename)
        elif backend == "redis":
            kwargs["url"] = key_value_config.url
        return self.create(backend, kwargs)


backend_factory = KeyValueBackendFactory()
