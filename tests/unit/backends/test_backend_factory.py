##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################
"""
Tests for the `backend_factory.py` module.
"""

from types import SimpleNamespace

import pytest
from pytest_mock import MockerFixture

from brewguide.backends.backend_factory import KeyValueBackendFactory
from brewguide.backends.key_value.file_backend import FileKeyValueBackend
from brewguide.backends.key_value.key_value_backend import KeyValueBackend
from brewguide.backends.key_value.memory_backend import MemoryKeyValueBackend
from brewguide.exceptions import BackendNotSupportedError


class DummyRedisBackend(KeyValueBackend):
    def __init__(self, url: str = None):
        super().__init__("redis")
        self.url = url

    def get(self, key):
        pass

    def set(self, key, value):
        pass

    def remove(self, key):
        pass

    def clear(self):
        pass

    def keys(self):
        return []


class TestKeyValueBackendFactory:
    """
    Test suite for the `KeyValueBackendFactory`.

    This class tests that the backend factory correctly registers, resolves and
    instantiates the supported key-value backends.
    """

    @pytest.fixture
    def backend_factory(self, mocker: MockerFixture) -> KeyValueBackendFactory:
        """
        An instance of the `KeyValueBackendFactory` class. Resets on each test.

        Args:
            mocker: PyTest mocker fixture.

        Returns:
            An instance of the `KeyValueBackendFactory` class for testing.
        """
        mocker.patch("brewguide.backends.backend_factory.RedisKeyValueBackend", DummyRedisBackend)
        mocker.patch("brewguide.abstracts.factory.entry_points", return_value=[])
        return KeyValueBackendFactory()

    def test_list_available_backends(self, backend_factory: KeyValueBackendFactory):
        """Test that `list_available` returns the built-in backends."""
        assert set(backend_factory.list_available()) == {"file", "redis", "memory"}

    def test_create_memory_backend(self, backend_factory: KeyValueBackendFactory):
        """Test that `create` builds a backend without arguments."""
        assert isinstance(backend_factory.create("memory"), MemoryKeyValueBackend)

    def test_create_with_alias(self, backend_factory: KeyValueBackendFactory, tmp_path):
        """Test that an alias resolves to its canonical backend."""
        backend = backend_factory.create("json", {"filepath": str(tmp_path / "prefs.json")})
        assert isinstance(backend, FileKeyValueBackend)

    def test_create_unknown_backend(self, backend_factory: KeyValueBackendFactory):
        """Test that an unknown backend raises `BackendNotSupportedError`."""
        with pytest.raises(BackendNotSupportedError, match="not supported"):
            backend_factory.create("indexeddb")

    def test_register_rejects_non_backend(self, backend_factory: KeyValueBackendFactory):
        """Test that only `KeyValueBackend` subclasses can be registered."""
        with pytest.raises(TypeError):
            backend_factory.register("bogus", dict)

    def test_create_from_config_file(self, backend_factory: KeyValueBackendFactory, tmp_path):
        """Test that the file backend is placed inside the data directory."""
        config = SimpleNamespace(backend="file", filename="preferences.json", url=None)
        backend = backend_factory.create_from_config(config, str(tmp_path))
        assert isinstance(backend, FileKeyValueBackend)
        assert backend.filepath == tmp_path / "preferences.json"

    def test_create_from_config_redis(self, backend_factory: KeyValueBackendFactory):
        """Test that the Redis backend receives the configured URL, also through its alias."""
        config = SimpleNamespace(backend="rediss", filename="preferences.json", url="rediss://cache:6380/0")
        backend = backend_factory.create_from_config(config, "/unused")
        assert isinstance(backend, DummyRedisBackend)
        assert backend.url == "rediss://cache:6380/0"
