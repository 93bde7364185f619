##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
This module contains the `BrewGuideDatabase` class, the central access point
for everything Brew Guide persists.

It builds the key-value store, the document store, the migration coordinator
and one manager per collection, and it owns their lifecycle: every cache it
creates is torn down by `close()`.
"""

import logging
import os
from types import TracebackType
from typing import Dict, Type

from brewguide.backends.backend_factory import backend_factory
from brewguide.backends.key_value.key_value_backend import KeyValueBackend
from brewguide.backends.key_value.key_value_store import KeyValueStore
from brewguide.backends.replica import ReplicatedWriter
from brewguide.backends.sqlite.document_store import (
    BREWING_NOTES,
    COFFEE_BEANS,
    CUSTOM_EQUIPMENTS,
    CUSTOM_METHODS,
    DocumentStore,
)
from brewguide.cache.generic_cache import GenericCache
from brewguide.config import Config
from brewguide.db_scripts.entity_managers.brewing_note_manager import BrewingNoteManager
from brewguide.db_scripts.entity_managers.coffee_bean_manager import CoffeeBeanManager
from brewguide.db_scripts.entity_managers.entity_manager import EntityManager
from brewguide.db_scripts.entity_managers.equipment_manager import EquipmentManager
from brewguide.db_scripts.entity_managers.method_manager import MethodManager
from brewguide.db_scripts.migration_coordinator import MigrationCoordinator
from brewguide.events import EventBus


LOG = logging.getLogger(__name__)


class BrewGuideDatabase:
    """
    A class that provides a unified interface to all entity managers in Brew Guide.

    Attributes:
        config (Config): The configuration the stores were built from.
        event_bus (EventBus): Receives every change notification.
        key_value_store (KeyValueStore): The flat store (settings and backup replica).
        document_store (DocumentStore): The system of record.
        coordinator (MigrationCoordinator): Migrates legacy flat-key data on first read.
        writer (ReplicatedWriter): The two-tier writer shared by every manager.
        equipments (EquipmentManager): Custom equipment.
        methods (MethodManager): Custom methods of each equipment.
        coffee_beans (CoffeeBeanManager): The bean inventory.
        brewing_notes (BrewingNoteManager): Brewing notes.

    Methods:
        get_db_type: Retrieve the name of the key-value backend.
        get_db_path: Retrieve the path of the document database.
        invalidate_caches: Drop every manager's cached data.
        close: Tear down every cache and release the key-value backend.
    """

    def __init__(self, config: Config = None, key_value_backend: KeyValueBackend = None, event_bus: EventBus = None):
        """
        Initialize a new BrewGuideDatabase instance.

        Args:
            config: The configuration to use. Defaults to the loaded `app.yaml`.
            key_value_backend: A ready backend to use instead of the configured one.
            event_bus: The bus to publish change notifications on. A new one is created if omitted.
        """
        if config is None:
            from brewguide.config.configfile import CONFIG  # pylint: disable=import-outside-toplevel

            config = CONFIG

        self.config: Config = config
        data_dir = os.path.expanduser(config.storage.data_dir)
        self.event_bus: EventBus = event_bus if event_bus is not None else EventBus()

        if key_value_backend is None:
            key_value_backend = backend_factory.create_from_config(config.key_value, data_dir)
        self.key_value_store = KeyValueStore(key_value_backend, self.event_bus)
        self.document_store = DocumentStore(os.path.join(data_dir, config.storage.database))
        self.coordinator = MigrationCoordinator(self.document_store, self.key_value_store)
        self.writer = ReplicatedWriter(self.document_store, self.key_value_store, self.event_bus)

        methods = MethodManager(self.writer, self.coordinator, self._new_cache(CUSTOM_METHODS))
        self._entity_managers: Dict[str, EntityManager] = {
            "method": methods,
            "equipment": EquipmentManager(self.writer, self.coordinator, methods, self._new_cache(CUSTOM_EQUIPMENTS)),
            "coffee_bean": CoffeeBeanManager(self.writer, self.coordinator, self._new_cache(COFFEE_BEANS)),
            "brewing_note": BrewingNoteManager(self.writer, self.coordinator, self._new_cache(BREWING_NOTES)),
        }
        LOG.debug(f"Brew Guide database ready ({self.get_db_type()} key-value store, {self.get_db_path()}).")

    def _new_cache(self, name: str) -> GenericCache:
        return GenericCache(
            max_size=self.config.cache.max_size,
            default_ttl=self.config.cache.default_ttl,
            enable_lru=self.config.cache.enable_lru,
            name=name,
        )

    def __enter__(self) -> "BrewGuideDatabase":
        return self

    def __exit__(self, exc_type: Type[Exception], exc_value: Exception, traceback: TracebackType):
        self.close()

    @property
    def equipments(self) -> EquipmentManager:
        """
        Get the equipment manager.

        Returns:
            An [`EquipmentManager`][db_scripts.entity_managers.equipment_manager.EquipmentManager] instance.
        """
        return self._entity_managers["equipment"]

    @property
    def methods(self) -> MethodManager:
        """
        Get the method manager.

        Returns:
            A [`MethodManager`][db_scripts.entity_managers.method_manager.MethodManager] instance.
        """
        return self._entity_managers["method"]

    @property
    def coffee_beans(self) -> CoffeeBeanManager:
        """
        Get the coffee bean manager.

        Returns:
            A [`CoffeeBeanManager`][db_scripts.entity_managers.coffee_bean_manager.CoffeeBeanManager] instance.
        """
        return self._entity_managers["coffee_bean"]

    @property
    def brewing_notes(self) -> BrewingNoteManager:
        """
        Get the brewing note manager.

        Returns:
            A [`BrewingNoteManager`][db_scripts.entity_managers.brewing_note_manager.BrewingNoteManager] instance.
        """
        return self._entity_managers["brewing_note"]

    def get_db_type(self) -> str:
        """
        Retrieve the name of the key-value backend.

        Returns:
            The backend name (e.g. file, redis).
        """
        return self.key_value_store.backend_name

    def get_db_path(self) -> str:
        """
        Retrieve the path of the document database.

        Returns:
            The SQLite file path.
        """
        return self.document_store.db_path

    def invalidate_caches(self):
        """
        Drop every manager's cached data so the next reads hit the document store.
        """
        for manager in self._entity_managers.values():
            manager.invalidate()

    def close(self):
        """
        Tear down every manager's cache and release the key-value backend.
        """
        for manager in self._entity_managers.values():
            manager.close()
        self.key_value_store.close()
        LOG.debug("Brew Guide database closed.")
