##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
The document store: every structured collection Brew Guide persists, backed by
one SQLite database file. Once migration has completed this is the system of
record for all entities.
"""

import logging
from typing import Dict, List

from brewguide.backends.sqlite.sqlite_collection import SQLiteCollection


LOG = logging.getLogger(__name__)

COFFEE_BEANS = "coffeeBeans"
BREWING_NOTES = "brewingNotes"
CUSTOM_EQUIPMENTS = "customEquipments"
CUSTOM_METHODS = "customMethods"
SETTINGS = "settings"

# Collection name -> primary key field
COLLECTION_SCHEMA: Dict[str, str] = {
    COFFEE_BEANS: "id",
    BREWING_NOTES: "id",
    CUSTOM_EQUIPMENTS: "id",
    CUSTOM_METHODS: "equipmentId",
    SETTINGS: "key",
}


class DocumentStore:
    """
    Groups the SQLite collections used by Brew Guide.

    Attributes:
        db_path (str): The path to the SQLite database file.
        coffee_beans (SQLiteCollection): Coffee beans keyed by `id`.
        brewing_notes (SQLiteCollection): Brewing notes keyed by `id`.
        custom_equipments (SQLiteCollection): Custom equipment keyed by `id`.
        custom_methods (SQLiteCollection): `{equipmentId, methods}` keyed by `equipmentId`.
        settings (SQLiteCollection): `{key, value}` settings keyed by `key`.

    Methods:
        collection: Look up a collection by name.
        collection_names: List every collection name.
        get_setting: Read a value from the settings collection.
        put_setting: Write a value to the settings collection.
        clear_all: Clear every collection.
    """

    def __init__(self, db_path: str):
        """
        Open (and create if needed) every collection in `db_path`.

        Args:
            db_path: The path to the SQLite database file.
        """
        self.db_path: str = db_path
        self._collections: Dict[str, SQLiteCollection] = {
            name: SQLiteCollection(db_path, name, key_path) for name, key_path in COLLECTION_SCHEMA.items()
        }
        self.coffee_beans = self._collections[COFFEE_BEANS]
        self.brewing_notes = self._collections[BREWING_NOTES]
        self.custom_equipments = self._collections[CUSTOM_EQUIPMENTS]
        self.custom_methods = self._collections[CUSTOM_METHODS]
        self.settings = self._collections[SETTINGS]
        LOG.debug(f"Opened document store at '{db_path}'.")

    def collection(self, name: str) -> SQLiteCollection:
        """
        Look up a collection by name.

        Args:
            name: The collection name (e.g. `customEquipments`).

        Returns:
            The collection.

        Raises:
            KeyError: If no collection has that name.
        """
        return self._collections[name]

    def collection_names(self) -> List[str]:
        """
        List every collection name.

        Returns:
            The collection names in schema order.
        """
        return list(self._collections.keys())

    def get_setting(self, key: str, default: str = None) -> str:
        """
        Read a value from the settings collection.

        Args:
            key: The setting name.
            default: What to return if the setting is missing.

        Returns:
            The stored value or `default`.
        """
        record = self.settings.get(key)
        if record is None:
            return default
        return record.get("value", default)

    def put_setting(self, key: str, value: str):
        """
        Write a value to the settings collection.

        Args:
            key: The setting name.
            value: The value to store.
        """
        self.settings.put({"key": key, "value": value})

    def clear_all(self):
        """
        Clear every collection.
        """
        for collection in self._collections.values():
            collection.clear()
