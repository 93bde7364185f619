##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
This module defines the abstract base class for every document collection in Brew Guide.

A collection stores JSON-shaped records (plain dictionaries) indexed by one of their
own fields, the collection's `key_path`. All concrete collections (e.g. SQLite tables)
must inherit from this class and implement its abstract methods.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional


Record = Dict


class CollectionBase(ABC):
    """
    Base class for all document collections supported in Brew Guide.

    Attributes:
        name (str): The name of the collection (e.g. `customEquipments`).
        key_path (str): The record field used as the primary key (e.g. `id`).

    Methods:
        put: Insert or replace one record.
        bulk_put: Insert or replace many records in one step.
        get: Retrieve a record by primary key.
        to_array: Retrieve every record.
        count: Count the records.
        clear: Remove every record.
        delete: Remove a record by primary key.
        keys: List every primary key.
    """

    def __init__(self, name: str, key_path: str):
        self.name: str = name
        self.key_path: str = key_path

    @abstractmethod
    def put(self, record: Record):
        """
        Insert `record`, replacing any existing record with the same primary key.

        Args:
            record: The record to store. Must contain the `key_path` field.
        """
        raise NotImplementedError("Subclasses of `CollectionBase` must implement a `put` method.")

    @abstractmethod
    def bulk_put(self, records: List[Record]):
        """
        Upsert every record in `records`. Records sharing a primary key with an
        existing one replace it; within the batch, a later record wins.

        Args:
            records: The records to store.
        """
        raise NotImplementedError("Subclasses of `CollectionBase` must implement a `bulk_put` method.")

    @abstractmethod
    def get(self, key: str) -> Optional[Record]:
        """
        Retrieve the record whose primary key is `key`.

        Args:
            key: The primary key.

        Returns:
            The record if found, None otherwise.
        """
        raise NotImplementedError("Subclasses of `CollectionBase` must implement a `get` method.")

    @abstractmethod
    def to_array(self) -> List[Record]:
        """
        Retrieve every record in the collection.

        Returns:
            A list of records, stable in insertion order.
        """
        raise NotImplementedError("Subclasses of `CollectionBase` must implement a `to_array` method.")

    @abstractmethod
    def count(self) -> int:
        """
        Count the records in the collection.

        Returns:
            The number of records.
        """
        raise NotImplementedError("Subclasses of `CollectionBase` must implement a `count` method.")

    @abstractmethod
    def clear(self):
        """
        Remove every record in the collection.
        """
        raise NotImplementedError("Subclasses of `CollectionBase` must implement a `clear` method.")

    @abstractmethod
    def delete(self, key: str):
        """
        Remove the record whose primary key is `key`, if any.

        Args:
            key: The primary key.
        """
        raise NotImplementedError("Subclasses of `CollectionBase` must implement a `delete` method.")

    @abstractmethod
    def keys(self) -> List[str]:
        """
        List every primary key in the collection.

        Returns:
            A list of primary keys.
        """
        raise NotImplementedError("Subclasses of `CollectionBase` must implement a `keys` method.")
