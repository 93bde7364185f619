##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
This module defines the abstract base class `EntityManager`, which provides a generic framework
for managing the entity collections Brew Guide persists.

Every manager follows the same rules:

- Reads go through the manager's own `GenericCache` and, on a miss, to the document store.
  The first read triggers the legacy data migration. Public read methods fail soft and
  return an empty result.
- Writes go through a `ReplicatedWriter` so the document store is updated and the legacy
  flat key is mirrored in the key-value store. The cache is refreshed after every write.
  Write methods fail loud with the manager's domain error.
- Callers never receive objects that live in the cache; they always get copies.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, List, Optional, Type, TypeVar

from brewguide.backends.collection_base import CollectionBase
from brewguide.backends.replica import ReplicatedWriter
from brewguide.cache.generic_cache import GenericCache
from brewguide.db_scripts.data_models import BaseDataModel
from brewguide.db_scripts.migration_coordinator import MigrationCoordinator
from brewguide.exceptions import BrewGuideError, EntityNotFoundError, ValidationError


M = TypeVar("M", bound=BaseDataModel)

LOG = logging.getLogger(__name__)

ALL_ENTRIES = "all"


class EntityManager(Generic[M], ABC):
    """
    Abstract base class for managing one collection of entities.

    Generic Parameters:
        M (BaseDataModel): The data model class stored in the collection.

    Attributes:
        writer (ReplicatedWriter): Writes the document store and mirrors the backup.
        coordinator (MigrationCoordinator): Runs the legacy migration before the first read.
        cache (GenericCache): The manager's private read cache.
        collection_name (str): The document collection managed (set by subclasses).
        backup_key (str): The flat key holding the backup copy (set by subclasses).
        model_class (Type[M]): The model class of the collection (set by subclasses).
        error_class (Type[BrewGuideError]): The domain error raised by writes (set by subclasses).

    Methods:
        get_all: Retrieve every entity (fail soft).
        get: Retrieve one entity by id (fail soft).
        delete: Delete one entity by id.
        delete_all: Delete every entity.
        invalidate: Drop everything this manager has cached.
        close: Tear down the cache.
    """

    collection_name: str = None
    backup_key: str = None
    model_class: Type[M] = None
    error_class: Type[BrewGuideError] = BrewGuideError

    def __init__(self, writer: ReplicatedWriter, coordinator: MigrationCoordinator, cache: GenericCache = None):
        """
        Args:
            writer: The two-tier writer shared by every manager.
            coordinator: The migration coordinator shared by every manager.
            cache: The cache owned by this manager. A default one is created if omitted.
        """
        self.writer: ReplicatedWriter = writer
        self.coordinator: MigrationCoordinator = coordinator
        self.cache: GenericCache = cache if cache is not None else GenericCache(name=self.collection_name)

    @property
    def collection(self) -> CollectionBase:
        """The document collection this manager owns."""
        return self.writer.document_store.collection(self.collection_name)

    def _load_all(self) -> List[M]:
        """
        Read every record straight from the document store.

        Records that cannot be converted are skipped with a warning so one bad
        record does not hide the rest of the collection.

        Returns:
            The records converted to models, in stored order.
        """
        entities = []
        for record in self.collection.to_array():
            try:
                entities.append(self.model_class.from_dict(record))
            except (AttributeError, TypeError, ValueError) as exc:
                LOG.warning(f"Skipping an unreadable record in '{self.collection_name}': {exc}")
        return entities

    def _read_all(self) -> List[M]:
        """
        Read every entity through the cache. Raises on failure; used by write
        paths that must not continue on a failed read.

        Returns:
            Copies of every entity.
        """
        self.coordinator.ensure_migrated()
        entities = self.cache.resolve(ALL_ENTRIES, self._load_all)
        return [entity.copy() for entity in entities]

    def _soft_read(self, description: str, read: Callable[[], Any], default: Any) -> Any:
        """
        Run `read`, logging any failure and returning `default` instead of raising.

        Args:
            description: What is being read, for the log message.
            read: The read to attempt.
            default: The value to return on failure.

        Returns:
            The result of `read`, or `default`.
        """
        try:
            return read()
        except Exception as exc:  # pylint: disable=broad-except
            LOG.error(f"Failed to load {description}: {exc}")
            return default

    def _write_failed(self, message: str, exc: Exception):
        """
        Re-raise a failure from a write path as this manager's domain error.
        Validation and not-found errors pass through unchanged.

        Args:
            message: A human-readable description of the failed write.
            exc: The underlying exception.

        Raises:
            BrewGuideError: Always.
        """
        if isinstance(exc, (self.error_class, ValidationError, EntityNotFoundError)):
            raise exc
        LOG.error(f"{message}: {exc}")
        raise self.error_class(message, cause=exc) from exc

    def _backup_value(self, entities: List[M]) -> List:
        return [entity.to_dict() for entity in entities]

    def get_all(self) -> List[M]:
        """
        Retrieve every entity in the collection.

        Returns:
            A list of entities; empty if nothing is stored or the read failed.
        """
        return self._soft_read(self.collection_name, self._read_all, [])

    def get(self, identifier: str) -> Optional[M]:
        """
        Retrieve one entity by id.

        Args:
            identifier: The id of the entity.

        Returns:
            The entity, or None if it does not exist or the read failed.
        """
        for entity in self.get_all():
            if entity.id == identifier:
                return entity
        return None

    @abstractmethod
    def delete(self, identifier: str) -> Any:
        """
        Delete one entity by id.

        Args:
            identifier: The id of the entity.
        """
        raise NotImplementedError("Subclasses of `EntityManager` must implement a `delete` method.")

    def delete_all(self):
        """
        Delete every entity of this collection, including its backup copy.

        Raises:
            BrewGuideError: The manager's domain error if the write fails.
        """
        try:
            self.writer.replace_all(self.collection_name, [], self.backup_key)
        except Exception as exc:  # pylint: disable=broad-except
            self._write_failed(f"Failed to delete every record of '{self.collection_name}'", exc)
        finally:
            self.invalidate()
        LOG.info(f"Deleted every record of '{self.collection_name}'.")

    def invalidate(self):
        """
        Drop everything this manager has cached.
        """
        self.cache.clear()

    def close(self):
        """
        Tear down the manager's cache. The manager must not be used afterwards.
        """
        self.cache.close()
