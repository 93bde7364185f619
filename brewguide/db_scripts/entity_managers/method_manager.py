##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Module for managing the custom brewing methods attached to each piece of equipment.

Methods are stored one collection per equipment: a single `customMethods` record
`{"equipmentId": ..., "methods": [...]}` keyed by the equipment's id, mirrored to
the flat key `customMethods_<equipmentId>`. Because the key is the equipment id,
renaming the equipment never moves its methods.
"""

import logging
from typing import Dict, List, Optional

from brewguide.backends.sqlite.document_store import CUSTOM_METHODS
from brewguide.db_scripts.data_models import MethodModel
from brewguide.db_scripts.entity_managers.entity_manager import EntityManager
from brewguide.db_scripts.method_utils import (
    deduplicate_methods,
    ensure_method_id,
    methods_from_records,
    methods_to_records,
)
from brewguide.exceptions import MethodError, MethodNotFoundError
from brewguide.utils import current_millis


LOG = logging.getLogger(__name__)


def method_backup_key(equipment_id: str) -> str:
    """
    Get the flat key that holds the backup of an equipment's methods.

    Args:
        equipment_id: The id of the owning equipment.

    Returns:
        The key `customMethods_<equipmentId>`.
    """
    return f"customMethods_{equipment_id}"


class MethodManager(EntityManager[MethodModel]):
    """
    Manages the method collection of every custom equipment.

    Methods:
        get_for_equipment: Retrieve the methods of one equipment (fail soft).
        get_all: Retrieve every method collection keyed by equipment id (fail soft).
        get: Retrieve one method of one equipment (fail soft).
        save: Insert or replace one method of an equipment.
        update: Apply field updates to an existing method.
        delete: Delete one method of an equipment.
        import_methods: Add the methods that are not already present.
        resave_all: Persist an equipment's collection again as it is.
        replace_all: Replace every method collection at once.
        delete_for_equipment: Drop the whole collection of one equipment.
        delete_all: Drop every method collection.
    """

    collection_name = CUSTOM_METHODS
    model_class = MethodModel
    error_class = MethodError

    def _cache_key(self, equipment_id: str) -> str:
        return f"methods:{equipment_id}"

    def _load_for_equipment(self, equipment_id: str) -> List[MethodModel]:
        record = self.collection.get(equipment_id)
        if record is None:
            return []
        return methods_from_records(record.get("methods", []))

    def _read_for_equipment(self, equipment_id: str) -> List[MethodModel]:
        self.coordinator.ensure_migrated()
        methods = self.cache.resolve(self._cache_key(equipment_id), lambda: self._load_for_equipment(equipment_id))
        return [method.copy() for method in methods]

    def _persist(self, equipment_id: str, methods: List[MethodModel]):
        records = methods_to_records(methods)
        self.writer.put(
            CUSTOM_METHODS,
            {"equipmentId": equipment_id, "methods": records},
            method_backup_key(equipment_id),
            records,
        )
        self.cache.set(self._cache_key(equipment_id), [method.copy() for method in methods])

    def get_for_equipment(self, equipment_id: str) -> List[MethodModel]:
        """
        Retrieve the methods of one equipment.

        Args:
            equipment_id: The id of the owning equipment.

        Returns:
            The methods, or an empty list if there are none or the read failed.
        """
        return self._soft_read(f"methods of '{equipment_id}'", lambda: self._read_for_equipment(equipment_id), [])

    def get_all(self) -> Dict[str, List[MethodModel]]:
        """
        Retrieve every method collection.

        Returns:
            A dictionary of equipment id to its methods; empty on failure.
        """

        def read_all():
            self.coordinator.ensure_migrated()
            return {
                record["equipmentId"]: methods_from_records(record.get("methods", []))
                for record in self.collection.to_array()
            }

        return self._soft_read("every method collection", read_all, {})

    def get(self, equipment_id: str, method_id: str = None) -> Optional[MethodModel]:  # pylint: disable=arguments-differ
        """
        Retrieve one method of an equipment.

        Args:
            equipment_id: The id of the owning equipment.
            method_id: The id of the method.

        Returns:
            The method, or None if it does not exist.
        """
        for method in self.get_for_equipment(equipment_id):
            if method.id == method_id:
                return method
        return None

    def save(self, equipment_id: str, method: MethodModel) -> MethodModel:
        """
        Insert `method` into the collection of `equipment_id`, replacing any
        method with the same id. A method without an id gets one here.

        Args:
            equipment_id: The id of the owning equipment.
            method: The method to save. Not modified.

        Returns:
            A copy of the method as stored.

        Raises:
            MethodError: If the collection could not be written.
        """
        method = ensure_method_id(method.copy())
        try:
            methods = [existing for existing in self._read_for_equipment(equipment_id) if existing.id != method.id]
            methods.append(method)
            methods = deduplicate_methods(methods)
            self._persist(equipment_id, methods)
        except Exception as exc:  # pylint: disable=broad-except
            self._write_failed(f"Failed to save method '{method.name}' for equipment '{equipment_id}'", exc)
        LOG.debug(f"Saved method '{method.id}' for equipment '{equipment_id}'.")
        return method.copy()

    def update(self, equipment_id: str, method_id: str, updates: Dict) -> MethodModel:
        """
        Apply `updates` to an existing method. The id is never changed and the
        method's timestamp is refreshed.

        Args:
            equipment_id: The id of the owning equipment.
            method_id: The id of the method to update.
            updates: Field name (or JSON key) to new value.

        Returns:
            A copy of the updated method.

        Raises:
            MethodNotFoundError: If the method does not exist.
            MethodError: If the collection could not be written.
        """
        try:
            methods = self._read_for_equipment(equipment_id)
            target = next((method for method in methods if method.id == method_id), None)
            if target is None:
                raise MethodNotFoundError(f"Method '{method_id}' does not exist for equipment '{equipment_id}'")
            target.update_fields(updates)
            target.timestamp = current_millis()
            self._persist(equipment_id, deduplicate_methods(methods))
        except Exception as exc:  # pylint: disable=broad-except
            self._write_failed(f"Failed to update method '{method_id}' for equipment '{equipment_id}'", exc)
        return target.copy()

    def delete(self, equipment_id: str, method_id: str = None) -> bool:  # pylint: disable=arguments-differ
        """
        Delete one method of an equipment.

        Args:
            equipment_id: The id of the owning equipment.
            method_id: The id of the method to delete.

        Returns:
            True if a method was deleted, False if none matched.

        Raises:
            MethodError: If the collection could not be written.
        """
        try:
            methods = self._read_for_equipment(equipment_id)
            remaining = [method for method in methods if method.id != method_id]
            if len(remaining) == len(methods):
                LOG.debug(f"No method '{method_id}' to delete for equipment '{equipment_id}'.")
                return False
            self._persist(equipment_id, remaining)
        except Exception as exc:  # pylint: disable=broad-except
            self._write_failed(f"Failed to delete method '{method_id}' for equipment '{equipment_id}'", exc)
        LOG.info(f"Deleted method '{method_id}' from equipment '{equipment_id}'.")
        return True

    def import_methods(self, equipment_id: str, methods: List[MethodModel]) -> int:
        """
        Add the methods from `methods` that the equipment does not already have.
        A method counts as present if an existing one has the same id or the
        same name. Ids given by the caller are kept verbatim.

        Args:
            equipment_id: The id of the owning equipment.
            methods: The candidate methods.

        Returns:
            The number of methods added.

        Raises:
            MethodError: If the collection could not be written.
        """
        added = []
        try:
            existing = self._read_for_equipment(equipment_id)
            for candidate in methods:
                present = any(
                    (candidate.id and candidate.id == method.id) or candidate.name == method.name
                    for method in existing + added
                )
                if not present:
                    added.append(ensure_method_id(candidate.copy()))
            if added:
                self._persist(equipment_id, deduplicate_methods(existing + added))
        except Exception as exc:  # pylint: disable=broad-except
            self._write_failed(f"Failed to import methods for equipment '{equipment_id}'", exc)
        return len(added)

    def resave_all(self, equipment_id: str):
        """
        Persist the collection of `equipment_id` again unchanged. Refreshes the
        backup copy and this manager's cache for that equipment.

        Args:
            equipment_id: The id of the owning equipment.

        Raises:
            MethodError: If the collection could not be written.
        """
        try:
            self.cache.delete(self._cache_key(equipment_id))
            methods = self._read_for_equipment(equipment_id)
            if methods:
                self._persist(equipment_id, methods)
        except Exception as exc:  # pylint: disable=broad-except
            self._write_failed(f"Failed to re-save the methods of equipment '{equipment_id}'", exc)

    def replace_all(self, methods_by_equipment: Dict[str, List[MethodModel]]):
        """
        Replace every method collection with `methods_by_equipment`. Ids are kept
        verbatim; methods without one get one.

        Args:
            methods_by_equipment: Equipment id to its methods.

        Raises:
            MethodError: If the collections could not be written.
        """
        try:
            for key in self.writer.key_value_store.keys():
                if key.startswith(method_backup_key("")):
                    self.writer.remove_backup(key)
            records = []
            for equipment_id, methods in methods_by_equipment.items():
                methods = [ensure_method_id(method.copy()) for method in deduplicate_methods(methods)]
                records.append({"equipmentId": equipment_id, "methods": methods_to_records(methods)})
            self.writer.document_store.custom_methods.clear()
            self.writer.document_store.custom_methods.bulk_put(records)
            for record in records:
                self.writer.mirror(method_backup_key(record["equipmentId"]), record["methods"])
            self.writer.notify(CUSTOM_METHODS)
        except Exception as exc:  # pylint: disable=broad-except
            self._write_failed("Failed to replace the method collections", exc)
        finally:
            self.invalidate()

    def delete_for_equipment(self, equipment_id: str):
        """
        Drop the whole method collection of one equipment, backup included.

        Args:
            equipment_id: The id of the owning equipment.

        Raises:
            MethodError: If the collection could not be deleted.
        """
        try:
            self.writer.drop(CUSTOM_METHODS, equipment_id, method_backup_key(equipment_id))
        except Exception as exc:  # pylint: disable=broad-except
            self._write_failed(f"Failed to delete the methods of equipment '{equipment_id}'", exc)
        finally:
            self.cache.delete(self._cache_key(equipment_id))

    def delete_all(self):
        """
        Drop every method collection, backups included.

        Raises:
            MethodError: If the collections could not be deleted.
        """
        self.replace_all({})
