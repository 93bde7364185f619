##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Module for managing user-defined brewing equipment.

An equipment's id is assigned once and never changes, so its methods (stored
under that id by the `MethodManager`) stay attached through renames. Deleting an
equipment also drops its method collection.
"""

import logging
from typing import List, Optional

from brewguide.backends.replica import ReplicatedWriter
from brewguide.backends.sqlite.document_store import CUSTOM_EQUIPMENTS
from brewguide.cache.generic_cache import GenericCache
from brewguide.db_scripts.data_models import EquipmentModel, MethodModel
from brewguide.db_scripts.entity_managers.entity_manager import ALL_ENTRIES, EntityManager
from brewguide.db_scripts.entity_managers.method_manager import MethodManager
from brewguide.db_scripts.migration_coordinator import MigrationCoordinator
from brewguide.exceptions import EquipmentError, EquipmentNotFoundError, ValidationError
from brewguide.utils import generate_equipment_id


LOG = logging.getLogger(__name__)


class EquipmentManager(EntityManager[EquipmentModel]):
    """
    Manages the custom equipment collection.

    Attributes:
        method_manager (MethodManager): Manages the methods owned by each equipment.

    Methods:
        get_all: Retrieve every custom equipment (fail soft).
        get: Retrieve one equipment by id (fail soft).
        save: Insert or replace an equipment, optionally with methods.
        update: Replace an existing equipment.
        delete: Delete an equipment and its methods.
        is_name_available: Check that no other equipment uses a name.
        delete_all: Delete every equipment.
    """

    collection_name = CUSTOM_EQUIPMENTS
    backup_key = CUSTOM_EQUIPMENTS
    model_class = EquipmentModel
    error_class = EquipmentError

    def __init__(
        self,
        writer: ReplicatedWriter,
        coordinator: MigrationCoordinator,
        method_manager: MethodManager,
        cache: GenericCache = None,
    ):
        """
        Args:
            writer: The two-tier writer shared by every manager.
            coordinator: The migration coordinator shared by every manager.
            method_manager: The manager of the methods owned by each equipment.
            cache: The cache owned by this manager.
        """
        super().__init__(writer, coordinator, cache)
        self.method_manager: MethodManager = method_manager

    def save(self, equipment: EquipmentModel, methods: List[MethodModel] = None) -> EquipmentModel:
        """
        Save an equipment.

        - If its id matches a stored equipment, that equipment is replaced in place.
        - If it has an id that matches nothing, it is inserted with that id.
        - If it has no id, one is generated and it is inserted.

        Name uniqueness is not enforced here; use `is_name_available` first.
        When the name of an existing equipment changes, its method collection
        is re-saved. When `methods` are given, those not already present (by id
        or by name) are added to the equipment.

        Args:
            equipment: The equipment to save. Not modified.
            methods: Methods to attach to the equipment.

        Returns:
            A copy of the equipment as stored, with its id.

        Raises:
            ValidationError: If the equipment has no name.
            EquipmentError: If the equipment or its methods could not be written.
        """
        if not equipment.name:
            raise ValidationError("Equipment name is required")

        equipment = equipment.copy()
        equipment.is_custom = True
        renamed = False
        try:
            equipments = self._read_all()
            index = next((i for i, stored in enumerate(equipments) if equipment.id and stored.id == equipment.id), None)
            if index is not None:
                renamed = equipments[index].name != equipment.name
                equipments[index] = equipment
                LOG.debug(f"Replacing equipment '{equipment.id}'.")
            else:
                if not equipment.id:
                    equipment.id = generate_equipment_id(equipment.animation_name)
                equipments.append(equipment)
                LOG.debug(f"Adding equipment '{equipment.id}'.")

            self.writer.put(CUSTOM_EQUIPMENTS, equipment.to_dict(), self.backup_key, self._backup_value(equipments))
            self.cache.set(ALL_ENTRIES, equipments)

            if renamed:
                LOG.info(f"Equipment '{equipment.id}' renamed to '{equipment.name}', refreshing its methods.")
                self.method_manager.resave_all(equipment.id)
            if methods:
                added = self.method_manager.import_methods(equipment.id, methods)
                LOG.debug(f"Attached {added} of {len(methods)} methods to equipment '{equipment.id}'.")
        except Exception as exc:  # pylint: disable=broad-except
            self.invalidate()
            self._write_failed(f"Failed to save equipment '{equipment.name}'", exc)
        return equipment.copy()

    def update(self, equipment_id: str, equipment: EquipmentModel) -> EquipmentModel:
        """
        Replace the stored equipment `equipment_id` with `equipment`.

        Args:
            equipment_id: The id of the equipment to replace.
            equipment: The new contents. Its own id is ignored.

        Returns:
            A copy of the equipment as stored.

        Raises:
            EquipmentNotFoundError: If no equipment has that id.
            EquipmentError: If the equipment could not be written.
        """
        try:
            exists = any(stored.id == equipment_id for stored in self._read_all())
        except Exception as exc:  # pylint: disable=broad-except
            self._write_failed(f"Failed to update equipment '{equipment_id}'", exc)
        if not exists:
            raise EquipmentNotFoundError(f"Equipment '{equipment_id}' does not exist")

        equipment = equipment.copy()
        equipment.id = equipment_id
        return self.save(equipment)

    def delete(self, equipment_id: str):
        """
        Delete an equipment, then try to delete its method collection. A failure
        deleting the methods is logged and does not fail the deletion.

        Args:
            equipment_id: The id of the equipment to delete.

        Raises:
            EquipmentNotFoundError: If no equipment has that id.
            EquipmentError: If the equipment could not be deleted.
        """
        try:
            equipments = self._read_all()
            remaining = [stored for stored in equipments if stored.id != equipment_id]
            if len(remaining) == len(equipments):
                raise EquipmentNotFoundError(f"Equipment '{equipment_id}' does not exist")
            self.writer.delete(CUSTOM_EQUIPMENTS, equipment_id, self.backup_key, self._backup_value(remaining))
            self.cache.set(ALL_ENTRIES, remaining)
        except Exception as exc:  # pylint: disable=broad-except
            self.invalidate()
            self._write_failed(f"Failed to delete equipment '{equipment_id}'", exc)

        try:
            self.method_manager.delete_for_equipment(equipment_id)
        except Exception as exc:  # pylint: disable=broad-except
            LOG.warning(f"Equipment '{equipment_id}' was deleted but its methods could not be: {exc}")
        LOG.info(f"Deleted equipment '{equipment_id}'.")

    def is_name_available(self, name: str, current_id: Optional[str] = None) -> bool:
        """
        Check that no equipment other than `current_id` is called `name`.

        Args:
            name: The name to check (exact match).
            current_id: The id of the equipment being edited, if any.

        Returns:
            True if the name is free.
        """
        return not any(stored.name == name and stored.id != current_id for stored in self.get_all())
