##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Whole-database export, import and reset.

An export is a single JSON document:

    {
        "exportDate": "<ISO timestamp>",
        "appVersion": "<version>",
        "data": {
            "coffeeBeans": [...],
            "brewingNotes": [...],
            "customEquipments": [...],
            "customMethodsByEquipment": {"<equipmentId>": [...]},
            "<setting key>": <value>
        }
    }

Imports keep every id exactly as given so equipment and their methods stay
associated across an export/import round-trip.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List

from brewguide import __version__
from brewguide.backends.sqlite.document_store import BREWING_NOTES, COFFEE_BEANS, CUSTOM_EQUIPMENTS
from brewguide.db_scripts.brew_guide_db import BrewGuideDatabase
from brewguide.db_scripts.data_models import BaseDataModel, BrewingNoteModel, CoffeeBeanModel, EquipmentModel
from brewguide.db_scripts.method_utils import deduplicate_methods, methods_from_records
from brewguide.db_scripts.migration_coordinator import LEGACY_COMBINED_METHODS_KEY
from brewguide.exceptions import BrewGuideError
from brewguide.utils import generate_equipment_id, generate_record_id


LOG = logging.getLogger(__name__)

METHODS_BY_EQUIPMENT = "customMethodsByEquipment"

# Small settings that live in the key-value store and travel with an export
SETTING_KEYS: List[str] = ["brewGuideSettings", "brewingNotesVersion", "onboardingCompleted"]


@dataclass
class ImportResult:
    """
    The outcome of an import or reset.

    Attributes:
        success: Whether the operation completed.
        message: A human-readable summary.
    """

    success: bool
    message: str


class DataManager:
    """
    Exports, imports and resets everything stored by a `BrewGuideDatabase`.

    Attributes:
        db (BrewGuideDatabase): The database to operate on.

    Methods:
        export_all_data: Serialize every collection to a JSON document.
        import_all_data: Replace every collection with the contents of an export.
        reset_all_data: Delete stored data.
        get_storage_info: Report record counts and sizes.
    """

    def __init__(self, db: BrewGuideDatabase):
        self.db: BrewGuideDatabase = db

    def _export_settings(self) -> Dict[str, Any]:
        settings = {}
        for key in SETTING_KEYS:
            raw = self.db.key_value_store.get(key)
            if raw is None:
                continue
            try:
                settings[key] = json.loads(raw)
            except json.JSONDecodeError:
                settings[key] = raw
        return settings

    def export_all_data(self) -> str:
        """
        Serialize every collection to a JSON document. Brewing notes are
        exported without the embedded `coffeeBean` copy they may carry.

        Returns:
            The export as an indented JSON string.

        Raises:
            BrewGuideError: If the data could not be read or serialized.
        """
        try:
            self.db.coordinator.ensure_migrated()
            store = self.db.document_store
            notes = store.brewing_notes.to_array()
            for note in notes:
                note.pop("coffeeBean", None)

            data = {
                COFFEE_BEANS: store.coffee_beans.to_array(),
                BREWING_NOTES: notes,
                CUSTOM_EQUIPMENTS: store.custom_equipments.to_array(),
            }
            method_records = store.custom_methods.to_array()
            if method_records:
                data[METHODS_BY_EQUIPMENT] = {record["equipmentId"]: record.get("methods", []) for record in method_records}
            data.update(self._export_settings())

            export = {
                "exportDate": datetime.now(timezone.utc).isoformat(),
                "appVersion": __version__,
                "data": data,
            }
            return json.dumps(export, ensure_ascii=False, indent=2)
        except Exception as exc:
            LOG.error(f"Failed to export data: {exc}")
            raise BrewGuideError("Failed to export data", cause=exc) from exc

    def import_all_data(self, json_string: str) -> ImportResult:
        """
        Replace every collection present in an export. Collections absent from
        the export are left alone. Ids are kept verbatim.

        Args:
            json_string: The export document.

        Returns:
            An `ImportResult` describing the outcome. Failures are reported, not raised.
        """
        try:
            import_data = json.loads(json_string)
        except json.JSONDecodeError as exc:
            return ImportResult(False, f"Import failed: the file is not valid JSON ({exc})")

        data = import_data.get("data") if isinstance(import_data, dict) else None
        if not isinstance(data, dict):
            return ImportResult(False, "Import failed: the document has no 'data' field")

        try:
            self.db.coordinator.ensure_migrated()
            self._import_collections(data)
            self._import_methods(data)
            for key in SETTING_KEYS:
                if key in data:
                    value = data[key]
                    self.db.key_value_store.set(key, value if isinstance(value, str) else json.dumps(value))
        except Exception as exc:  # pylint: disable=broad-except
            LOG.error(f"Failed to import data: {exc}")
            return ImportResult(False, f"Import failed: {exc}")
        finally:
            self.db.invalidate_caches()

        return ImportResult(True, f"Data imported, export date: {import_data.get('exportDate') or 'unknown'}")

    @staticmethod
    def _with_record_id(model: BaseDataModel) -> Dict:
        if not model.id:
            model.id = generate_record_id()
        return model.to_dict()

    def _import_collections(self, data: Dict):
        if isinstance(data.get(COFFEE_BEANS), list):
            beans = [self._with_record_id(CoffeeBeanModel.from_dict(record)) for record in data[COFFEE_BEANS]]
            self.db.writer.replace_all(COFFEE_BEANS, beans, COFFEE_BEANS)
            LOG.info(f"Imported {len(beans)} coffee beans.")

        if isinstance(data.get(BREWING_NOTES), list):
            notes = [self._with_record_id(BrewingNoteModel.from_dict(record)) for record in data[BREWING_NOTES]]
            self.db.writer.replace_all(BREWING_NOTES, notes, BREWING_NOTES)
            LOG.info(f"Imported {len(notes)} brewing notes.")

        if isinstance(data.get(CUSTOM_EQUIPMENTS), list):
            equipments = []
            for record in data[CUSTOM_EQUIPMENTS]:
                equipment = EquipmentModel.from_dict(record)
                if not equipment.id:
                    equipment.id = generate_equipment_id(equipment.animation_name)
                equipments.append(equipment.to_dict())
            self.db.writer.replace_all(CUSTOM_EQUIPMENTS, equipments, CUSTOM_EQUIPMENTS)
            LOG.info(f"Imported {len(equipments)} custom equipments.")

    def _import_methods(self, data: Dict):
        by_equipment = {}
        legacy = data.get(LEGACY_COMBINED_METHODS_KEY)
        if isinstance(legacy, dict):
            for equipment_id, methods in legacy.items():
                if isinstance(methods, list):
                    by_equipment[equipment_id] = methods_from_records(methods)

        current = data.get(METHODS_BY_EQUIPMENT)
        if isinstance(current, dict):
            for equipment_id, methods in current.items():
                if isinstance(methods, list):
                    by_equipment[equipment_id] = deduplicate_methods(
                        by_equipment.get(equipment_id, []) + methods_from_records(methods)
                    )

        if legacy is not None or current is not None:
            self.db.methods.replace_all(by_equipment)
            LOG.info(f"Imported methods for {len(by_equipment)} equipments.")

    def reset_all_data(self, complete_reset: bool = False) -> ImportResult:
        """
        Delete the main collections (beans, notes, equipment) and the exported
        settings. A complete reset also deletes every method collection.

        Args:
            complete_reset: Whether to delete the method collections as well.

        Returns:
            An `ImportResult` describing the outcome. Failures are reported, not raised.
        """
        try:
            self.db.coordinator.ensure_migrated()
            self.db.coffee_beans.delete_all()
            self.db.brewing_notes.delete_all()
            self.db.equipments.delete_all()
            for key in SETTING_KEYS + [LEGACY_COMBINED_METHODS_KEY]:
                self.db.key_value_store.remove(key)
            if complete_reset:
                self.db.methods.delete_all()
        except BrewGuideError as exc:
            LOG.error(f"Failed to reset data: {exc}")
            return ImportResult(False, f"Reset failed: {exc.message}")
        finally:
            self.db.invalidate_caches()

        if complete_reset:
            return ImportResult(True, "All data and settings have been reset")
        return ImportResult(True, "Main data has been reset")

    def get_storage_info(self) -> Dict[str, Dict[str, Any]]:
        """
        Report how much is stored in each document collection and in the
        key-value store.

        Returns:
            Collection name to `{"count": ..., "size": ...}` (size in bytes of the
            JSON records), plus a `keyValue` entry with the backend name and key count.
        """
        info = {}
        for name in self.db.document_store.collection_names():
            try:
                records = self.db.document_store.collection(name).to_array()
            except BrewGuideError as exc:
                LOG.error(f"Could not inspect collection '{name}': {exc}")
                info[name] = {"count": 0, "size": 0}
                continue
            info[name] = {
                "count": len(records),
                "size": len(json.dumps(records, ensure_ascii=False).encode("utf-8")),
            }
        info["keyValue"] = {
            "backend": self.db.get_db_type(),
            "count": len(self.db.key_value_store.keys()),
        }
        return info
