##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
One-shot migration of legacy data from the flat key-value store into the
document store.

Older builds of Brew Guide kept every collection as a JSON string under a flat
key (`coffeeBeans`, `brewingNotes`, `customEquipments`, `customMethods_<id>`
and, older still, one combined `customMethods` map). The coordinator copies
those into the document store the first time anything reads from it and then
records a marker in the `settings` collection so that the copy never runs again.

The copy is safe to repeat: every write is an upsert keyed by primary key, so
a pass interrupted halfway simply runs again on the next access. A legacy key
that fails to parse is logged and skipped; the marker is then left unset so
the next run retries it.
"""

import json
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List

from brewguide.backends.key_value.key_value_store import KeyValueStore
from brewguide.backends.sqlite.document_store import (
    BREWING_NOTES,
    COFFEE_BEANS,
    CUSTOM_EQUIPMENTS,
    CUSTOM_METHODS,
    DocumentStore,
)
from brewguide.db_scripts.method_utils import (
    deduplicate_methods,
    ensure_method_id,
    methods_from_records,
    methods_to_records,
)
from brewguide.exceptions import MigrationError
from brewguide.utils import generate_equipment_id


LOG = logging.getLogger(__name__)

MIGRATED_KEY = "migrated"
MIGRATED_AT_KEY = "migratedAt"
METHODS_KEY_PREFIX = "customMethods_"
LEGACY_COMBINED_METHODS_KEY = "customMethods"

# Legacy flat key -> document collection, for collections stored as plain lists
LEGACY_LIST_KEYS: Dict[str, str] = {
    COFFEE_BEANS: COFFEE_BEANS,
    BREWING_NOTES: BREWING_NOTES,
    CUSTOM_EQUIPMENTS: CUSTOM_EQUIPMENTS,
}


class MigrationState(Enum):
    """The lifecycle of the legacy data migration."""

    NOT_MIGRATED = "not_migrated"
    MIGRATING = "migrating"
    MIGRATED = "migrated"


@dataclass
class MigrationReport:
    """
    The outcome of one migration pass.

    Attributes:
        migrated: Legacy key -> number of records written for it.
        failed: Legacy key -> why it could not be migrated.
        skipped: True if the marker was already set and nothing ran.
    """

    migrated: Dict[str, int] = field(default_factory=dict)
    failed: Dict[str, str] = field(default_factory=dict)
    skipped: bool = False

    @property
    def success(self) -> bool:
        """True if every legacy key was migrated."""
        return not self.failed


class MigrationCoordinator:
    """
    Copies legacy flat-key data into the document store exactly once.

    Attributes:
        document_store (DocumentStore): The destination.
        key_value_store (KeyValueStore): The legacy source.

    Methods:
        state: The current `MigrationState`.
        is_migrated: Whether the completion marker is set.
        ensure_migrated: Run the migration unless it already completed.
        run: Run a migration pass regardless of the in-memory state.
        verify_consistency: Clear the marker if it does not match the stored data.
        cleanup_legacy_keys: Remove legacy keys whose data is safely in the document store.
    """

    def __init__(self, document_store: DocumentStore, key_value_store: KeyValueStore):
        self.document_store: DocumentStore = document_store
        self.key_value_store: KeyValueStore = key_value_store
        self._state: MigrationState = None
        self._lock = threading.RLock()

    @property
    def state(self) -> MigrationState:
        """
        The current state. Read from the stored marker until a pass has run
        in this process.

        Returns:
            The migration state.
        """
        if self._state is None:
            self._state = MigrationState.MIGRATED if self.is_migrated() else MigrationState.NOT_MIGRATED
        return self._state

    def is_migrated(self) -> bool:
        """
        Check the completion marker in the `settings` collection.

        Returns:
            True if the marker is set to "true".
        """
        return self.document_store.get_setting(MIGRATED_KEY) == "true"

    def ensure_migrated(self) -> bool:
        """
        Make sure legacy data has been migrated, running a pass if needed.
        Called lazily by the entity managers before their first read.

        Returns:
            True if the migration is complete.
        """
        if self._state is MigrationState.MIGRATED:
            return True
        with self._lock:
            if self.state is MigrationState.MIGRATED:
                return True
            if self._state is MigrationState.MIGRATING:
                # Re-entered from inside a running pass
                return False
            return self.run().success

    def run(self) -> MigrationReport:
        """
        Run a migration pass. If the marker is already set nothing is copied.

        Returns:
            A report of what was migrated and what failed.

        Raises:
            MigrationError: If the document store cannot be read or the marker
                cannot be written.
        """
        with self._lock:
            try:
                if self.is_migrated():
                    LOG.debug("Legacy data is already migrated.")
                    self._state = MigrationState.MIGRATED
                    return MigrationReport(skipped=True)
            except Exception as exc:
                raise MigrationError("Could not read the migration marker", cause=exc) from exc

            LOG.info("Migrating legacy data into the document store...")
            self._state = MigrationState.MIGRATING
            report = MigrationReport()
            try:
                self._migrate_all(report)
                if report.success:
                    self.document_store.put_setting(MIGRATED_KEY, "true")
                    self.document_store.put_setting(MIGRATED_AT_KEY, datetime.now(timezone.utc).isoformat())
            except Exception as exc:
                self._state = MigrationState.NOT_MIGRATED
                raise MigrationError("The migration pass could not complete", cause=exc) from exc

            if report.success:
                self._state = MigrationState.MIGRATED
                LOG.info(f"Migration complete: {sum(report.migrated.values())} records from {len(report.migrated)} keys.")
            else:
                self._state = MigrationState.NOT_MIGRATED
                LOG.warning(f"Migration incomplete, will retry on next access. Failed keys: {sorted(report.failed)}")
            return report

    def _migrate_all(self, report: MigrationReport):
        for legacy_key, collection_name in LEGACY_LIST_KEYS.items():
            self._guarded(report, legacy_key, lambda k=legacy_key, c=collection_name: self._migrate_list(k, c))

        for legacy_key in sorted(self.key_value_store.keys()):
            if legacy_key.startswith(METHODS_KEY_PREFIX):
                self._guarded(report, legacy_key, lambda k=legacy_key: self._migrate_method_key(k))

        self._guarded(report, LEGACY_COMBINED_METHODS_KEY, self._migrate_combined_methods)

    def _guarded(self, report: MigrationReport, legacy_key: str, migrate):
        try:
            written = migrate()
        except (ValueError, TypeError) as exc:
            LOG.error(f"Could not migrate legacy key '{legacy_key}': {exc}")
            report.failed[legacy_key] = str(exc)
            return
        except MigrationError as exc:
            LOG.error(f"Could not migrate legacy key '{legacy_key}': {exc}")
            report.failed[legacy_key] = exc.message
            return
        if written is not None:
            report.migrated[legacy_key] = written

    def _read_legacy(self, legacy_key: str):
        raw = self.key_value_store.get(legacy_key)
        if raw is None or raw == "":
            return None
        return json.loads(raw)

    def _migrate_list(self, legacy_key: str, collection_name: str):
        records = self._read_legacy(legacy_key)
        if records is None:
            return None
        if not isinstance(records, list):
            raise TypeError(f"expected a list, found {type(records).__name__}")
        if not records:
            return 0

        collection = self.document_store.collection(collection_name)
        ids_by_name = {}
        if collection_name == CUSTOM_EQUIPMENTS:
            ids_by_name = {existing.get("name"): existing.get("id") for existing in collection.to_array()}
        valid = []
        for record in records:
            if not isinstance(record, dict):
                LOG.warning(f"Skipping a non-object entry in '{legacy_key}'.")
                continue
            if not record.get(collection.key_path):
                if collection_name != CUSTOM_EQUIPMENTS:
                    LOG.warning(f"Skipping an entry without '{collection.key_path}' in '{legacy_key}'.")
                    continue
                equipment_id = ids_by_name.get(record.get("name")) or generate_equipment_id(
                    record.get("animationType", "custom")
                )
                record = dict(record, id=equipment_id)
            valid.append(record)

        LOG.info(f"Migrating {len(valid)} records from '{legacy_key}'...")
        collection.bulk_put(valid)
        expected = len({str(record[collection.key_path]) for record in valid})
        stored = collection.count()
        if stored < expected:
            raise MigrationError(f"expected at least {expected} records in '{collection_name}', found {stored}")
        return len(valid)

    def _merge_methods(self, equipment_id: str, incoming: List[Dict]) -> int:
        existing_record = self.document_store.custom_methods.get(equipment_id)
        existing = methods_from_records(existing_record.get("methods", [])) if existing_record else []
        # Dedup before assigning ids so a name-only method folds into an existing one on a re-run
        merged = [ensure_method_id(m) for m in deduplicate_methods(existing + methods_from_records(incoming))]
        self.document_store.custom_methods.put({"equipmentId": equipment_id, "methods": methods_to_records(merged)})
        if self.document_store.custom_methods.get(equipment_id) is None:
            raise MigrationError(f"methods for '{equipment_id}' were not stored")
        return len(merged)

    def _migrate_method_key(self, legacy_key: str):
        methods = self._read_legacy(legacy_key)
        if methods is None:
            return None
        if not isinstance(methods, list):
            raise TypeError(f"expected a list, found {type(methods).__name__}")
        if not methods:
            return 0
        equipment_id = legacy_key[len(METHODS_KEY_PREFIX) :]
        return self._merge_methods(equipment_id, methods)

    def _migrate_combined_methods(self):
        combined = self._read_legacy(LEGACY_COMBINED_METHODS_KEY)
        if combined is None:
            return None
        if not isinstance(combined, dict):
            raise TypeError(f"expected an object, found {type(combined).__name__}")

        equipments = self.document_store.custom_equipments.to_array()
        ids = {equipment.get("id") for equipment in equipments}
        ids_by_name = {equipment.get("name"): equipment.get("id") for equipment in equipments}

        written = 0
        for equipment_key, methods in combined.items():
            if not isinstance(methods, list) or not methods:
                continue
            equipment_id = equipment_key
            if equipment_key not in ids and equipment_key in ids_by_name:
                equipment_id = ids_by_name[equipment_key]
                LOG.info(f"Re-associating methods stored under '{equipment_key}' with equipment '{equipment_id}'.")
            written += self._merge_methods(equipment_id, methods)
        return written

    def verify_consistency(self) -> bool:
        """
        Check that a set marker matches the data. If a core collection is empty
        while its legacy key still holds records, the marker is cleared so the
        next access migrates again.

        Returns:
            True if the stored state is consistent (or nothing was migrated yet).
        """
        with self._lock:
            if not self.is_migrated():
                return True

            stale = []
            for legacy_key, collection_name in LEGACY_LIST_KEYS.items():
                if self.document_store.collection(collection_name).count() > 0:
                    continue
                try:
                    legacy = self._read_legacy(legacy_key)
                except ValueError:
                    continue
                if isinstance(legacy, list) and legacy:
                    stale.append(legacy_key)

            if stale:
                LOG.warning(f"Migration marker is set but {stale} hold data that is missing. Resetting the marker.")
                self.document_store.settings.delete(MIGRATED_KEY)
                self._state = MigrationState.NOT_MIGRATED
                return False
            return True

    def cleanup_legacy_keys(self) -> List[str]:
        """
        Remove legacy keys whose data is confirmed to be in the document store.
        A key is only removed when its destination holds at least one record.
        Nothing is removed before the migration has completed.

        Returns:
            The keys that were removed.
        """
        if not self.is_migrated():
            LOG.warning("Refusing to clean up legacy keys before the migration has completed.")
            return []

        removed = []
        for legacy_key, collection_name in LEGACY_LIST_KEYS.items():
            if self.key_value_store.get(legacy_key) is None:
                continue
            if self.document_store.collection(collection_name).count() > 0:
                self.key_value_store.remove(legacy_key)
                removed.append(legacy_key)

        for legacy_key in self.key_value_store.keys():
            if legacy_key.startswith(METHODS_KEY_PREFIX):
                if self.document_store.custom_methods.get(legacy_key[len(METHODS_KEY_PREFIX) :]) is not None:
                    self.key_value_store.remove(legacy_key)
                    removed.append(legacy_key)

        if (
            self.key_value_store.get(LEGACY_COMBINED_METHODS_KEY) is not None
            and self.document_store.custom_methods.count() > 0
        ):
            self.key_value_store.remove(LEGACY_COMBINED_METHODS_KEY)
            removed.append(LEGACY_COMBINED_METHODS_KEY)

        LOG.info(f"Removed {len(removed)} legacy keys.")
        return removed
