##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################
"""
Tests for the `equipment_manager.py` module.
"""

import re

import pytest
from pytest_mock import MockerFixture

from brewguide.db_scripts.brew_guide_db import BrewGuideDatabase
from brewguide.db_scripts.data_models import EquipmentModel, MethodModel
from brewguide.exceptions import (
    EquipmentError,
    EquipmentNotFoundError,
    MethodError,
    StorageBackendError,
    ValidationError,
)


EQUIPMENT_ID = re.compile(r"^custom-v60-\d+-[a-z0-9]{9}$")


class TestEquipmentManager:
    """
    Tests for `EquipmentManager`, run against a real SQLite document store
    and an in-memory key-value store.
    """

    def test_save_new_equipment(self, brew_db: BrewGuideDatabase, v60: EquipmentModel):
        """Test that a new equipment gets a generated id and lands in both tiers."""
        saved = brew_db.equipments.save(v60)

        assert EQUIPMENT_ID.match(saved.id)
        assert saved.is_custom is True
        assert v60.id is None
        assert brew_db.document_store.custom_equipments.get(saved.id)["name"] == "My V60"
        assert brew_db.key_value_store.get_json("customEquipments") == [saved.to_dict()]
        assert brew_db.equipments.get(saved.id) == saved

    def test_save_keeps_supplied_id(self, brew_db: BrewGuideDatabase):
        """Test that an unknown id given by the caller is used verbatim."""
        saved = brew_db.equipments.save(EquipmentModel(id="imported-1", name="Imported"))
        assert saved.id == "imported-1"
        assert [e.id for e in brew_db.equipments.get_all()] == ["imported-1"]

    def test_save_requires_name(self, brew_db: BrewGuideDatabase):
        """Test that an equipment without a name is rejected before anything is written."""
        with pytest.raises(ValidationError, match="name is required"):
            brew_db.equipments.save(EquipmentModel(name=""))
        assert brew_db.document_store.custom_equipments.count() == 0

    def test_save_existing_replaces_in_place(self, brew_db: BrewGuideDatabase):
        """Test that saving an existing id replaces it without reordering."""
        first = brew_db.equipments.save(EquipmentModel(name="First"))
        brew_db.equipments.save(EquipmentModel(name="Second"))
        first.description = "updated"
        brew_db.equipments.save(first)

        stored = brew_db.equipments.get_all()
        assert [e.name for e in stored] == ["First", "Second"]
        assert stored[0].description == "updated"

    def test_ids_survive_rename(self, brew_db: BrewGuideDatabase, v60: EquipmentModel, pour_over_methods: list):
        """Test that renaming keeps the id and the methods attached to it."""
        saved = brew_db.equipments.save(v60, methods=pour_over_methods)
        method_ids = [m.id for m in brew_db.methods.get_for_equipment(saved.id)]

        saved.name = "Renamed V60"
        renamed = brew_db.equipments.save(saved)

        assert renamed.id == saved.id
        assert [m.id for m in brew_db.methods.get_for_equipment(saved.id)] == method_ids
        assert brew_db.equipments.get(saved.id).name == "Renamed V60"

    def test_rename_resaves_methods_once(
        self, brew_db: BrewGuideDatabase, v60: EquipmentModel, pour_over_methods: list, mocker: MockerFixture
    ):
        """
        Test that a rename re-persists the method collection exactly once and a
        plain edit does not.

        Args:
            brew_db: The database under test.
            v60: An unsaved equipment.
            pour_over_methods: Methods to attach.
            mocker: PyTest mocker fixture.
        """
        saved = brew_db.equipments.save(v60, methods=pour_over_methods)
        spy = mocker.spy(brew_db.methods, "resave_all")

        saved.description = "no rename"
        brew_db.equipments.save(saved)
        spy.assert_not_called()

        saved.name = "New name"
        brew_db.equipments.save(saved)
        spy.assert_called_once_with(saved.id)

    def test_save_with_methods_imports_missing_only(
        self, brew_db: BrewGuideDatabase, v60: EquipmentModel, pour_over_methods: list
    ):
        """Test that methods supplied on save are added once."""
        saved = brew_db.equipments.save(v60, methods=pour_over_methods)
        brew_db.equipments.save(saved, methods=pour_over_methods + [MethodModel(name="Slow")])

        names = [m.name for m in brew_db.methods.get_for_equipment(saved.id)]
        assert names == ["Classic", "Iced", "Slow"]
        assert brew_db.key_value_store.get_json(f"customMethods_{saved.id}")[2]["name"] == "Slow"

    def test_update(self, brew_db: BrewGuideDatabase, v60: EquipmentModel):
        """Test that `update` replaces an existing equipment and ignores the payload's id."""
        saved = brew_db.equipments.save(v60)
        updated = brew_db.equipments.update(saved.id, EquipmentModel(id="other", name="Replaced", animation_type="kalita"))
        assert updated.id == saved.id
        assert brew_db.equipments.get(saved.id).animation_type.value == "kalita"
        assert brew_db.equipments.get("other") is None

    def test_update_unknown(self, brew_db: BrewGuideDatabase):
        """Test that updating an id that does not exist raises."""
        with pytest.raises(EquipmentNotFoundError):
            brew_db.equipments.update("ghost", EquipmentModel(name="Ghost"))

    def test_delete_cascades_to_methods(self, brew_db: BrewGuideDatabase, v60: EquipmentModel, pour_over_methods: list):
        """Test that deleting an equipment removes it, its methods and the methods' backup key."""
        saved = brew_db.equipments.save(v60, methods=pour_over_methods)
        brew_db.equipments.delete(saved.id)

        assert brew_db.equipments.get(saved.id) is None
        assert brew_db.methods.get_for_equipment(saved.id) == []
        assert brew_db.document_store.custom_methods.get(saved.id) is None
        assert brew_db.key_value_store.get(f"customMethods_{saved.id}") is None
        assert brew_db.key_value_store.get_json("customEquipments") == []

    def test_delete_unknown(self, brew_db: BrewGuideDatabase):
        """Test that deleting an id that does not exist raises."""
        with pytest.raises(EquipmentNotFoundError):
            brew_db.equipments.delete("ghost")

    def test_delete_survives_method_cleanup_failure(
        self, brew_db: BrewGuideDatabase, v60: EquipmentModel, mocker: MockerFixture, caplog
    ):
        """
        Test that a failure deleting the methods is logged and does not undo the deletion.

        Args:
            brew_db: The database under test.
            v60: An unsaved equipment.
            mocker: PyTest mocker fixture.
            caplog: PyTest caplog fixture.
        """
        saved = brew_db.equipments.save(v60)
        mocker.patch.object(brew_db.methods, "delete_for_equipment", side_effect=MethodError("locked"))
        brew_db.equipments.delete(saved.id)
        assert brew_db.equipments.get_all() == []
        assert "its methods could not be" in caplog.text

    def test_is_name_available(self, brew_db: BrewGuideDatabase, v60: EquipmentModel):
        """Test name checks with and without the equipment being edited."""
        saved = brew_db.equipments.save(v60)
        assert brew_db.equipments.is_name_available("Something else")
        assert not brew_db.equipments.is_name_available("My V60")
        assert brew_db.equipments.is_name_available("My V60", current_id=saved.id)

    def test_write_failure_raises_domain_error(self, brew_db: BrewGuideDatabase, v60: EquipmentModel, mocker: MockerFixture):
        """
        Test that a storage failure is wrapped in `EquipmentError` and nothing stale is cached.

        Args:
            brew_db: The database under test.
            v60: An unsaved equipment.
            mocker: PyTest mocker fixture.
        """
        cause = StorageBackendError("disk full")
        mocker.patch.object(brew_db.writer, "put", side_effect=cause)
        with pytest.raises(EquipmentError) as excinfo:
            brew_db.equipments.save(v60)
        assert excinfo.value.cause is cause
        mocker.stopall()
        assert brew_db.equipments.get_all() == []

    def test_read_failure_returns_empty(self, brew_db: BrewGuideDatabase, mocker: MockerFixture, caplog):
        """Test that a failing read logs and returns an empty list."""
        mocker.patch.object(
            brew_db.document_store.custom_equipments, "to_array", side_effect=StorageBackendError("corrupt")
        )
        assert brew_db.equipments.get_all() == []
        assert brew_db.equipments.get("anything") is None
        assert "Failed to load customEquipments" in caplog.text

    def test_reads_return_copies(self, brew_db: BrewGuideDatabase, v60: EquipmentModel):
        """Test that mutating a returned equipment does not change what is stored or cached."""
        saved = brew_db.equipments.save(v60)
        brew_db.equipments.get(saved.id).name = "Mutated"
        assert brew_db.equipments.get(saved.id).name == "My V60"

    def test_first_read_migrates_legacy_data(self, brew_db: BrewGuideDatabase, memory_backend, seed_legacy):
        """Test that legacy equipment becomes visible on the first read."""
        seed_legacy(memory_backend, {"customEquipments": [{"id": "e1", "name": "Old Clever", "animationType": "clever"}]})
        [equipment] = brew_db.equipments.get_all()
        assert equipment.id == "e1"
        assert brew_db.coordinator.is_migrated()

    def test_delete_all(self, brew_db: BrewGuideDatabase, v60: EquipmentModel):
        """Test that `delete_all` empties the collection and its backup."""
        brew_db.equipments.save(v60)
        brew_db.equipments.delete_all()
        assert brew_db.equipments.get_all() == []
        assert brew_db.key_value_store.get_json("customEquipments") == []

    def test_same_name_saves_twice(self, brew_db: BrewGuideDatabase):
        """Test that two new equipments may share a name and each gets its own id."""
        first = brew_db.equipments.save(EquipmentModel(name="V60", animation_type="v60"))
        second = brew_db.equipments.save(EquipmentModel(name="V60", animation_type="v60"))

        assert EQUIPMENT_ID.match(first.id)
        assert EQUIPMENT_ID.match(second.id)
        assert first.id != second.id
        assert [e.id for e in brew_db.equipments.get_all()] == [first.id, second.id]
        assert brew_db.equipments.is_name_available("V60") is False

    def test_unknown_animation_types_stay_usable(self, brew_db: BrewGuideDatabase, memory_backend, seed_legacy):
        """Test that legacy equipment with an unsupported or missing animation type is listed and editable."""
        seed_legacy(
            memory_backend,
            {
                "customEquipments": [
                    {"id": "e1", "name": "Pour Over", "animationType": "v60"},
                    {"id": "e2", "name": "Lever", "animationType": "espresso"},
                    {"id": "e3", "name": "Mystery", "animationType": None},
                ]
            },
        )
        assert [e.id for e in brew_db.equipments.get_all()] == ["e1", "e2", "e3"]

        added = brew_db.equipments.save(EquipmentModel(name="New"))
        brew_db.equipments.delete("e2")

        assert [e.id for e in brew_db.equipments.get_all()] == ["e1", "e3", added.id]
        assert brew_db.document_store.custom_equipments.get("e2") is None

    def test_unreadable_record_is_skipped(self, brew_db: BrewGuideDatabase, mocker: MockerFixture, caplog):
        """Test that one record that fails to convert does not hide the others."""
        brew_db.coordinator.run()
        brew_db.document_store.custom_equipments.bulk_put(
            [{"id": "good", "name": "Good"}, {"id": "bad", "name": "Broken"}]
        )
        from_dict = EquipmentModel.from_dict

        def convert(record):
            if record["name"] == "Broken":
                raise ValueError("corrupt record")
            return from_dict(record)

        mocker.patch.object(EquipmentModel, "from_dict", side_effect=convert)

        assert [e.id for e in brew_db.equipments.get_all()] == ["good"]
        assert "Skipping an unreadable record in 'customEquipments'" in caplog.text
