##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################
"""
Tests for the `brew_guide_db.py` module.
"""

from pytest_mock import MockerFixture

from brewguide.backends.key_value.memory_backend import MemoryKeyValueBackend
from brewguide.config import Config
from brewguide.db_scripts.brew_guide_db import BrewGuideDatabase
from brewguide.db_scripts.data_models import CoffeeBeanModel
from brewguide.db_scripts.entity_managers.brewing_note_manager import BrewingNoteManager
from brewguide.db_scripts.entity_managers.coffee_bean_manager import CoffeeBeanManager
from brewguide.db_scripts.entity_managers.equipment_manager import EquipmentManager
from brewguide.db_scripts.entity_managers.method_manager import MethodManager


def test_managers_are_wired(brew_db: BrewGuideDatabase):
    """Test that every manager is exposed and the equipment manager shares the method manager."""
    assert isinstance(brew_db.equipments, EquipmentManager)
    assert isinstance(brew_db.methods, MethodManager)
    assert isinstance(brew_db.coffee_beans, CoffeeBeanManager)
    assert isinstance(brew_db.brewing_notes, BrewingNoteManager)
    assert brew_db.equipments.method_manager is brew_db.methods


def test_each_manager_owns_a_cache(brew_db: BrewGuideDatabase, test_config: Config):
    """Test that caches are separate and sized from the configuration."""
    caches = [brew_db.equipments.cache, brew_db.methods.cache, brew_db.coffee_beans.cache, brew_db.brewing_notes.cache]
    assert len({id(cache) for cache in caches}) == 4
    assert all(cache.max_size == test_config.cache.max_size for cache in caches)


def test_db_type_and_path(brew_db: BrewGuideDatabase, tmp_path):
    """Test the reported backend name and database location."""
    assert brew_db.get_db_type() == "memory"
    assert brew_db.get_db_path() == str(tmp_path / "brewguide-test.db")


def test_backend_built_from_config(test_config: Config, tmp_path):
    """Test that, without an explicit backend, the configured one is created."""
    test_config.key_value.backend = "file"
    with BrewGuideDatabase(config=test_config) as db:
        assert db.get_db_type() == "file"
        db.key_value_store.set("theme", "dark")
    assert (tmp_path / "preferences.json").exists()


def test_invalidate_caches(brew_db: BrewGuideDatabase):
    """Test that invalidating drops every manager's cached entries."""
    brew_db.coffee_beans.add_bean(CoffeeBeanModel(name="A"))
    brew_db.coffee_beans.get_all_beans()
    assert len(brew_db.coffee_beans.cache) > 0
    brew_db.invalidate_caches()
    assert len(brew_db.coffee_beans.cache) == 0


def test_context_manager_closes(test_config: Config, mocker: MockerFixture):
    """
    Test that leaving the context closes every cache and the backend.

    Args:
        test_config: The test configuration.
        mocker: PyTest mocker fixture.
    """
    backend = MemoryKeyValueBackend()
    close_spy = mocker.spy(backend, "close")
    with BrewGuideDatabase(config=test_config, key_value_backend=backend) as db:
        cache_close = mocker.spy(db.coffee_beans.cache, "close")
    cache_close.assert_called_once()
    close_spy.assert_called_once()
