##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################
"""
Tests for the `coffee_bean_manager.py` module.
"""

import re

import pytest
from pytest_mock import MockerFixture

from brewguide.db_scripts.brew_guide_db import BrewGuideDatabase
from brewguide.db_scripts.data_models import CoffeeBeanModel
from brewguide.db_scripts.entity_managers.coffee_bean_manager import DEFAULT_ROAST_LEVEL
from brewguide.events import DATA_CHANGED
from brewguide.exceptions import CoffeeBeanError, StorageBackendError


RECORD_ID = re.compile(r"^[a-z0-9]{21}$")


@pytest.fixture
def kenya() -> CoffeeBeanModel:
    """An unsaved bag of beans with 100g left."""
    return CoffeeBeanModel(name="Kenya AA", capacity="250", remaining="100", bean_type="filter")


class TestCoffeeBeanManager:
    """
    Tests for `CoffeeBeanManager`, run against a real SQLite document store
    and an in-memory key-value store.
    """

    def test_add_bean(self, brew_db: BrewGuideDatabase, kenya: CoffeeBeanModel, mocker: MockerFixture):
        """
        Test that a new bean gets an id, a timestamp and the default roast level.

        Args:
            brew_db: The database under test.
            kenya: An unsaved bean.
            mocker: PyTest mocker fixture.
        """
        mocker.patch("brewguide.db_scripts.entity_managers.coffee_bean_manager.current_millis", return_value=1234)
        added = brew_db.coffee_beans.add_bean(kenya)
        assert RECORD_ID.match(added.id)
        assert added.timestamp == 1234
        assert added.roast_level == DEFAULT_ROAST_LEVEL
        assert brew_db.coffee_beans.get_bean_by_id(added.id) == added
        assert brew_db.key_value_store.get_json("coffeeBeans")[0]["id"] == added.id

    def test_add_bean_ignores_supplied_id(self, brew_db: BrewGuideDatabase, kenya: CoffeeBeanModel):
        """Test that two adds of the same bean create two records."""
        kenya.id = "fixed"
        first = brew_db.coffee_beans.add_bean(kenya)
        second = brew_db.coffee_beans.add_bean(kenya)
        assert first.id != second.id != "fixed"
        assert len(brew_db.coffee_beans.get_all_beans()) == 2

    def test_lookups(self, brew_db: BrewGuideDatabase, kenya: CoffeeBeanModel):
        """Test the id and name lookups, including misses."""
        added = brew_db.coffee_beans.add_bean(kenya)
        assert brew_db.coffee_beans.get_bean_by_name("Kenya AA").id == added.id
        assert brew_db.coffee_beans.get_bean_by_name("Unknown") is None
        assert brew_db.coffee_beans.get_bean_by_id("missing") is None

    def test_update_bean(self, brew_db: BrewGuideDatabase, kenya: CoffeeBeanModel, mocker: MockerFixture):
        """Test that an update applies the fields, refreshes the timestamp and is visible by id."""
        clock = mocker.patch("brewguide.db_scripts.entity_managers.coffee_bean_manager.current_millis", return_value=1)
        added = brew_db.coffee_beans.add_bean(kenya)
        brew_db.coffee_beans.get_bean_by_id(added.id)

        clock.return_value = 2
        updated = brew_db.coffee_beans.update_bean(added.id, {"name": "Kenya AB", "origin": "Nyeri"})
        assert updated.timestamp == 2
        assert updated.additional_data == {"origin": "Nyeri"}
        assert brew_db.coffee_beans.get_bean_by_id(added.id).name == "Kenya AB"

    def test_update_unknown_bean(self, brew_db: BrewGuideDatabase):
        """Test that updating an unknown bean returns None."""
        assert brew_db.coffee_beans.update_bean("missing", {"name": "x"}) is None

    @pytest.mark.parametrize(
        "remaining, used, expected",
        [("100", 15.5, "84.5"), ("100", 20, "80"), ("10", 25, "0"), ("", 5, "0"), ("lots", 5, "0")],
    )
    def test_update_bean_remaining(
        self, brew_db: BrewGuideDatabase, kenya: CoffeeBeanModel, remaining: str, used: float, expected: str
    ):
        """
        Test that the used amount is subtracted, formatted, and clamped at zero.

        Args:
            brew_db: The database under test.
            kenya: An unsaved bean.
            remaining: The bean's remaining amount before brewing.
            used: Grams used.
            expected: The remaining amount afterwards.
        """
        kenya.remaining = remaining
        added = brew_db.coffee_beans.add_bean(kenya)
        assert brew_db.coffee_beans.update_bean_remaining(added.id, used).remaining == expected

    @pytest.mark.parametrize("used", [0, -3, None])
    def test_update_bean_remaining_rejects_non_positive(self, brew_db: BrewGuideDatabase, kenya: CoffeeBeanModel, used):
        """Test that a non-positive amount changes nothing."""
        added = brew_db.coffee_beans.add_bean(kenya)
        assert brew_db.coffee_beans.update_bean_remaining(added.id, used) is None
        assert brew_db.coffee_beans.get_bean_by_id(added.id).remaining == "100"

    def test_update_bean_remaining_unknown(self, brew_db: BrewGuideDatabase):
        """Test that an unknown bean returns None."""
        assert brew_db.coffee_beans.update_bean_remaining("missing", 5) is None

    def test_ratings(self, brew_db: BrewGuideDatabase):
        """Test that rating a bean without a type files it as a filter bean."""
        plain = brew_db.coffee_beans.add_bean(CoffeeBeanModel(name="Plain"))
        espresso = brew_db.coffee_beans.add_bean(CoffeeBeanModel(name="Blend", bean_type="espresso"))
        brew_db.coffee_beans.add_bean(CoffeeBeanModel(name="Unrated"))

        assert brew_db.coffee_beans.update_bean_ratings(plain.id, {"overallRating": 4}).bean_type == "filter"
        brew_db.coffee_beans.update_bean_ratings(espresso.id, {"overallRating": 5, "beanType": "espresso"})

        assert {b.name for b in brew_db.coffee_beans.get_rated_beans()} == {"Plain", "Blend"}
        assert [b.name for b in brew_db.coffee_beans.get_rated_beans_by_type("espresso")] == ["Blend"]

    def test_ratings_from_imported_strings(self, brew_db: BrewGuideDatabase):
        """Test that a rating given as a string is stored as a number, and a non-numeric one is a `CoffeeBeanError`."""
        bean = brew_db.coffee_beans.add_bean(CoffeeBeanModel(name="Imported"))

        rated = brew_db.coffee_beans.update_bean_ratings(bean.id, {"overallRating": "4"})
        assert rated.overall_rating == 4.0
        assert rated.bean_type == "filter"

        with pytest.raises(CoffeeBeanError):
            brew_db.coffee_beans.update_bean_ratings(bean.id, {"overallRating": "great"})
        with pytest.raises(CoffeeBeanError):
            brew_db.coffee_beans.update_bean_ratings(bean.id, {"overallRating": [4]})
        assert brew_db.coffee_beans.get_bean_by_id(bean.id).overall_rating == 4.0

    def test_delete_bean(self, brew_db: BrewGuideDatabase, kenya: CoffeeBeanModel):
        """Test that deleting reports whether a bean was removed."""
        added = brew_db.coffee_beans.add_bean(kenya)
        assert brew_db.coffee_beans.delete_bean("missing") is False
        assert brew_db.coffee_beans.delete(added.id) is True
        assert brew_db.coffee_beans.get_all_beans() == []
        assert brew_db.key_value_store.get_json("coffeeBeans") == []

    def test_batch_operation_publishes_one_event(self, brew_db: BrewGuideDatabase, recorded_events: list):
        """Test that writes inside a batch are silent and the batch end announces them once."""
        brew_db.coffee_beans.start_batch_operation()
        first = brew_db.coffee_beans.add_bean(CoffeeBeanModel(name="One", remaining="50"))
        brew_db.coffee_beans.add_bean(CoffeeBeanModel(name="Two"))
        brew_db.coffee_beans.update_bean_remaining(first.id, 10)
        assert recorded_events == []

        brew_db.coffee_beans.end_batch_operation()
        assert recorded_events == [(DATA_CHANGED, {"key": "coffeeBeans"})]
        assert len(brew_db.coffee_beans.get_all_beans()) == 2

    def test_write_failure_raises_domain_error(self, brew_db: BrewGuideDatabase, kenya: CoffeeBeanModel, mocker):
        """Test that a storage failure is wrapped in `CoffeeBeanError`."""
        mocker.patch.object(brew_db.writer, "put", side_effect=StorageBackendError("disk full"))
        with pytest.raises(CoffeeBeanError):
            brew_db.coffee_beans.add_bean(kenya)
