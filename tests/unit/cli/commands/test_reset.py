##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################
"""
Tests for the `reset.py` file of the `cli/` folder.
"""

import pytest
from pytest_mock import MockerFixture

from brewguide.cli.commands.reset import ResetCommand
from brewguide.db_scripts.brew_guide_db import BrewGuideDatabase
from brewguide.db_scripts.data_models import CoffeeBeanModel, EquipmentModel
from brewguide.db_scripts.data_manager import ImportResult
from brewguide.exceptions import BrewGuideError
from tests.fixture_types import FixtureCallable


@pytest.fixture
def stocked_db(open_db: BrewGuideDatabase, v60: EquipmentModel, pour_over_methods: list) -> BrewGuideDatabase:
    """
    The command database holding a bean, an equipment and its methods.

    Args:
        open_db: The database the command operates on.
        v60: An unsaved equipment.
        pour_over_methods: Methods for the equipment.

    Returns:
        The filled database.
    """
    open_db.coffee_beans.add_bean(CoffeeBeanModel(name="Kenya AA"))
    open_db.equipments.save(v60, methods=pour_over_methods)
    return open_db


def test_add_parser_defaults(create_parser: FixtureCallable):
    """
    Test the default flags of the `reset` command.

    Args:
        create_parser: A fixture to help create a parser.
    """
    args = create_parser(ResetCommand()).parse_args(["reset"])
    assert args.complete is False
    assert args.reset_force is False


def test_forced_reset_keeps_methods(stocked_db: BrewGuideDatabase, create_parser: FixtureCallable):
    """
    Test that a plain reset deletes the main collections but keeps methods.

    Args:
        stocked_db: The filled database.
        create_parser: A fixture to help create a parser.
    """
    command = ResetCommand()
    command.process_command(create_parser(command).parse_args(["reset", "-f"]))

    assert stocked_db.coffee_beans.get_all_beans() == []
    assert stocked_db.equipments.get_all() == []
    assert stocked_db.document_store.custom_methods.count() == 1


def test_complete_reset_deletes_methods(stocked_db: BrewGuideDatabase, create_parser: FixtureCallable):
    """
    Test that `--complete` also removes the method collections.

    Args:
        stocked_db: The filled database.
        create_parser: A fixture to help create a parser.
    """
    command = ResetCommand()
    command.process_command(create_parser(command).parse_args(["reset", "--complete", "--force"]))

    assert stocked_db.document_store.custom_methods.count() == 0


@pytest.mark.parametrize("answer, deleted", [("y", True), ("YES", True), ("n", False), ("", False)])
def test_confirmation_prompt(
    mocker: MockerFixture, stocked_db: BrewGuideDatabase, create_parser: FixtureCallable, answer: str, deleted: bool
):
    """
    Test that without `--force` the user's answer decides whether anything is deleted.

    Args:
        mocker: PyTest mocker fixture.
        stocked_db: The filled database.
        create_parser: A fixture to help create a parser.
        answer: What the user types.
        deleted: Whether the beans should be gone afterwards.
    """
    mocker.patch("builtins.input", return_value=answer)
    command = ResetCommand()
    command.process_command(create_parser(command).parse_args(["reset"]))

    assert (stocked_db.coffee_beans.get_all_beans() == []) is deleted


def test_failed_reset_raises(mocker: MockerFixture, open_db: BrewGuideDatabase, create_parser: FixtureCallable):
    """
    Test that a reset reported as failed becomes an error.

    Args:
        mocker: PyTest mocker fixture.
        open_db: The database the command operates on.
        create_parser: A fixture to help create a parser.
    """
    mocker.patch(
        "brewguide.cli.commands.reset.DataManager.reset_all_data",
        return_value=ImportResult(False, "Reset failed: disk full"),
    )
    command = ResetCommand()
    with pytest.raises(BrewGuideError, match="disk full"):
        command.process_command(create_parser(command).parse_args(["reset", "-f"]))
