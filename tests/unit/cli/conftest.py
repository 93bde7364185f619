##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################
"""
Fixtures for files in this `cli/` test directory.
"""

from argparse import ArgumentParser
from contextlib import nullcontext

import pytest
from pytest_mock import MockerFixture

from brewguide.cli.commands.command_entry_point import CommandEntryPoint
from brewguide.db_scripts.brew_guide_db import BrewGuideDatabase
from tests.fixture_types import FixtureCallable


@pytest.fixture
def create_parser() -> FixtureCallable:
    """
    A fixture to help create a parser for any command.

    Returns:
        A function that creates a parser.
    """

    def _create_parser(cmd: CommandEntryPoint) -> ArgumentParser:
        """
        Returns an `ArgumentParser` configured with the `cmd` command.

        Returns:
            Parser with the `cmd` command registered.
        """
        parser = ArgumentParser()
        subparsers = parser.add_subparsers(dest="main_command")
        cmd.add_parser(subparsers)
        return parser

    return _create_parser


@pytest.fixture
def open_db(mocker: MockerFixture, brew_db: BrewGuideDatabase) -> BrewGuideDatabase:
    """
    Make every command operate on the test database. The database is handed
    out through `nullcontext` so the command's `with` block leaves it open.

    Args:
        mocker: PyTest mocker fixture.
        brew_db: The test database.

    Returns:
        The database the commands will use.
    """
    mocker.patch.object(CommandEntryPoint, "open_database", return_value=nullcontext(brew_db))
    return brew_db
