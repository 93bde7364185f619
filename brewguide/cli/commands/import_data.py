##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
CLI module for importing a JSON export.
"""

import logging
from argparse import ArgumentParser, Namespace

from brewguide.cli.commands.command_entry_point import CommandEntryPoint
from brewguide.db_scripts.data_manager import DataManager
from brewguide.exceptions import BrewGuideError


LOG = logging.getLogger("brewguide")


class ImportCommand(CommandEntryPoint):
    """
    Handles the `import` CLI command.

    Methods:
        add_parser: Adds the `import` command to the CLI parser.
        process_command: Replaces the stored collections with those in the file.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `import` command parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `import` command parser will be added.
        """
        import_parser: ArgumentParser = subparsers.add_parser(
            "import",
            help="Import a JSON export, replacing the collections it contains.",
        )
        import_parser.set_defaults(func=self.process_command)
        import_parser.add_argument("input", type=str, help="Path to a file produced by 'brewguide export'")

    def process_command(self, args: Namespace):
        """
        CLI command to import data.

        Args:
            args: Parsed CLI arguments containing `input`.

        Raises:
            BrewGuideError: If the import failed.
        """
        with open(args.input, "r", encoding="utf-8") as import_file:
            contents = import_file.read()

        with self.open_database() as db:
            result = DataManager(db).import_all_data(contents)

        if not result.success:
            raise BrewGuideError(result.message)
        LOG.info(result.message)
