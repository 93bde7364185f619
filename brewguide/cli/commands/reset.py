##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
CLI module for deleting stored data.
"""

import logging
from argparse import ArgumentParser, Namespace

from brewguide.cli.commands.command_entry_point import CommandEntryPoint
from brewguide.db_scripts.data_manager import DataManager
from brewguide.exceptions import BrewGuideError


LOG = logging.getLogger("brewguide")


class ResetCommand(CommandEntryPoint):
    """
    Handles the `reset` CLI command.

    Methods:
        add_parser: Adds the `reset` command to the CLI parser.
        process_command: Deletes the stored data after confirmation.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `reset` command parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `reset` command parser will be added.
        """
        reset: ArgumentParser = subparsers.add_parser(
            "reset",
            help="Delete coffee beans, brewing notes, custom equipment and settings.",
        )
        reset.set_defaults(func=self.process_command)
        reset.add_argument(
            "--complete",
            action="store_true",
            default=False,
            help="Also delete the custom methods of every equipment",
        )
        reset.add_argument(
            "-f",
            "--force",
            action="store_true",
            dest="reset_force",
            default=False,
            help="Reset without confirmation",
        )

    def process_command(self, args: Namespace):
        """
        CLI command to reset the data.

        Args:
            args: Parsed CLI arguments containing `complete` and `reset_force`.

        Raises:
            BrewGuideError: If the reset failed.
        """
        if not args.reset_force:
            answer = input("This deletes your stored data. Continue? (y/n): ")
            if answer.strip().lower() not in ("y", "yes"):
                LOG.info("Reset cancelled.")
                return

        with self.open_database() as db:
            result = DataManager(db).reset_all_data(complete_reset=args.complete)

        if not result.success:
            raise BrewGuideError(result.message)
        LOG.info(result.message)
