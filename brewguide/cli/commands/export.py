##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
CLI module for exporting every collection to a JSON file.
"""

import logging
from argparse import ArgumentParser, Namespace

from brewguide.cli.commands.command_entry_point import CommandEntryPoint
from brewguide.db_scripts.data_manager import DataManager


LOG = logging.getLogger("brewguide")


class ExportCommand(CommandEntryPoint):
    """
    Handles the `export` CLI command.

    Methods:
        add_parser: Adds the `export` command to the CLI parser.
        process_command: Writes the export to a file or stdout.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `export` command parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `export` command parser will be added.
        """
        export: ArgumentParser = subparsers.add_parser("export", help="Export every collection as JSON.")
        export.set_defaults(func=self.process_command)
        export.add_argument(
            "-o",
            "--output",
            type=str,
            default=None,
            help="File to write the export to. Printed to stdout if omitted.",
        )

    def process_command(self, args: Namespace):
        """
        CLI command to export the data.

        Args:
            args: Parsed CLI arguments containing `output`.
        """
        with self.open_database() as db:
            exported = DataManager(db).export_all_data()

        if args.output is None:
            print(exported)
            return
        with open(args.output, "w", encoding="utf-8") as export_file:
            export_file.write(exported)
        LOG.info(f"Exported data to '{args.output}'.")
