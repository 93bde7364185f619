##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
CLI module for displaying where Brew Guide stores its data and how much is stored.
"""

from argparse import ArgumentParser, Namespace

from tabulate import tabulate

from brewguide.cli.commands.command_entry_point import CommandEntryPoint
from brewguide.db_scripts.data_manager import DataManager


class InfoCommand(CommandEntryPoint):
    """
    Handles the `info` CLI command.

    Methods:
        add_parser: Adds the `info` command to the CLI parser.
        process_command: Prints the configuration and storage statistics.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `info` command parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `info` command parser will be added.
        """
        info: ArgumentParser = subparsers.add_parser(
            "info",
            help="Display the storage configuration and how much data each collection holds.",
        )
        info.set_defaults(func=self.process_command)

    def process_command(self, args: Namespace):
        """
        CLI command to print storage information.

        Args:
            args: Parsed CLI arguments.
        """
        with self.open_database() as db:
            conf = {
                "document store": db.get_db_path(),
                "key-value backend": db.get_db_type(),
                "migration state": db.coordinator.state.value,
            }
            print(tabulate(conf.items(), tablefmt="presto"))
            print()

            storage_info = DataManager(db).get_storage_info()
            key_value = storage_info.pop("keyValue")
            rows = [[name, stats["count"], stats["size"]] for name, stats in storage_info.items()]
            rows.append([f"key-value ({key_value['backend']})", key_value["count"], "-"])
            print(tabulate(rows, headers=["Collection", "Records", "Bytes"]))
