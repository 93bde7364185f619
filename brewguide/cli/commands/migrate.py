##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
CLI module for migrating legacy flat-key data into the document store.
"""

import logging
from argparse import ArgumentParser, Namespace

from brewguide.cli.commands.command_entry_point import CommandEntryPoint


LOG = logging.getLogger("brewguide")


class MigrateCommand(CommandEntryPoint):
    """
    Handles the `migrate` CLI command.

    Methods:
        add_parser: Adds the `migrate` command to the CLI parser.
        process_command: Runs the migration and optional cleanup.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `migrate` command parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `migrate` command parser will be added.
        """
        migrate: ArgumentParser = subparsers.add_parser(
            "migrate",
            help="Copy legacy key-value data into the document store (no-op once migrated).",
        )
        migrate.set_defaults(func=self.process_command)
        migrate.add_argument(
            "--verify",
            action="store_true",
            default=False,
            help="Check that the migration marker matches the stored data first and reset it if not",
        )
        migrate.add_argument(
            "--cleanup",
            action="store_true",
            default=False,
            help="Remove legacy keys whose data is confirmed to be in the document store",
        )

    def process_command(self, args: Namespace):
        """
        CLI command to run the migration.

        Args:
            args: Parsed CLI arguments containing `verify` and `cleanup`.
        """
        with self.open_database() as db:
            if args.verify and not db.coordinator.verify_consistency():
                LOG.warning("Stored data did not match the migration marker; migrating again.")

            report = db.coordinator.run()
            if report.skipped:
                LOG.info("Nothing to migrate, data is already in the document store.")
            else:
                for key, count in report.migrated.items():
                    LOG.info(f"Migrated {count} records from '{key}'.")
                for key, reason in report.failed.items():
                    LOG.error(f"Could not migrate '{key}': {reason}")

            if args.cleanup:
                removed = db.coordinator.cleanup_legacy_keys()
                LOG.info(f"Removed legacy keys: {', '.join(removed) if removed else 'none'}")
