##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Defines the abstract base class for Brew Guide CLI commands.

This module provides the `CommandEntryPoint` abstract base class that all
command implementations must inherit from.
"""

from abc import ABC, abstractmethod
from argparse import ArgumentParser, Namespace

from brewguide.db_scripts.brew_guide_db import BrewGuideDatabase


class CommandEntryPoint(ABC):
    """
    Abstract base class for a Brew Guide CLI command entry point.

    Methods:
        add_parser: Adds the parser for a specific command to the main `ArgumentParser`.
        process_command: Executes the logic for this CLI command.
        open_database: Opens the database described by the loaded configuration.
    """

    @abstractmethod
    def add_parser(self, subparsers: ArgumentParser):
        """Add the parser for this command to the main `ArgumentParser`."""
        raise NotImplementedError("Subclasses of `CommandEntryPoint` must implement an `add_parser` method.")

    @abstractmethod
    def process_command(self, args: Namespace):
        """Execute the logic for this CLI command."""
        raise NotImplementedError("Subclasses of `CommandEntryPoint` must implement a `process_command` method.")

    def open_database(self) -> BrewGuideDatabase:
        """
        Open the database described by the loaded configuration.

        Returns:
            A `BrewGuideDatabase`; use it as a context manager so it gets closed.
        """
        return BrewGuideDatabase()
