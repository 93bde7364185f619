##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Brew Guide CLI Commands Package.

Each module encapsulates the argument parsing and logic of one subcommand,
built around the `CommandEntryPoint` interface.

Modules:
    command_entry_point: Defines the abstract base class `CommandEntryPoint` for all CLI commands.
    export: Implements the `export` command.
    import_data: Implements the `import` command.
    info: Implements the `info` command.
    migrate: Implements the `migrate` command.
    reset: Implements the `reset` command.
"""

from brewguide.cli.commands.export import ExportCommand
from brewguide.cli.commands.import_data import ImportCommand
from brewguide.cli.commands.info import InfoCommand
from brewguide.cli.commands.migrate import MigrateCommand
from brewguide.cli.commands.reset import ResetCommand


# Keep these in alphabetical order
ALL_COMMANDS = [
    ExportCommand(),
    ImportCommand(),
    InfoCommand(),
    MigrateCommand(),
    ResetCommand(),
]
