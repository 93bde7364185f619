##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
The `cli` package contains the command-line interface of Brew Guide.

Modules:
    argparse_main: Builds the main argument parser.

Subpackages:
    commands: One module per subcommand.
"""
