##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Main entry point into Brew Guide's command-line interface.
"""

import logging
import sys
import traceback

from brewguide.cli.argparse_main import build_main_parser
from brewguide.config.configfile import initialize_config
from brewguide.log_formatter import setup_logging


LOG = logging.getLogger("brewguide")


def main():
    """
    Entry point for the Brew Guide command-line interface (CLI) operations.

    Sets up the argument parser and logging, loads the configuration, and
    runs the selected subcommand. Any error is logged and turned into a
    non-zero exit code.
    """
    parser = build_main_parser()
    if len(sys.argv) == 1:
        parser.print_help(sys.stdout)
        return 1
    args = parser.parse_args()

    setup_logging(logger=LOG, log_level=args.level.upper(), colors=True)

    try:
        if args.config_dir is not None:
            initialize_config(args.config_dir)
        args.func(args)
        # pylint complains that this exception is too broad - being at the literal top of the program stack, it's ok.
    except Exception as excpt:  # pylint: disable=broad-except
        LOG.debug(traceback.format_exc())
        LOG.error(str(excpt))
        sys.exit(1)

    sys.exit()


if __name__ == "__main__":
    main()
