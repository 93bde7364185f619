##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
This module stores constants representing file paths that will be needed for
Brew Guide's configuration.
"""

import os


APP_FILENAME: str = "app.yaml"
USER_HOME: str = os.path.expanduser("~")
BREWGUIDE_HOME: str = os.environ.get("BREWGUIDE_HOME", os.path.join(USER_HOME, ".brewguide"))
