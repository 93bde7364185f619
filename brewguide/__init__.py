##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Brew Guide: local persistence and caching for coffee-brewing data.

This module contains the source code for the Brew Guide storage layer.
"""

__version__ = "1.2.4"
VERSION = __version__
