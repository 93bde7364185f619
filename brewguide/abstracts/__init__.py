##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Abstract building blocks shared across Brew Guide packages.

Modules:
    factory: Contains `BrewGuideBaseFactory`, the registry/factory used to select pluggable components.
"""

from brewguide.abstracts.factory import BrewGuideBaseFactory


__all__ = ["BrewGuideBaseFactory"]
