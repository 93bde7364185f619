##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
This directory is for modularizing fixture definitions so that `conftest.py`
does not grow into one huge file. Every module here is loaded as a plugin by
`tests/conftest.py`.
"""
