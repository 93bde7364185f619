##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
The `backends` package contains the two storage tiers used by Brew Guide.

Subpackages:
    key_value: The flat key-value store and its backends (file, Redis, memory).
    sqlite: The SQLite document store that is the system of record.

Modules:
    backend_factory: Selects and builds a key-value backend by name.
    replica: Writes a record to the document store and mirrors it to the key-value store.
"""
