##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
The `key_value` package holds the small-capacity preference store and its
pluggable backends.

Modules:
    key_value_backend: The abstract `KeyValueBackend` every backend implements.
    file_backend: A JSON file on disk guarded by a file lock.
    redis_backend: A Redis server.
    memory_backend: A process-local dictionary.
    key_value_store: The `KeyValueStore` adapter used by the rest of Brew Guide.
"""
