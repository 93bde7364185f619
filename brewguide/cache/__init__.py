##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
In-process caching used by the entity managers to avoid redundant reads of the
document store.

Modules:
    generic_cache: `GenericCache`, a TTL cache with optional LRU eviction.
"""
