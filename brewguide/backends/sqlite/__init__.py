##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
SQLite-based document storage for Brew Guide.

This package provides the system of record for every entity collection
(coffee beans, brewing notes, custom equipment, custom methods and settings).

Modules:
    sqlite_connection: Provides a context-managed SQLite connection with safe configuration.
    sqlite_collection: A collection of JSON records stored in one SQLite table.
    document_store: The `DocumentStore` grouping every collection Brew Guide uses.
"""
