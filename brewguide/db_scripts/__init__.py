##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
The `db_scripts` package provides the data models, the entity managers and the
database facade of Brew Guide.

Subpackages:
    - `entity_managers/`: One manager per stored collection, all built on `EntityManager`.

Modules:
    data_models.py: The dataclasses stored in the database, such as
        [`EquipmentModel`][db_scripts.data_models.EquipmentModel] and
        [`MethodModel`][db_scripts.data_models.MethodModel].
    method_utils.py: Method id assignment and deduplication.
    migration_coordinator.py: The one-shot migration of legacy flat-key data.
    brew_guide_db.py: The [`BrewGuideDatabase`][db_scripts.brew_guide_db.BrewGuideDatabase]
        facade wiring stores, caches and managers together.
    data_manager.py: Whole-database export, import and reset.
"""
