##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
The `entity_managers` package contains one manager per stored collection.

Modules:
    entity_manager: The abstract `EntityManager` base class.
    equipment_manager: Custom equipment, including the rename and delete cascades.
    method_manager: The method collection of each equipment.
    coffee_bean_manager: The coffee bean inventory.
    brewing_note_manager: Brewing notes.
"""
