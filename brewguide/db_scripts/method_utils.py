##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Helpers shared by everything that writes a method collection: the method
manager, the equipment manager's import path and the migration coordinator.
"""

import logging
from typing import Dict, List

from brewguide.db_scripts.data_models import MethodModel
from brewguide.utils import generate_method_id


LOG = logging.getLogger(__name__)


def ensure_method_id(method: MethodModel) -> MethodModel:
    """
    Give `method` an id if it does not have one yet. An existing id is never replaced.

    Args:
        method: The method to check.

    Returns:
        The same method, now guaranteed to carry an id.
    """
    if not method.id:
        method.id = generate_method_id()
    return method


def deduplicate_methods(methods: List[MethodModel]) -> List[MethodModel]:
    """
    Collapse methods that describe the same recipe.

    Methods are keyed by id when they have one, by name otherwise. On a key
    collision the later method wins only if it carries an id. A name-only
    method whose name matches a method that has an id is dropped in favour of
    the one with the id. First-seen order is kept.

    Args:
        methods: The methods to deduplicate.

    Returns:
        A new list with no two methods sharing an id.
    """
    by_key: Dict[str, MethodModel] = {}
    for method in methods:
        key = method.id or method.name
        if key is None:
            LOG.warning("Dropping a method that has neither an id nor a name.")
            continue
        if key not in by_key or method.id:
            by_key[key] = method

    names_with_id = {method.name for method in by_key.values() if method.id}
    result = [method for method in by_key.values() if method.id or method.name not in names_with_id]
    if len(result) != len(methods):
        LOG.debug(f"Deduplicated {len(methods)} methods down to {len(result)}.")
    return result


def methods_from_records(records: List[Dict]) -> List[MethodModel]:
    """
    Convert stored method dictionaries into models, skipping anything that is
    not a dictionary.

    Args:
        records: Method dictionaries as stored.

    Returns:
        The corresponding `MethodModel` objects.
    """
    methods = []
    for record in records or []:
        if isinstance(record, dict):
            methods.append(MethodModel.from_dict(record))
        else:
            LOG.warning(f"Skipping a method that is not an object: {record!r}")
    return methods


def methods_to_records(methods: List[MethodModel]) -> List[Dict]:
    """
    Convert method models into the dictionaries that get stored.

    Args:
        methods: The methods to convert.

    Returns:
        The JSON-shaped dictionaries.
    """
    return [method.to_dict() for method in methods]
