##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Module for project-wide utility functions.
"""

import logging
import random
import string
import time
import uuid
from copy import deepcopy
from types import SimpleNamespace
from typing import Any, Dict

import yaml


LOG = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def load_yaml(filepath: str) -> Dict:
    """
    Safely read a YAML file and return its contents.

    Args:
        filepath: The file path to the YAML file to be read.

    Returns:
        A dict representing the contents of the YAML file.
    """
    with open(filepath, "r") as _file:
        return yaml.safe_load(_file)


def nested_dict_to_namespaces(dic: Dict) -> SimpleNamespace:
    """
    Convert a nested dictionary into a nested SimpleNamespace structure.

    Args:
        dic: The nested dictionary to be converted.

    Returns:
        A SimpleNamespace object representing the nested structure of the input dictionary.

    Raises:
        TypeError: If the input is not a dictionary.
    """

    def recurse(dic):
        if not isinstance(dic, dict):
            return dic
        for key, val in list(dic.items()):
            dic[key] = recurse(val)
        return SimpleNamespace(**dic)

    if not isinstance(dic, dict):
        raise TypeError(f"{dic} is not a dict")

    new_dic = deepcopy(dic)
    return recurse(new_dic)


def dict_deep_merge(dict_a: Dict, dict_b: Dict):
    """
    Recursively merges `dict_b` into `dict_a`. Values from `dict_b` win on
    conflicting leaves; nested dictionaries are merged rather than replaced.

    Args:
        dict_a: The dictionary that will be merged into.
        dict_b: The dictionary to merge into `dict_a`.
    """
    if not isinstance(dict_a, dict) or not isinstance(dict_b, dict):
        LOG.warning(f"Problem with dict_deep_merge: '{dict_a}' or '{dict_b}' is not a dict. Ignoring this merge call.")
        return

    for key, val in dict_b.items():
        if isinstance(dict_a.get(key), dict) and isinstance(val, dict):
            dict_deep_merge(dict_a[key], val)
        else:
            dict_a[key] = val


def current_millis() -> int:
    """
    Get the current wall-clock time in epoch milliseconds, the unit that the
    stored records use for their `timestamp` fields.

    Returns:
        The current time in milliseconds.
    """
    return int(time.time() * 1000)


def random_token(length: int = 9) -> str:
    """
    Build a short lowercase alphanumeric token.

    Args:
        length: The number of characters to generate.

    Returns:
        A random token like `k3v9q0z1a`.
    """
    return "".join(random.choices(_ID_ALPHABET, k=length))


def generate_equipment_id(animation_type: str) -> str:
    """
    Generate the id of a new custom equipment. The id is never regenerated
    afterwards, even if the equipment is renamed.

    Args:
        animation_type: The animation type of the equipment (e.g. `v60`).

    Returns:
        An id of the form `custom-<animationType>-<millis>-<token>`.
    """
    return f"custom-{animation_type}-{current_millis()}-{random_token()}"


def generate_method_id() -> str:
    """
    Generate the id of a new custom method.

    Returns:
        An id of the form `method-<uuid4>`.
    """
    return f"method-{uuid.uuid4()}"


def generate_record_id() -> str:
    """
    Generate the id of a new coffee bean or brewing note.

    Returns:
        A 21 character alphanumeric id.
    """
    return random_token(21)


def format_number(value: Any) -> str:
    """
    Format a number without a trailing `.0` for whole values and with one
    decimal place otherwise.

    Args:
        value: The number to format.

    Returns:
        The formatted string, e.g. `12` or `12.5`.
    """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{value:.1f}"
