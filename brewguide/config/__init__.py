##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Used to store the application configuration.

The `config` package loads the `app.yaml` file (or built-in defaults) and exposes
it as a `Config` object made of namespaces, one per configuration section.

Modules:
    config_filepaths.py: Constants for the locations searched for `app.yaml`.
    configfile.py: Loading, defaulting, and environment overrides; houses `CONFIG`.
"""
from copy import copy
from types import SimpleNamespace
from typing import Dict, List, Optional

from brewguide.utils import nested_dict_to_namespaces


class Config:  # pylint: disable=R0903
    """
    The Config class, meant to store all Brew Guide config settings in one place.

    Attributes:
        storage (Optional[SimpleNamespace]): Where the document database lives.
        key_value (Optional[SimpleNamespace]): Which key-value backend to use and how to reach it.
        cache (Optional[SimpleNamespace]): Default sizing and TTL of the in-memory caches.

    Methods:
        __copy__: Creates a shallow copy of the Config instance.
        __str__: Returns a formatted string representation of the Config instance.
        load_app_into_namespaces: Converts the provided configuration dictionary into namespaces
            and assigns them to the Config instance's attributes.
    """

    SECTIONS: List[str] = ["storage", "key_value", "cache"]

    def __init__(self, app_dict: Dict):
        """
        Initializes the Config instance with configuration data from a dictionary.

        Args:
            app_dict: A dictionary containing configuration data for the application.
        """
        self.storage: Optional[SimpleNamespace] = None
        self.key_value: Optional[SimpleNamespace] = None
        self.cache: Optional[SimpleNamespace] = None
        self.load_app_into_namespaces(app_dict)

    def __copy__(self) -> "Config":
        """
        Creates a shallow copy of the Config instance.

        Returns:
            A new Config instance with copied section namespaces.
        """
        cls = self.__class__
        result = cls.__new__(cls)
        result.__dict__.update({section: copy(self.__dict__[section]) for section in self.SECTIONS})
        return result

    def __str__(self) -> str:
        formatted_str = "config:"
        for name in self.SECTIONS:
            attr = getattr(self, name)
            if attr is not None:
                items = (f"    {k}: {v!r}" for k, v in attr.__dict__.items())
                joined_items = "\n".join(items)
                formatted_str += f"\n  {name}:\n{joined_items}"
            else:
                formatted_str += f"\n  {name}:\n    None"
        return formatted_str

    def load_app_into_namespaces(self, app_dict: Dict):
        """
        Converts the provided application dictionary into namespaces and assigns them
        to the Config instance's attributes.

        Args:
            app_dict: A dictionary containing configuration data for the application.
        """
        for field in self.SECTIONS:
            try:
                setattr(self, field, nested_dict_to_namespaces(app_dict[field]))
            except KeyError:
                # The sections are optional
                pass
