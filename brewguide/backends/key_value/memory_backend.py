##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Process-local key-value backend. Nothing survives the process; useful for
tests and for running without a writable home directory.
"""

from typing import Dict, List, Optional

from brewguide.backends.key_value.key_value_backend import KeyValueBackend


class MemoryKeyValueBackend(KeyValueBackend):
    """
    A `KeyValueBackend` that keeps everything in a dictionary.
    """

    def __init__(self, backend_name: str = "memory", initial: Dict[str, str] = None):
        super().__init__(backend_name)
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str):
        self._data[key] = value

    def remove(self, key: str):
        self._data.pop(key, None)

    def clear(self):
        self._data.clear()

    def keys(self) -> List[str]:
        return list(self._data.keys())
