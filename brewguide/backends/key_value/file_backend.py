##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Key-value backend that keeps every preference in a single JSON file.

Writes go to a temporary file that is atomically swapped in with `os.replace`,
and every access is guarded by a `FileLock` so that two processes sharing the
same data directory never interleave a read-modify-write.
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from filelock import FileLock, Timeout

from brewguide.backends.key_value.key_value_backend import KeyValueBackend
from brewguide.exceptions import StorageBackendError


LOG = logging.getLogger(__name__)


class FileKeyValueBackend(KeyValueBackend):
    """
    A `KeyValueBackend` persisted to a JSON object on disk.

    Attributes:
        backend_name (str): The name of the backend.
        filepath (Path): The JSON file holding every key.
        lock_timeout (float): Seconds to wait for the file lock.

    Methods:
        get: Read a value, or None if the key is missing.
        set: Write a value.
        remove: Delete a key (no-op if missing).
        clear: Delete every key.
        keys: List every key.
    """

    def __init__(self, filepath: str, backend_name: str = "file", lock_timeout: float = 10.0):
        """
        Args:
            filepath: Path to the JSON preferences file. Parent directories are created.
            backend_name: The name of the backend.
            lock_timeout: Seconds to wait for the file lock before giving up.
        """
        super().__init__(backend_name)
        self.filepath: Path = Path(filepath).expanduser()
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        self.lock_timeout: float = lock_timeout
        self._lock = FileLock(f"{self.filepath}.lock", timeout=lock_timeout)

    def _read(self) -> Dict[str, str]:
        if not self.filepath.exists():
            return {}
        try:
            with open(self.filepath, "r", encoding="utf-8") as json_file:
                contents = json.load(json_file)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageBackendError(f"Could not read preferences file '{self.filepath}'", cause=exc) from exc
        if not isinstance(contents, dict):
            raise StorageBackendError(f"Preferences file '{self.filepath}' does not hold a JSON object")
        return contents

    def _write(self, contents: Dict[str, str]):
        tmp_path = self.filepath.with_name(f"{self.filepath.name}.tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as json_file:
                json.dump(contents, json_file, ensure_ascii=False)
            os.replace(tmp_path, self.filepath)
        except OSError as exc:
            raise StorageBackendError(f"Could not write preferences file '{self.filepath}'", cause=exc) from exc

    def _locked(self) -> FileLock:
        try:
            return self._lock.acquire()
        except Timeout as exc:
            raise StorageBackendError(
                f"Timed out after {self.lock_timeout}s waiting for the lock on '{self.filepath}'", cause=exc
            ) from exc

    def get(self, key: str) -> Optional[str]:
        with self._locked():
            return self._read().get(key)

    def set(self, key: str, value: str):
        with self._locked():
            contents = self._read()
            contents[key] = value
            self._write(contents)
        LOG.debug(f"Wrote key '{key}' to '{self.filepath}'.")

    def remove(self, key: str):
        with self._locked():
            contents = self._read()
            if key in contents:
                del contents[key]
                self._write(contents)

    def clear(self):
        with self._locked():
            self._write({})

    def keys(self) -> List[str]:
        with self._locked():
            return list(self._read().keys())
