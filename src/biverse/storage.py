'''String key-value persistence for favorites and display preferences.

Backed by a cachelib cache with no expiry: a `FileSystemCache` when a
directory is configured, a `SimpleCache` (process memory) otherwise.
'''
from __future__ import annotations
import logging
from typing import Optional

from cachelib.base import BaseCache
from cachelib.file import FileSystemCache
from cachelib.simple import SimpleCache

from .model import PersistenceError


logger = logging.getLogger(__name__)


class KeyValueStore:
    def __init__(self, cache: BaseCache):
        self._cache = cache

    @staticmethod
    def open(directory: Optional[str] = None) -> KeyValueStore:
        '''Open a durable store in `directory`, or an in-memory one if None.

        Raises PersistenceError if the directory cannot be used.
        '''
        if directory is None:
            return KeyValueStore(SimpleCache(default_timeout=0))
        try:
            return KeyValueStore(FileSystemCache(directory, threshold=0, default_timeout=0))
        except OSError as err:
            raise PersistenceError(f"cannot open store directory '{directory}': {err}") from err

    def get(self, key: str) -> Optional[str]:
        try:
            value = self._cache.get(key)
        except Exception as err:
            raise PersistenceError(f"reading '{key}' failed: {err}") from err
        if value is not None and not isinstance(value, str):
            raise PersistenceError(f"stored '{key}' is not a string")
        return value

    def set(self, key: str, value: str):
        try:
            ok = self._cache.set(key, value, timeout=0)
        except Exception as err:
            raise PersistenceError(f"writing '{key}' failed: {err}") from err
        if not ok:
            raise PersistenceError(f"writing '{key}' failed")
