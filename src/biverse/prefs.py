import logging
from typing import Optional, Union

from .model import PersistenceError, Theme
from .storage import KeyValueStore


logger = logging.getLogger(__name__)

THEME_KEY = "theme"
DEFAULT_THEME = Theme.LIGHT


class PreferenceStore:
    '''The persisted light/dark display preference.'''
    def __init__(self, store: KeyValueStore):
        self._store = store
        self._theme = self._restore()
        self.last_error: Optional[PersistenceError] = None

    def _restore(self) -> Theme:
        try:
            raw = self._store.get(THEME_KEY)
        except PersistenceError as err:
            logger.warning("Could not read theme, using default: %s", err)
            return DEFAULT_THEME
        try:
            return Theme(raw)
        except ValueError:
            if raw is not None:
                logger.info("Ignoring unrecognized stored theme %r", raw)
            return DEFAULT_THEME

    def get(self) -> Theme:
        return self._theme

    def set(self, theme: Union[Theme, str]):
        theme = Theme(theme)
        self._theme = theme
        try:
            self._store.set(THEME_KEY, theme.value)
        except PersistenceError as err:
            logger.error("Could not save theme: %s", err)
            self.last_error = err
        else:
            self.last_error = None

    def toggle(self) -> Theme:
        self.set(self._theme.flipped())
        return self._theme
