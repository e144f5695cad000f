import json
import logging
from typing import Iterator, Optional

from .model import PersistenceError, Verse
from .storage import KeyValueStore


logger = logging.getLogger(__name__)

FAVORITES_KEY = "favorites"


class FavoritesSet:
    '''Deduplicated, insertion-ordered set of favorite verses.

    Membership is by (reference, text). Every change is written through to
    the store; a failed write is logged and kept in `last_error` but the
    in-memory set still reflects the change.
    '''
    def __init__(self, store: KeyValueStore):
        self._store = store
        self._members: dict[tuple[str, str], Verse] = {}
        self.last_error: Optional[PersistenceError] = None
        for v in self._restore():
            self._members.setdefault(v.key, v)

    def _restore(self) -> list[Verse]:
        try:
            raw = self._store.get(FAVORITES_KEY)
        except PersistenceError as err:
            logger.warning("Could not read favorites, starting empty: %s", err)
            return []
        if raw is None:
            return []
        try:
            records = json.loads(raw)
        except json.JSONDecodeError as err:
            logger.warning("Stored favorites are not valid JSON, starting empty: %s", err)
            return []
        if not isinstance(records, list):
            logger.warning("Stored favorites are not a list, starting empty")
            return []

        verses = []
        for record in records:
            try:
                verses.append(Verse.from_record(record, require_emotion=False))
            except ValueError as err:
                logger.warning("Dropping stored favorite: %s", err)
        return verses

    def _persist(self):
        payload = json.dumps([v.to_record() for v in self._members.values()])
        try:
            self._store.set(FAVORITES_KEY, payload)
        except PersistenceError as err:
            logger.error("Could not save favorites: %s", err)
            self.last_error = err
        else:
            self.last_error = None

    def add(self, verse: Verse):
        if verse.key not in self._members:
            self._members[verse.key] = verse
            self._persist()

    def remove(self, verse: Verse):
        if self._members.pop(verse.key, None) is not None:
            self._persist()

    def contains(self, verse: Verse) -> bool:
        return verse.key in self._members

    def toggle(self, verse: Verse) -> bool:
        """Flip membership of `verse`; returns whether it is now a favorite."""
        if self.contains(verse):
            self.remove(verse)
            return False
        self.add(verse)
        return True

    def all(self) -> list[Verse]:
        return list(self._members.values())

    def __contains__(self, verse: Verse) -> bool:
        return self.contains(verse)

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Verse]:
        return iter(self.all())
