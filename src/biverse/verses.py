'''Tools for loading the emotion-tagged verse collection.
'''
from __future__ import annotations
import json
import logging
import os
from collections.abc import Mapping, Sequence
from typing import Iterator, TextIO

from .model import DataLoadError, Verse


logger = logging.getLogger(__name__)

# Calculate the path to our default verse list
# (unless overridden by ENVIRONMENT)
_biverse_dir = os.path.dirname(__file__)
_default_file = os.path.join(_biverse_dir, "data", "verses.json")
VERSES_FILE = os.environ.get("VERSES_FILE", _default_file)


class VerseCollection(Sequence):
    '''Read-only, ordered collection of verses loaded once per process.

    `skipped` counts the source records rejected while loading.
    '''
    def __init__(self, verses: list[Verse], skipped: int = 0):
        self._verses = tuple(verses)
        self._index = {v.key: v for v in self._verses}
        self.skipped = skipped

    @staticmethod
    def fromstream(stream: TextIO) -> VerseCollection:
        try:
            source = json.load(stream)
        except json.JSONDecodeError as err:
            raise DataLoadError(f"verse data is not valid JSON: {err}") from err
        return load_verses(source)

    @staticmethod
    def fromfile(filename: str = VERSES_FILE) -> VerseCollection:
        try:
            with open(filename, "rt", encoding="utf8") as fd:
                return VerseCollection.fromstream(fd)
        except (OSError, UnicodeDecodeError) as err:
            raise DataLoadError(f"cannot read verse data '{filename}': {err}") from err

    def __getitem__(self, i):
        return self._verses[i]

    def __len__(self) -> int:
        return len(self._verses)

    def __iter__(self) -> Iterator[Verse]:
        return iter(self._verses)

    def find(self, reference: str, text: str) -> Verse:
        return self._index[(reference, text)]

    def emotions(self) -> list[str]:
        '''Distinct (normalized) emotion tags, in order of first appearance.'''
        seen = {}
        for v in self._verses:
            tag = v.emotion.strip().lower()
            if tag:
                seen.setdefault(tag, None)
        return list(seen)


def load_verses(source: object) -> VerseCollection:
    '''Validate a decoded JSON value into a VerseCollection.

    Malformed records are skipped (and counted); anything other than a
    list of records raises DataLoadError.
    '''
    if isinstance(source, (str, bytes, Mapping)) or not isinstance(source, Sequence):
        raise DataLoadError(f"expected a list of verse records, got {type(source).__name__}")

    verses = []
    skipped = 0
    for i, record in enumerate(source):
        try:
            verses.append(Verse.from_record(record))
        except ValueError as err:
            logger.debug("Skipping verse record %d: %s", i, err)
            skipped += 1

    if skipped:
        logger.warning("Skipped %d malformed verse record(s) of %d", skipped, len(source))
    return VerseCollection(verses, skipped)
