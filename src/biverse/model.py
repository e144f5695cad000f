from __future__ import annotations
import enum
from dataclasses import dataclass, field
from collections.abc import Mapping


class BiverseError(Exception):
    """Base class for all verse lookup errors."""


class DataLoadError(BiverseError):
    """The verse source is missing or is not a sequence of records."""


class EmptyQueryError(BiverseError):
    """A keyword search was attempted with nothing to search for."""


class NoMatchError(BiverseError):
    """A pick had no candidates to choose from."""


class EmptyCollectionError(NoMatchError):
    """The verse collection itself is empty."""


class PersistenceError(BiverseError):
    """Reading or writing the key-value store failed."""


class Theme(enum.Enum):
    LIGHT = "light"
    DARK = "dark"

    def flipped(self) -> Theme:
        return Theme.DARK if self is Theme.LIGHT else Theme.LIGHT


@dataclass(frozen=True)
class Verse:
    """A single emotion/reference/text verse datum.

    Two verses are the same verse when reference and text match exactly;
    the emotion tag takes no part in equality.
    """
    reference: str
    text: str
    emotion: str = field(default="", compare=False)

    @property
    def key(self) -> tuple[str, str]:
        return (self.reference, self.text)

    @staticmethod
    def from_record(record: Mapping[str, object], require_emotion: bool = True) -> Verse:
        '''Build a Verse from a `{"Emotion", "Reference", "Verse"}` record.

        Raises a ValueError if a required field is absent or not a string.
        '''
        if not isinstance(record, Mapping):
            raise ValueError(f"expected an object, got {type(record).__name__}")
        fields = ("Reference", "Verse", "Emotion") if require_emotion else ("Reference", "Verse")
        for name in fields:
            if not isinstance(record.get(name), str):
                raise ValueError(f"missing or non-string field '{name}'")
        emotion = record.get("Emotion", "")
        return Verse(record["Reference"], record["Verse"], emotion if isinstance(emotion, str) else "")

    def to_record(self) -> dict[str, str]:
        return {"Emotion": self.emotion, "Reference": self.reference, "Verse": self.text}
