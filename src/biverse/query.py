'''Pure selection functions over a verse collection.

Nothing here reads the clock or keeps state between calls: the caller
supplies the day of month and (optionally) the random source.
'''
import random
from typing import Iterable, Optional, Sequence

from .model import EmptyCollectionError, EmptyQueryError, NoMatchError, Verse


EMOTIONS = [
    "happiness",
    "love",
    "excitement",
    "gratitude",
    "pride",
    "serenity",
    "amusement",
    "joy",
    "hope",
    "contentment",
    "sadness",
    "anger",
    "fear",
    "disgust",
    "jealousy",
    "guilt",
    "shame",
    "frustration",
    "despair",
    "anxiety",
    "confusion",
    "surprise",
    "empathy",
    "awe",
    "relief",
    "nostalgia",
    "regret",
    "envy",
    "compassion",
]


def _norm(s: Optional[str]) -> str:
    return (s or "").strip().lower()


def filter_by_emotion(collection: Iterable[Verse], emotion: Optional[str]) -> list[Verse]:
    """Verses tagged with `emotion` (case/whitespace-insensitive), in collection order.

    An empty emotion selects nothing.
    """
    term = _norm(emotion)
    if not term:
        return []
    return [v for v in collection if _norm(v.emotion) == term]


def filter_by_keyword(collection: Iterable[Verse], keyword: Optional[str]) -> list[Verse]:
    """Verses whose text or reference contains `keyword`, ignoring case.

    Raises EmptyQueryError for an empty or all-whitespace keyword.
    """
    term = _norm(keyword)
    if not term:
        raise EmptyQueryError("Please enter a keyword to search for.")
    return [v for v in collection if term in v.text.lower() or term in v.reference.lower()]


def pick_random(candidates: Sequence[Verse], rng=None) -> Verse:
    """Uniformly pick one of `candidates` using `rng` (default: the `random` module)."""
    if len(candidates) == 0:
        raise NoMatchError("No matching verse to pick from.")
    rng = rng or random
    return candidates[rng.randrange(len(candidates))]


def daily_verse(collection: Sequence[Verse], calendar_day: int) -> Verse:
    """The verse of the day: `calendar_day` modulo the collection size."""
    if len(collection) == 0:
        raise EmptyCollectionError("No verses are loaded.")
    return collection[calendar_day % len(collection)]


def search_emotion(collection: Iterable[Verse], emotion: Optional[str], rng=None) -> Verse:
    try:
        return pick_random(filter_by_emotion(collection, emotion), rng)
    except NoMatchError:
        raise NoMatchError("No verse found for this emotion.") from None
