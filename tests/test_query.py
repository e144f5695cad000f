import random
from collections import Counter

import pytest

from biverse.model import EmptyCollectionError, EmptyQueryError, NoMatchError
from biverse.query import daily_verse, filter_by_emotion, filter_by_keyword, pick_random, search_emotion
from biverse.verses import load_verses

from conftest import ISAIAH, JEREMIAH, JOHN, PSALM


def test_filter_by_emotion_is_sound_and_complete(collection):
    for term in ["hope", " HOPE ", "Serenity", "love", "fear"]:
        found = filter_by_emotion(collection, term)
        expected = [v for v in collection if v.emotion.strip().lower() == term.strip().lower()]
        assert found == expected


def test_filter_by_emotion_keeps_order(collection):
    assert filter_by_emotion(collection, "hope") == [JEREMIAH, ISAIAH]
    assert filter_by_emotion(collection, "serenity") == [PSALM]


@pytest.mark.parametrize("term", ["", "   ", None])
def test_filter_by_emotion_empty_selects_nothing(term):
    vc = load_verses([{"Emotion": "", "Reference": "Ps 1:1", "Verse": "Blessed."}])
    assert filter_by_emotion(vc, term) == []


def test_filter_by_keyword_ignores_case(collection):
    upper = filter_by_keyword(collection, "LORD")
    assert upper == filter_by_keyword(collection, "lord")
    assert upper == [JEREMIAH, ISAIAH]


def test_filter_by_keyword_matches_reference(collection):
    assert filter_by_keyword(collection, " john 3 ") == [JOHN]


def test_filter_by_keyword_no_match(collection):
    assert filter_by_keyword(collection, "leviathan") == []


@pytest.mark.parametrize("term", ["", " \t ", None])
def test_filter_by_keyword_empty_is_an_error(collection, term):
    with pytest.raises(EmptyQueryError):
        filter_by_keyword(collection, term)


def test_filters_do_not_touch_collection(collection):
    before = list(collection)
    filter_by_emotion(collection, "hope")
    filter_by_keyword(collection, "god")
    assert list(collection) == before


def test_pick_random_singleton():
    for _ in range(20):
        assert pick_random([PSALM]) == PSALM


def test_pick_random_empty():
    with pytest.raises(NoMatchError):
        pick_random([])


def test_pick_random_is_uniform_over_filtered(collection):
    rng = random.Random(1234)
    hope = filter_by_emotion(collection, "hope")
    counts = Counter(pick_random(hope, rng) for _ in range(4000))
    assert set(counts) == {JEREMIAH, ISAIAH}
    assert 1800 < counts[JEREMIAH] < 2200


def test_pick_random_uses_injected_source():
    class Last:
        def randrange(self, n):
            return n - 1

    assert pick_random([JEREMIAH, ISAIAH, PSALM], Last()) == PSALM


def test_daily_verse_scenario(hope_records):
    vc = load_verses(hope_records)
    assert daily_verse(vc, 3) == ISAIAH
    assert daily_verse(vc, 4) == JEREMIAH


def test_daily_verse_is_periodic(collection):
    for day in range(1, 32):
        assert daily_verse(collection, day) == daily_verse(collection, day + len(collection))


def test_daily_verse_empty():
    with pytest.raises(EmptyCollectionError):
        daily_verse(load_verses([]), 5)


def test_search_emotion(collection):
    assert search_emotion(collection, "Love") == JOHN
    with pytest.raises(NoMatchError, match="No verse found"):
        search_emotion(collection, "envy")
