import pytest
from cachelib.base import BaseCache

from biverse.model import Verse
from biverse.storage import KeyValueStore
from biverse.verses import load_verses


JEREMIAH = Verse("Jeremiah 29:11", "For I know the thoughts that I think toward you, saith the LORD.", "Hope")
ISAIAH = Verse("Isaiah 40:31", "But they that wait upon the LORD shall renew their strength.", "Hope")
PSALM = Verse("Psalm 46:10", "Be still, and know that I am God.", " serenity ")
JOHN = Verse("John 3:16", "For God so loved the world.", "Love")


class BrokenCache(BaseCache):
    """A cache whose every read and write fails."""
    def get(self, key):
        raise OSError("disk on fire")

    def set(self, key, value, timeout=None):
        return False


@pytest.fixture
def hope_records():
    return [v.to_record() for v in (JEREMIAH, ISAIAH)]


@pytest.fixture
def collection():
    return load_verses([v.to_record() for v in (JEREMIAH, PSALM, ISAIAH, JOHN)])


@pytest.fixture
def store():
    return KeyValueStore.open(None)


@pytest.fixture
def broken_store():
    return KeyValueStore(BrokenCache())
