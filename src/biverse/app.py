import logging
import os
import sys
from datetime import date
from typing import Optional

from cachelib.simple import SimpleCache
from flask import Flask, Response, abort, request, render_template, session
from flask_htmx import HTMX, make_response
from flask_session.cachelib import CacheLibSessionInterface

from .favorites import FavoritesSet
from .model import EmptyCollectionError, EmptyQueryError, NoMatchError, PersistenceError, Verse
from .prefs import PreferenceStore
from .query import EMOTIONS, daily_verse, filter_by_keyword, pick_random, search_emotion
from .render import FORMATS, render_favorites, render_verse
from .storage import KeyValueStore
from .verses import VerseCollection

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["SECRET_KEY"] = os.environ.get("BIVERSE_SECRET_KEY", "a super secret key no one will ever guess")
app.config["STORE_DIR"] = os.environ.get("BIVERSE_STORE_DIR", os.path.expanduser("~/.biverse"))
app.session_interface = CacheLibSessionInterface(client=SimpleCache(default_timeout=0))
htmx = HTMX(app)


def check_emotion_menu(collection: VerseCollection) -> list[str]:
    """Menu emotions with no verse in `collection`, logged as a warning."""
    missing = [e for e in EMOTIONS if e not in collection.emotions()]
    if missing:
        logger.warning("No verses for menu emotion(s): %s", ", ".join(missing))
    return missing


verses = VerseCollection.fromfile()
logger.info("Loaded %d verses (%d skipped)", len(verses), verses.skipped)
check_emotion_menu(verses)

EXPORT_EXTENSIONS = {"text": "txt", "markdown": "md"}
SAVE_FAILED = "Could not save your favorites; they are kept for this session only."


def get_store() -> KeyValueStore:
    store = app.extensions.get("biverse_store")
    if store is None:
        try:
            store = KeyValueStore.open(app.config["STORE_DIR"])
        except PersistenceError as err:
            logger.warning("%s; favorites and theme will not survive a restart", err)
            store = KeyValueStore.open(None)
        app.extensions["biverse_store"] = store
    return store


def get_favorites() -> FavoritesSet:
    favorites = app.extensions.get("biverse_favorites")
    if favorites is None:
        favorites = app.extensions["biverse_favorites"] = FavoritesSet(get_store())
    return favorites


def get_prefs() -> PreferenceStore:
    prefs = app.extensions.get("biverse_prefs")
    if prefs is None:
        prefs = app.extensions["biverse_prefs"] = PreferenceStore(get_store())
    return prefs


def render_card(verse: Optional[Verse] = None, error: Optional[str] = None, note: Optional[str] = None) -> str:
    return render_template("partials/verse_card.html",
        verse=verse,
        error=error,
        note=note,
        is_favorite=verse is not None and verse in get_favorites(),
        share_text=render_verse(verse) if verse is not None else None)


@app.get("/")
def index():
    return render_template("index.html",
        theme=get_prefs().get().value,
        emotions=EMOTIONS,
        selected_emotion=session.get("emotion", ""),
        keyword=session.get("keyword", ""),
        favorites=get_favorites().all())


@app.post("/ajax/search/emotion")
def search_by_emotion():
    session["emotion"] = emotion = request.form.get("emotion", "")
    if not emotion.strip():
        return render_card(error="Please select an emotion.")
    try:
        verse = search_emotion(verses, emotion)
    except NoMatchError as err:
        return render_card(error=str(err))
    return render_card(verse)


@app.post("/ajax/search/keyword")
def search_by_keyword():
    session["keyword"] = keyword = request.form.get("keyword", "")
    try:
        matches = filter_by_keyword(verses, keyword)
        verse = pick_random(matches)
    except EmptyQueryError as err:
        return render_card(error=str(err))
    except NoMatchError:
        return render_card(error=f"No verses found containing '{keyword.strip()}'.")
    return render_card(verse, note=f"One of {len(matches)} matching verse(s)")


@app.get("/ajax/daily")
def verse_of_the_day():
    try:
        verse = daily_verse(verses, date.today().day)
    except EmptyCollectionError as err:
        return render_card(error=str(err))
    return render_card(verse, note="Verse of the day")


@app.post("/ajax/favorites/toggle")
def toggle_favorite():
    try:
        verse = verses.find(request.form.get("reference", ""), request.form.get("text", ""))
    except KeyError:
        abort(404)

    favorites = get_favorites()
    favorites.toggle(verse)
    return make_response(
        render_card(verse, error=SAVE_FAILED if favorites.last_error else None),
        push_url=False,
        trigger={"favorites-update": True})


@app.get("/ajax/favorites")
def favorites_panel():
    return render_template("partials/favorites.html", favorites=get_favorites().all())


@app.post("/ajax/theme")
def toggle_theme():
    theme = get_prefs().toggle()
    return make_response(
        render_template("partials/theme_switch.html", theme=theme.value),
        push_url=False,
        trigger={"theme-changed": theme.value})


@app.get("/favorites/export/<fmt>")
def export_favorites(fmt: str):
    if fmt not in FORMATS:
        abort(400)
    body = render_favorites(get_favorites().all(), fmt)
    return Response(body, mimetype=FORMATS[fmt], headers={
        "Content-Disposition": f"attachment; filename=favorites.{EXPORT_EXTENSIONS[fmt]}"})


def main(argv: list[str]):
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    app.run(host="localhost", port=1769, debug=True)


def entry():
    main(sys.argv)
    sys.exit(0)


if __name__ == "__main__":
    entry()
