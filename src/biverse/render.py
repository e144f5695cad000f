"""Tools for rendering verses into shareable plain text or Markdown.

Templates are Mustache (via `pystache`), rendered without HTML escaping
since the output is never HTML.
"""
import pystache

from .model import Verse


FORMATS = {
    "text": "text/plain",
    "markdown": "text/markdown",
}

VERSE_TEMPLATES = {
    "text": "\"{{text}}\"\n  - {{reference}}\n",
    "markdown": "> {{text}}\n>\n> **{{reference}}**\n",
}

FAVORITES_TEMPLATES = {
    "text": \
"""My favorite verses
==================
{{#verses}}

{{{body}}}{{/verses}}{{^verses}}
(no favorites yet)
{{/verses}}""",
    "markdown": \
"""# My favorite verses
{{#verses}}

{{{body}}}{{/verses}}{{^verses}}
_No favorites yet._
{{/verses}}""",
}


def _renderer() -> pystache.Renderer:
    return pystache.Renderer(escape=lambda s: s)


def _check_format(fmt: str):
    if fmt not in FORMATS:
        raise ValueError(f"'{fmt}' is not a supported share format")


def render_verse(verse: Verse, fmt: str = "text") -> str:
    """Render a single verse as share text in format `fmt`."""
    _check_format(fmt)
    template = pystache.parse(VERSE_TEMPLATES[fmt])
    return _renderer().render(template, {"text": verse.text, "reference": verse.reference})


def render_favorites(verses: list[Verse], fmt: str = "text") -> str:
    """Render a list of verses (usually the favorites) as one share document."""
    _check_format(fmt)
    template = pystache.parse(FAVORITES_TEMPLATES[fmt])
    context = {
        "verses": [{"body": render_verse(v, fmt)} for v in verses],
    }
    return _renderer().render(template, context)
