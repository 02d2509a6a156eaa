"""Display titles derived from article keys."""

from __future__ import annotations

from urllib.parse import parse_qs, unquote, urlsplit

_ARTICLE_PATH_PREFIX = "/wiki/"


def derive_display_title(article_key: str) -> str | None:
    """Extract a human-readable title from a URL-like article key.

    Supports ``/wiki/<Title>`` paths and ``?title=<Title>`` queries. Underscores
    become spaces and percent-escapes are decoded. Returns ``None`` when the key
    is not a parsable URL or carries no title component.
    """

    try:
        parts = urlsplit(article_key.strip())
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None

    raw_title: str | None = None
    if parts.path.startswith(_ARTICLE_PATH_PREFIX):
        raw_title = unquote(parts.path[len(_ARTICLE_PATH_PREFIX) :])
    else:
        # parse_qs already decodes percent-escapes
        titles = parse_qs(parts.query).get("title")
        if titles:
            raw_title = titles[0]

    if not raw_title:
        return None
    title = raw_title.replace("_", " ").strip()
    return title or None
