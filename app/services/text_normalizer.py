"""Whitespace and URL normalization shared by every extractor."""

import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str | None) -> str:
    """Collapse whitespace runs (non-breaking spaces included) to one space.

    Args:
        text: Raw text, possibly None.

    Returns:
        Trimmed text with single ASCII spaces between words.
    """
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text.replace("\u00a0", " ")).strip()


def resolve_url(href: str | None, base_url: str) -> str | None:
    """Resolve a registry href against the registry base URL.

    Only root-relative paths are joined; absolute and path-relative hrefs are
    returned as they are.

    Args:
        href: Raw href attribute value.
        base_url: Registry origin, e.g. "https://ariregister.rik.ee".

    Returns:
        The resolved URL, or None for empty and placeholder ("#") hrefs.
    """
    if not href or href == "#":
        return None
    if href.startswith("/"):
        return base_url + href
    return href
