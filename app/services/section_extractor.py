"""Section extraction for registry company detail pages.

A detail page is a stack of cards, each introduced by a heading carrying the
page's section heading class. Sections are selected by title against a
caller-supplied allow-list, and every matching heading becomes one Section
built from its enclosing card.
"""

import copy
import logging
from collections.abc import Iterable

from bs4 import BeautifulSoup, Tag

from app.core.config import Selectors
from app.models import Link, Section
from app.services.field_extractor import extract_fields
from app.services.text_normalizer import normalize_whitespace, resolve_url

logger = logging.getLogger(__name__)

# Elements dropped from a card before its text is read
CONTENT_NOISE_TAGS = ["h2", "script", "style", "img"]

DEFAULT_SELECTORS = Selectors()


def extract_links(scope: Tag, base_url: str) -> list[Link]:
    """Collect anchors inside a scope, skipping empty and ``#`` hrefs.

    Args:
        scope: Element to search for anchors.
        base_url: Registry origin used for root-relative hrefs.

    Returns:
        Links in document order, duplicates kept.
    """
    links: list[Link] = []

    for anchor in scope.find_all("a"):
        href = resolve_url(str(anchor.get("href") or ""), base_url)
        if href is None:
            continue
        links.append(Link(text=anchor.get_text().strip(), href=href))

    return links


def extract_content(container: Tag, heading_selector: str | None = None) -> str:
    """Return the normalized text of a card without its heading and media.

    The card is copied first so the parsed document is left untouched.
    """
    clone = copy.copy(container)
    noise = clone.find_all(CONTENT_NOISE_TAGS)
    if heading_selector:
        noise.extend(clone.select(heading_selector))

    for element in noise:
        # Elements nested in an already removed one are gone with it
        if element.decomposed:
            continue
        element.decompose()

    return normalize_whitespace(clone.get_text(separator=" "))


def _find_card(heading: Tag, card_selector: str) -> Tag | None:
    """Find the nearest ancestor of a heading that is a content card."""
    return heading.css.closest(card_selector)


def build_section(
    title: str,
    container: Tag,
    base_url: str,
    selectors: Selectors = DEFAULT_SELECTORS,
) -> Section:
    """Assemble a Section from a heading title and its content card."""
    return Section(
        title=title,
        fields=extract_fields(container, selectors),
        content=extract_content(container, selectors.section_heading),
        links=extract_links(container, base_url),
    )


def extract_sections_from_soup(
    soup: BeautifulSoup,
    wanted_sections: Iterable[str],
    base_url: str,
    selectors: Selectors = DEFAULT_SELECTORS,
) -> list[Section]:
    """Extract the wanted sections from an already parsed document.

    Args:
        soup: Parsed detail page.
        wanted_sections: Titles to keep, compared case-insensitively.
        base_url: Registry origin used to resolve link hrefs.
        selectors: Heading, card and field selectors.

    Returns:
        Sections in heading document order. Two headings with the same
        wanted title produce two sections.
    """
    wanted = {title.strip().lower() for title in wanted_sections}
    sections: list[Section] = []

    for heading in soup.select(selectors.section_heading):
        title = heading.get_text().strip()
        if not title or title.lower() not in wanted:
            continue

        container = _find_card(heading, selectors.content_card)
        if container is None:
            logger.debug(f"Section heading '{title}' has no enclosing content card, skipping")
            continue

        sections.append(build_section(title, container, base_url, selectors))

    logger.debug(f"Extracted {len(sections)} sections")
    return sections


def extract_all_sections(
    html: str,
    wanted_sections: Iterable[str],
    base_url: str,
    selectors: Selectors = DEFAULT_SELECTORS,
) -> list[Section]:
    """Parse a detail page and extract its wanted sections."""
    soup = BeautifulSoup(html, "lxml")
    return extract_sections_from_soup(soup, wanted_sections, base_url, selectors)
