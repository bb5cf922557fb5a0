"""Search results and autocomplete extraction for registry search pages."""

import logging
import re

from bs4 import BeautifulSoup, Tag

from app.core.config import Selectors
from app.models import AutocompleteSuggestion, SearchResultEntry
from app.services.text_normalizer import normalize_whitespace, resolve_url

logger = logging.getLogger(__name__)

# Registry code embedded in detail URLs, e.g. /eng/company/14532901/Bolt-Operations-OU
REGISTRY_CODE_PATH_RE = re.compile(r"/company/(\d+)/")

REGISTRY_CODE_LABEL = "Registry code"
STATUS_LABEL = "Status"
ADDRESS_LABEL = "Address"

DEFAULT_SELECTORS = Selectors()


def registry_code_from_href(href: str) -> str:
    """Pull the numeric registry code out of a company detail URL."""
    match = REGISTRY_CODE_PATH_RE.search(href)
    return match.group(1) if match else ""


def _row_label_value(row: Tag, selectors: Selectors) -> tuple[str, str]:
    label = " ".join(el.get_text() for el in row.select(selectors.result_label)).strip()
    value = normalize_whitespace(
        " ".join(el.get_text() for el in row.select(selectors.result_value))
    )
    return label, value


def read_card_rows(card: Tag | None, selectors: Selectors = DEFAULT_SELECTORS) -> dict[str, str]:
    """Read the label/value rows of a result card.

    Values are whitespace-collapsed. A repeated label keeps its last value.
    """
    rows: dict[str, str] = {}
    if card is None:
        return rows

    for row in card.select(selectors.field_row):
        label, value = _row_label_value(row, selectors)
        if label:
            rows[label] = value

    return rows


def first_row_value(
    card: Tag | None, label: str, selectors: Selectors = DEFAULT_SELECTORS
) -> str:
    """Value of the first row with the given label and a non-empty value."""
    if card is None:
        return ""

    for row in card.select(selectors.field_row):
        row_label, value = _row_label_value(row, selectors)
        if row_label == label and value:
            return value

    return ""


def build_search_result(
    anchor: Tag, base_url: str, selectors: Selectors = DEFAULT_SELECTORS
) -> SearchResultEntry | None:
    """Build a result entry from its heading link, or None if it has no name."""
    name = anchor.get_text().strip()
    if not name:
        return None

    href = str(anchor.get("href") or "")
    card = anchor.css.closest(selectors.content_card)
    rows = read_card_rows(card, selectors)

    return SearchResultEntry(
        name=name,
        registry_code=(
            registry_code_from_href(href)
            or first_row_value(card, REGISTRY_CODE_LABEL, selectors)
        ),
        status=rows.get(STATUS_LABEL, ""),
        address=rows.get(ADDRESS_LABEL, ""),
        url=resolve_url(href, base_url) or "",
    )


def extract_search_results(
    html: str, base_url: str, selectors: Selectors = DEFAULT_SELECTORS
) -> list[SearchResultEntry]:
    """Extract every company hit from a search results page.

    Args:
        html: Rendered search results page.
        base_url: Registry origin used to resolve result URLs.
        selectors: Result link, card and row selectors.

    Returns:
        Entries in document order; anchors without text are dropped.
    """
    soup = BeautifulSoup(html, "lxml")
    results: list[SearchResultEntry] = []

    for anchor in soup.select(selectors.result_link):
        entry = build_search_result(anchor, base_url, selectors)
        if entry is not None:
            results.append(entry)

    logger.debug(f"Extracted {len(results)} search results")
    return results


def extract_autocomplete_suggestions(item_texts: list[str | None]) -> list[AutocompleteSuggestion]:
    """Turn the text of autocomplete dropdown items into suggestions.

    Items without text are dropped; order is preserved.
    """
    suggestions: list[AutocompleteSuggestion] = []
    for raw in item_texts:
        text = normalize_whitespace(raw)
        if text:
            suggestions.append(AutocompleteSuggestion(text=text))
    return suggestions
