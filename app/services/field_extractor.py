"""Label/value field extraction for registry detail page sections.

Registry pages lay out label/value pairs in two incompatible ways:

- a grid convention, where the label sits in a muted or narrow column
  (``.text-muted``, ``.col-md-4``) and the value in a bold or wide column;
- a free-form convention, where a row simply holds a short label ``div``
  followed by one or more value ``div`` elements.

Each row is tried against the grid convention first. Only when that yields no
label is the free-form convention attempted, and then only if the first
``div`` is short enough to be a label rather than a paragraph of prose.
"""

import logging
from dataclasses import dataclass
from typing import Literal

from bs4 import Tag

from app.core.config import Selectors

logger = logging.getLogger(__name__)

# Longest text still treated as a label by the free-form convention
MAX_FALLBACK_LABEL_LENGTH = 60

DEFAULT_SELECTORS = Selectors()


@dataclass(frozen=True)
class FieldRowMatch:
    """Label/value pair read from one row, tagged with the strategy used."""

    label: str
    value: str
    strategy: Literal["structural", "fallback"]


def _first_text(row: Tag, selector: str) -> str:
    element = row.select_one(selector)
    if element is None:
        return ""
    return element.get_text().strip()


def match_structural_row(
    row: Tag, selectors: Selectors = DEFAULT_SELECTORS
) -> FieldRowMatch | None:
    """Read a row laid out with label and value grid columns.

    The first label-column and first value-column elements in document order
    are used.

    Returns:
        The match, or None when the row has no label column text.
    """
    label = _first_text(row, selectors.field_label)
    if not label:
        return None
    value = _first_text(row, selectors.field_value)
    return FieldRowMatch(label=label, value=value, strategy="structural")


def match_fallback_row(row: Tag) -> FieldRowMatch | None:
    """Read a row laid out as a label ``div`` followed by value ``div`` elements.

    Returns:
        The match, or None when the row has fewer than two ``div`` children
        or its first ``div`` is too long to be a label.
    """
    children = row.find_all("div", recursive=False)
    if len(children) < 2:
        return None

    label = children[0].get_text().strip()
    if len(label) >= MAX_FALLBACK_LABEL_LENGTH:
        return None

    value = "\n".join(child.get_text().strip() for child in children[1:]).strip()
    return FieldRowMatch(label=label, value=value, strategy="fallback")


def match_field_row(
    row: Tag, selectors: Selectors = DEFAULT_SELECTORS
) -> FieldRowMatch | None:
    """Try the structural convention, then the free-form one."""
    return match_structural_row(row, selectors) or match_fallback_row(row)


def extract_fields(scope: Tag, selectors: Selectors = DEFAULT_SELECTORS) -> dict[str, str]:
    """Build the label to value mapping of every row inside a scope.

    Rows whose label or value is empty are skipped. A label seen twice keeps
    its last value.

    Args:
        scope: Element to search for rows (usually a section card).
        selectors: Row, label and value selectors.

    Returns:
        Field mapping in document order.
    """
    fields: dict[str, str] = {}

    for row in scope.select(selectors.field_row):
        match = match_field_row(row, selectors)
        if match is None or not match.label or not match.value:
            continue
        fields[match.label] = match.value

    return fields
