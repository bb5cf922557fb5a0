"""Officer, shareholder and beneficial owner extraction from registry tables.

Relation tables are found in one of two ways:

- ``ByStableId``: the table (or its wrapper) carries a stable ``id`` and its
  body rows are read directly.
- ``ByHeaderSignature``: the table has no stable identifier, so every table
  on the page is scanned and the first one whose first header cell has the
  expected text is used.

Both locators run against either a parsed document (BeautifulSoup) or the
live page (Playwright). Rows are reduced to whitespace-collapsed cell texts
and mapped to records by fixed column positions.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from functools import partial
from typing import Any, NamedTuple

from bs4 import BeautifulSoup

from app.core.config import RelationTables
from app.models import BeneficialOwner, Officer, RelationRecord, Shareholder
from app.services.text_normalizer import normalize_whitespace

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "EUR"

# Cell texts of every body row, evaluated in the browser
ROW_CELLS_SCRIPT = """
rows => rows.map(row => [...row.querySelectorAll("td")].map(td => td.textContent ?? ""))
"""

# Header and body cell texts of every table, evaluated in the browser
TABLE_SNAPSHOT_SCRIPT = """
tables => tables.map(table => ({
  headers: [...(table.querySelector("thead")?.querySelectorAll("th") ?? [])]
    .map(th => th.textContent ?? ""),
  rows: [...table.querySelectorAll("tbody tr")]
    .map(row => [...row.querySelectorAll("td")].map(td => td.textContent ?? "")),
}))
"""


@dataclass(frozen=True)
class ByStableId:
    """Locate a table through the id of the table or its wrapper."""

    element_id: str

    @property
    def row_selector(self) -> str:
        return f'[id="{self.element_id}"] tbody tr'


@dataclass(frozen=True)
class ByHeaderSignature:
    """Locate the first table whose first header cell equals ``first_header``."""

    first_header: str

    def matches(self, headers: Sequence[str]) -> bool:
        return bool(headers) and normalize_whitespace(headers[0]) == self.first_header


TableLocator = ByStableId | ByHeaderSignature

RowMapper = Callable[[list[str]], RelationRecord]


@dataclass(frozen=True)
class TableSnapshot:
    """Header and body cell texts of one table."""

    headers: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)


@dataclass(frozen=True)
class RelationTableSpec:
    """Where a relation table lives and how its rows become records."""

    relation: str
    locator: TableLocator
    map_row: RowMapper


@dataclass(frozen=True)
class RelationQueryResult:
    """Outcome of one relation table query.

    Attributes:
        records: Mapped records, empty when the table is absent or on error.
        error: Description of the failure, None on success.
    """

    records: list[RelationRecord] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def records_or_empty(self) -> list[RelationRecord]:
        return list(self.records) if self.ok else []


class RelationTableSpecs(NamedTuple):
    officers: RelationTableSpec
    shareholders: RelationTableSpec
    beneficial_owners: RelationTableSpec


# ---------------------------------------------------------------------------
# Row mapping
# ---------------------------------------------------------------------------


def _cell(cells: Sequence[str], index: int) -> str:
    return cells[index] if index < len(cells) else ""


def parse_contribution(text: str, currency: str = DEFAULT_CURRENCY) -> str:
    """Return the control description from a contribution cell.

    Cells shaped like "2500.00 EUR Sole ownership" yield "Sole ownership".
    Anything else, including other currencies, is returned unchanged.
    """
    pattern = re.compile(rf"^[\d.,]+\s+{re.escape(currency)}\s+(.*)")
    match = pattern.match(text)
    if match:
        return match.group(1).strip()
    return text


def map_officer_row(cells: list[str]) -> Officer:
    """Columns: name, personal code, position, ..."""
    return Officer(name=_cell(cells, 0), position=_cell(cells, 2))


def map_shareholder_row(cells: list[str], currency: str = DEFAULT_CURRENCY) -> Shareholder:
    """Columns: participation, contribution, name, ..."""
    return Shareholder(
        name=_cell(cells, 2),
        shares=_cell(cells, 0),
        control_type=parse_contribution(_cell(cells, 1), currency),
    )


def map_beneficial_owner_row(cells: list[str]) -> BeneficialOwner:
    """Columns: name, personal code, type of control, ..."""
    return BeneficialOwner(name=_cell(cells, 0), control_type=_cell(cells, 2))


def relation_table_specs(tables: RelationTables | None = None) -> RelationTableSpecs:
    """Build the three relation table specs from configuration."""
    tables = tables or RelationTables()
    return RelationTableSpecs(
        officers=RelationTableSpec(
            relation="officers",
            locator=ByStableId(tables.officers_table_id),
            map_row=map_officer_row,
        ),
        shareholders=RelationTableSpec(
            relation="shareholders",
            locator=ByHeaderSignature(tables.shareholders_header),
            map_row=partial(map_shareholder_row, currency=tables.contribution_currency),
        ),
        beneficial_owners=RelationTableSpec(
            relation="beneficial_owners",
            locator=ByStableId(tables.beneficial_owners_table_id),
            map_row=map_beneficial_owner_row,
        ),
    )


# ---------------------------------------------------------------------------
# Table location
# ---------------------------------------------------------------------------


def normalize_rows(rows: Sequence[Sequence[Any]]) -> list[list[str]]:
    """Collapse whitespace in every cell text."""
    return [[normalize_whitespace(str(cell or "")) for cell in row] for row in rows]


def select_rows_by_header(
    locator: ByHeaderSignature, tables: Sequence[TableSnapshot]
) -> list[list[str]]:
    """Body rows of the first table matching the header signature, else []."""
    for table in tables:
        if locator.matches(table.headers):
            return normalize_rows(table.rows)
    return []


def map_rows(rows: Sequence[list[str]], map_row: RowMapper) -> list[RelationRecord]:
    return [map_row(cells) for cells in rows]


def snapshot_tables(soup: BeautifulSoup) -> list[TableSnapshot]:
    """Read header and body cell texts of every table in a document."""
    snapshots: list[TableSnapshot] = []
    for table in soup.find_all("table"):
        thead = table.find("thead")
        headers = [th.get_text() for th in thead.find_all("th")] if thead else []
        rows = [
            [td.get_text() for td in row.find_all("td")]
            for row in table.select("tbody tr")
        ]
        snapshots.append(TableSnapshot(headers=headers, rows=rows))
    return snapshots


def html_table_rows(soup: BeautifulSoup, locator: TableLocator) -> list[list[str]]:
    """Locate a relation table in a parsed document and return its body rows."""
    if isinstance(locator, ByStableId):
        return normalize_rows(
            [[td.get_text() for td in row.find_all("td")] for row in soup.select(locator.row_selector)]
        )
    return select_rows_by_header(locator, snapshot_tables(soup))


async def page_table_rows(page: Any, locator: TableLocator) -> list[list[str]]:
    """Locate a relation table on a live Playwright page and return its body rows."""
    if isinstance(locator, ByStableId):
        rows = await page.eval_on_selector_all(locator.row_selector, ROW_CELLS_SCRIPT)
        return normalize_rows(rows or [])

    raw_tables = await page.eval_on_selector_all("table", TABLE_SNAPSHOT_SCRIPT)
    tables = [
        TableSnapshot(headers=list(t.get("headers") or []), rows=list(t.get("rows") or []))
        for t in raw_tables or []
    ]
    return select_rows_by_header(locator, tables)


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def extract_relations_from_soup(soup: BeautifulSoup, spec: RelationTableSpec) -> RelationQueryResult:
    """Extract one relation type from a parsed document."""
    records = map_rows(html_table_rows(soup, spec.locator), spec.map_row)
    logger.debug(f"Extracted {len(records)} {spec.relation} from document")
    return RelationQueryResult(records=records)


def extract_relations_from_html(html: str, spec: RelationTableSpec) -> RelationQueryResult:
    return extract_relations_from_soup(BeautifulSoup(html, "lxml"), spec)


async def extract_relations_from_page(page: Any, spec: RelationTableSpec) -> RelationQueryResult:
    """Extract one relation type from the live page.

    Any failure while querying the page is reported in the result instead of
    being raised, so the other relation types are still extracted.
    """
    try:
        rows = await page_table_rows(page, spec.locator)
        records = map_rows(rows, spec.map_row)
    except Exception as e:
        logger.warning(f"Failed to query {spec.relation} table: {e}")
        return RelationQueryResult(error=str(e) or type(e).__name__)

    logger.info(f"Extracted {len(records)} {spec.relation}")
    return RelationQueryResult(records=records)
