"""Tests for relation table location and row mapping."""

import re
from unittest.mock import AsyncMock, MagicMock

import pytest
from bs4 import BeautifulSoup
from playwright.async_api import Error as PlaywrightError

from app.core.config import RelationTables
from app.models import BeneficialOwner, Officer, Shareholder
from app.services.relation_table_extractor import (
    ROW_CELLS_SCRIPT,
    TABLE_SNAPSHOT_SCRIPT,
    ByHeaderSignature,
    ByStableId,
    RelationQueryResult,
    TableSnapshot,
    extract_relations_from_html,
    extract_relations_from_page,
    html_table_rows,
    map_beneficial_owner_row,
    map_officer_row,
    map_shareholder_row,
    parse_contribution,
    relation_table_specs,
    select_rows_by_header,
)

SPECS = relation_table_specs()


class TestParseContribution:
    """Test contribution cell parsing."""

    def test_amount_currency_text(self):
        """'<amount> EUR <text>' yields the text."""
        assert parse_contribution("2500.00 EUR Sole ownership") == "Sole ownership"

    def test_amount_with_commas(self):
        """Amounts may contain commas and dots."""
        assert parse_contribution("1,250.50 EUR Joint ownership") == "Joint ownership"

    def test_other_currency_falls_back(self):
        """Other currencies fall back to the whole cell."""
        assert parse_contribution("2500 USD Sole ownership") == "2500 USD Sole ownership"

    def test_configured_currency(self):
        """The currency code is configurable."""
        assert parse_contribution("2500 SEK Sole ownership", currency="SEK") == "Sole ownership"

    def test_unexpected_format_falls_back(self):
        """Free text without an amount is returned verbatim."""
        assert parse_contribution("unknown") == "unknown"
        assert parse_contribution("2500 EUR") == "2500 EUR"
        assert parse_contribution("") == ""


class TestRowMappers:
    """Test fixed-position row mapping."""

    def test_officer(self):
        """Officer name is column 0 and position column 2."""
        officer = map_officer_row(["Markus Villig", "38xx", "Management board member"])
        assert officer == Officer(name="Markus Villig", position="Management board member")
        assert officer.entity_type is None

    def test_shareholder(self):
        """Shareholder participation, contribution and name columns."""
        shareholder = map_shareholder_row(["100%", "2500.00 EUR Sole ownership", "Bolt Technology OÜ"])
        assert shareholder.name == "Bolt Technology OÜ"
        assert shareholder.shares == "100%"
        assert shareholder.control_type == "Sole ownership"
        assert shareholder.share_count is None
        assert shareholder.entity_type is None

    def test_beneficial_owner(self):
        """Beneficial owner name is column 0 and control column 2."""
        owner = map_beneficial_owner_row(["Markus Villig", "38xx", "Indirect control"])
        assert owner == BeneficialOwner(name="Markus Villig", control_type="Indirect control")
        assert owner.position is None

    def test_short_rows(self):
        """Missing cells map to empty strings."""
        assert map_officer_row(["Only name"]).position == ""
        assert map_shareholder_row([]).name == ""
        assert map_beneficial_owner_row([]).control_type == ""

    def test_serialized_keys(self):
        """Relation records serialize with the registry payload keys."""
        assert map_shareholder_row(["1%", "x", "Y"]).model_dump() == {
            "name": "Y",
            "shares": "1%",
            "shareCount": None,
            "entityType": None,
            "type_of_control": "x",
        }
        assert map_officer_row(["A", "", "B"]).model_dump() == {
            "name": "A",
            "position": "B",
            "entityType": None,
        }
        assert map_beneficial_owner_row(["A", "", "C"]).model_dump() == {
            "name": "A",
            "position": None,
            "entityType": None,
            "type_of_control": "C",
        }


class TestTableLocation:
    """Test table lookup by stable id and header signature."""

    def test_by_stable_id_on_table(self, detail_html):
        """Rows are read from the table carrying the id."""
        soup = BeautifulSoup(detail_html, "lxml")
        rows = html_table_rows(soup, ByStableId("representativesTable"))
        assert rows == [["Markus Villig", "38xxxxxxxxx", "Management board member"]]

    def test_by_stable_id_on_wrapper(self, relations_html):
        """The id may sit on a wrapper around the table."""
        soup = BeautifulSoup(relations_html, "lxml")
        rows = html_table_rows(soup, ByStableId("beneficiaries-table"))
        assert rows == [["Markus Villig", "38xxxxxxxxx", "Indirect control"]]

    def test_by_header_signature_skips_other_tables(self, relations_html):
        """The first table whose first header matches is chosen."""
        soup = BeautifulSoup(relations_html, "lxml")
        rows = html_table_rows(soup, ByHeaderSignature("Participation"))
        assert rows[0] == ["100%", "2500.00 EUR Sole ownership", "Bolt Technology OÜ"]
        assert rows[1] == ["0%", "unknown", "Someone Else"]

    def test_header_signature_absent(self, detail_html):
        """No matching header gives no rows."""
        soup = BeautifulSoup(detail_html, "lxml")
        assert html_table_rows(soup, ByHeaderSignature("Participation")) == []

    def test_stable_id_absent(self, relations_html):
        """A missing id gives no rows."""
        soup = BeautifulSoup(relations_html, "lxml")
        assert html_table_rows(soup, ByStableId("representativesTable")) == []

    def test_select_rows_by_header_first_match(self):
        """Of two matching tables the first wins."""
        tables = [
            TableSnapshot(headers=[], rows=[["no header"]]),
            TableSnapshot(headers=[" Participation "], rows=[["first"]]),
            TableSnapshot(headers=["Participation"], rows=[["second"]]),
        ]
        assert select_rows_by_header(ByHeaderSignature("Participation"), tables) == [["first"]]


class TestExtractRelationsFromHtml:
    """Test static document extraction."""

    def test_shareholders(self, relations_html):
        """Shareholders are read from the 'Participation' table."""
        result = extract_relations_from_html(relations_html, SPECS.shareholders)

        assert result.ok
        assert [s.name for s in result.records] == ["Bolt Technology OÜ", "Someone Else"]
        assert result.records[0].control_type == "Sole ownership"
        assert result.records[1].control_type == "unknown"

    def test_shareholder_table_absent_does_not_block_others(self, detail_html):
        """No shareholder table gives [] while officers are still found."""
        shareholders = extract_relations_from_html(detail_html, SPECS.shareholders)
        officers = extract_relations_from_html(detail_html, SPECS.officers)

        assert shareholders.ok and shareholders.records == []
        assert len(officers.records) == 1

    def test_whitespace_invariant(self, detail_html, relations_html):
        """Relation string fields never hold whitespace runs or NBSPs."""
        for html in (detail_html, relations_html):
            for spec in SPECS:
                for record in extract_relations_from_html(html, spec).records:
                    for value in record.model_dump().values():
                        if isinstance(value, str):
                            assert not re.search(r"\s{2,}", value)
                            assert "\u00a0" not in value

    def test_custom_configuration(self):
        """Table ids and the header sentinel come from configuration."""
        html = (
            "<table id='board'><tbody><tr><td>A</td><td></td><td>CEO</td></tr></tbody></table>"
            "<table><thead><tr><th>Osalus</th></tr></thead>"
            "<tbody><tr><td>50%</td><td>10 SEK Owner</td><td>B</td></tr></tbody></table>"
        )
        specs = relation_table_specs(
            RelationTables(
                officers_table_id="board",
                shareholders_header="Osalus",
                contribution_currency="SEK",
            )
        )
        assert extract_relations_from_html(html, specs.officers).records == [
            Officer(name="A", position="CEO")
        ]
        assert extract_relations_from_html(html, specs.shareholders).records == [
            Shareholder(name="B", shares="50%", control_type="Owner")
        ]


class TestExtractRelationsFromPage:
    """Test live page extraction with a mocked Playwright page."""

    @pytest.mark.asyncio
    async def test_stable_id_rows(self):
        """Stable id tables are read through their body rows."""
        page = MagicMock()
        page.eval_on_selector_all = AsyncMock(
            return_value=[["  Markus\nVillig ", "38xx", "Management board member"]]
        )

        result = await extract_relations_from_page(page, SPECS.officers)

        page.eval_on_selector_all.assert_awaited_once_with(
            '[id="representativesTable"] tbody tr', ROW_CELLS_SCRIPT
        )
        assert result.ok
        assert result.records == [Officer(name="Markus Villig", position="Management board member")]

    @pytest.mark.asyncio
    async def test_header_signature_tables(self):
        """Header-located tables are chosen from a snapshot of all tables."""
        page = MagicMock()
        page.eval_on_selector_all = AsyncMock(
            return_value=[
                {"headers": ["Name"], "rows": [["decoy"]]},
                {
                    "headers": ["Participation", "Contribution", "Name"],
                    "rows": [["100%", "2500.00 EUR Sole ownership", "Bolt Technology OÜ"]],
                },
            ]
        )

        result = await extract_relations_from_page(page, SPECS.shareholders)

        page.eval_on_selector_all.assert_awaited_once_with("table", TABLE_SNAPSHOT_SCRIPT)
        assert result.records == [
            Shareholder(name="Bolt Technology OÜ", shares="100%", control_type="Sole ownership")
        ]

    @pytest.mark.asyncio
    async def test_query_failure_is_isolated(self):
        """A failing query yields an error result instead of raising."""
        page = MagicMock()
        page.eval_on_selector_all = AsyncMock(side_effect=PlaywrightError("Target closed"))

        result = await extract_relations_from_page(page, SPECS.beneficial_owners)

        assert not result.ok
        assert "Target closed" in result.error
        assert result.records_or_empty() == []

    @pytest.mark.asyncio
    async def test_no_tables(self):
        """A page without tables gives an empty successful result."""
        page = MagicMock()
        page.eval_on_selector_all = AsyncMock(return_value=[])

        result = await extract_relations_from_page(page, SPECS.shareholders)
        assert result == RelationQueryResult(records=[])
