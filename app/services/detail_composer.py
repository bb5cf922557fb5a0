"""Composition of the company detail record from extracted parts."""

import logging
from collections.abc import Sequence

from bs4 import BeautifulSoup

from app.core.config import FieldMap, RegistryConfig
from app.models import CompanyDetailRecord, Section
from app.services.relation_table_extractor import (
    RelationQueryResult,
    extract_relations_from_soup,
    relation_table_specs,
)
from app.services.section_extractor import extract_sections_from_soup

logger = logging.getLogger(__name__)

GENERAL_SECTION = "General information"
VAT_SECTION = "VAT information"


def company_name_from_title(page_title: str | None) -> str:
    """Registry page titles read "<company name> | <site name>"."""
    return (page_title or "").split("|")[0].strip()


def find_section(sections: Sequence[Section], title: str) -> Section | None:
    """First section with the given title, compared case-insensitively."""
    wanted = title.lower()
    return next((s for s in sections if s.title.lower() == wanted), None)


def _field(section: Section | None, label: str) -> str:
    if section is None:
        return ""
    return section.fields.get(label, "")


def compose_company_detail(
    page_title: str | None,
    sections: Sequence[Section],
    officers: RelationQueryResult,
    shareholders: RelationQueryResult,
    beneficial_owners: RelationQueryResult,
    field_map: FieldMap | None = None,
) -> CompanyDetailRecord:
    """Merge sections and relation tables into one company detail record.

    Relation queries that failed contribute no records. Fields missing from
    their section are left empty.
    """
    field_map = field_map or FieldMap()
    general = find_section(sections, GENERAL_SECTION)
    vat = find_section(sections, VAT_SECTION)

    for relation, result in (
        ("officers", officers),
        ("shareholders", shareholders),
        ("beneficial owners", beneficial_owners),
    ):
        if not result.ok:
            logger.debug(f"Composing without {relation}: {result.error}")

    return CompanyDetailRecord(
        company_name=company_name_from_title(page_title),
        company_number=_field(general, field_map.registry_code),
        jurisdiction_ident=_field(vat, field_map.vat_number),
        incorporation_date=_field(general, field_map.incorporated),
        dissolution_date="",
        company_type=_field(general, field_map.legal_form),
        current_status=_field(general, field_map.status),
        more_info_available=len(sections) > 0,
        ultimate_beneficial_owners=beneficial_owners.records_or_empty(),
        officers=officers.records_or_empty(),
        shareholders=shareholders.records_or_empty(),
    )


def extract_company_detail(
    html: str, config: RegistryConfig, page_title: str | None = None
) -> CompanyDetailRecord:
    """Extract a complete company detail record from a rendered detail page.

    Args:
        html: Rendered company detail page.
        config: Registry configuration (sections, selectors, field labels).
        page_title: Title of the page; read from the document's ``<title>``
            when not given.

    Returns:
        The composed CompanyDetailRecord.
    """
    soup = BeautifulSoup(html, "lxml")
    if page_title is None:
        page_title = soup.title.get_text() if soup.title else ""

    sections = extract_sections_from_soup(
        soup, config.wanted_sections, config.base_url, config.selectors
    )
    specs = relation_table_specs(config.relation_tables)

    return compose_company_detail(
        page_title,
        sections,
        officers=extract_relations_from_soup(soup, specs.officers),
        shareholders=extract_relations_from_soup(soup, specs.shareholders),
        beneficial_owners=extract_relations_from_soup(soup, specs.beneficial_owners),
        field_map=config.field_map,
    )
