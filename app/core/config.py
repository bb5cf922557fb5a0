"""Runtime configuration for registry scraping.

Values are read from the environment (populated from ``.env`` by
``load_dotenv`` in ``app.main``) each time a configuration is built, and the
resulting ``RegistryConfig`` is passed explicitly into every extraction call.
"""

import os
from dataclasses import dataclass, field

from app.core.jurisdictions import normalize_jurisdiction, resolve_jurisdiction_endpoints

DEFAULT_SECTIONS: tuple[str, ...] = (
    "General information",
    "VAT information",
    "Right of representation",
    "Contacts",
    "Shareholders",
    "Tax information",
    "Activity licenses and notices of economic activities",
    "Annual reports",
    "Areas of activity",
    "Articles of association",
    "Beneficial owners",
    "Data protection officer",
)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)

DEFAULT_DATA_FOLDER = "../data"


@dataclass(frozen=True)
class FieldMap:
    """Label text used by the registry for each composed detail field."""

    registry_code: str = "Registry code"
    vat_number: str = "VAT number"
    incorporated: str = "Registered"
    legal_form: str = "Legal form"
    status: str = "Status"


@dataclass(frozen=True)
class Selectors:
    """CSS selectors for interactive elements and extraction markers."""

    search_input: str = "input#company_search"
    search_button: str = "button.btn-search"
    autocomplete_dropdown: str = ".typeahead[role='listbox']"
    autocomplete_item: str = ".typeahead [role='option']"
    cookie_button: str = "button#accept-cookies"

    # Detail page layout
    section_heading: str = ".h2"
    content_card: str = ".card-body"
    field_row: str = ".row"
    field_label: str = ".text-muted, .col-md-4, .col-4"
    field_value: str = ".font-weight-bold, .col:not(.col-md-4):not(.text-muted)"

    # Search results layout
    result_link: str = "a.h2.text-primary"
    result_label: str = ".col-md-2"
    result_value: str = ".col.font-weight-bold"


@dataclass(frozen=True)
class RelationTables:
    """How the officer, shareholder and beneficial owner tables are found."""

    officers_table_id: str = "representativesTable"
    beneficial_owners_table_id: str = "beneficiaries-table"
    shareholders_header: str = "Participation"
    contribution_currency: str = "EUR"


@dataclass(frozen=True)
class RegistryConfig:
    """Everything an extraction call needs to know about one registry."""

    jurisdiction: str
    base_url: str
    search_url: str
    wanted_sections: tuple[str, ...] = DEFAULT_SECTIONS
    field_map: FieldMap = field(default_factory=FieldMap)
    selectors: Selectors = field(default_factory=Selectors)
    relation_tables: RelationTables = field(default_factory=RelationTables)
    user_agent: str = DEFAULT_USER_AGENT
    headless: bool = True
    data_folder: str = DEFAULT_DATA_FOLDER


def _parse_sections(raw: str | None) -> tuple[str, ...]:
    """Parse a comma-separated WANTED_SECTIONS value."""
    if not raw or not raw.strip():
        return DEFAULT_SECTIONS
    sections = tuple(s.strip() for s in raw.split(",") if s.strip())
    return sections or DEFAULT_SECTIONS


def get_registry_config(jurisdiction_code: str | None = None) -> RegistryConfig:
    """Build the registry configuration for a jurisdiction.

    Args:
        jurisdiction_code: ISO 3166-1 alpha-2 code, case-insensitive.
            Unknown or empty codes use the default registry.

    Returns:
        A frozen RegistryConfig with environment overrides applied.
    """
    jurisdiction = normalize_jurisdiction(jurisdiction_code)
    endpoints = resolve_jurisdiction_endpoints(jurisdiction)
    defaults = Selectors()
    field_defaults = FieldMap()

    return RegistryConfig(
        jurisdiction=jurisdiction,
        base_url=os.getenv("BASE_URL") or endpoints.base_url,
        search_url=os.getenv("SEARCH_URL") or endpoints.search_url,
        wanted_sections=_parse_sections(os.getenv("WANTED_SECTIONS")),
        field_map=FieldMap(
            registry_code=os.getenv("FIELD_REGISTRY_CODE") or field_defaults.registry_code,
            vat_number=os.getenv("FIELD_VAT_NUMBER") or field_defaults.vat_number,
            incorporated=os.getenv("FIELD_INCORPORATED") or field_defaults.incorporated,
            legal_form=os.getenv("FIELD_LEGAL_FORM") or field_defaults.legal_form,
            status=os.getenv("FIELD_STATUS") or field_defaults.status,
        ),
        selectors=Selectors(
            search_input=os.getenv("SELECTOR_SEARCH_INPUT") or defaults.search_input,
            search_button=os.getenv("SELECTOR_SEARCH_BUTTON") or defaults.search_button,
            autocomplete_dropdown=(
                os.getenv("SELECTOR_AUTOCOMPLETE_DROPDOWN") or defaults.autocomplete_dropdown
            ),
            autocomplete_item=(
                os.getenv("SELECTOR_AUTOCOMPLETE_ITEM") or defaults.autocomplete_item
            ),
        ),
        user_agent=os.getenv("USER_AGENT") or DEFAULT_USER_AGENT,
        headless=os.getenv("BROWSER_HEADLESS") != "false",
        data_folder=os.getenv("DATA_FOLDER") or DEFAULT_DATA_FOLDER,
    )
