"""Pydantic models for the Company Registry Extraction API.

Records produced by the extraction engine are frozen value objects: they are
built once per extraction call and never mutated afterwards. JSON keys follow
the payload shapes consumed by registry API clients, which mix camelCase
(search results, relation metadata) and snake_case (detail record).
"""

from pydantic import BaseModel, ConfigDict, Field


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(word.capitalize() for word in components[1:])


class Link(BaseModel):
    """Anchor found inside a detail page section.

    Attributes:
        text: Trimmed anchor text.
        href: Absolute URL; never empty and never a bare ``#``.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    href: str = Field(..., min_length=1)


class Section(BaseModel):
    """Titled block of a registry detail page.

    Attributes:
        title: Heading text exactly as shown on the page (trimmed).
        fields: Label to value mapping in document order; a repeated label
            keeps its last value.
        content: Whitespace-normalized text of the block without its heading.
        links: Anchors inside the block in document order.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    fields: dict[str, str] = Field(default_factory=dict)
    content: str = ""
    links: list[Link] = Field(default_factory=list)


class SearchResultEntry(BaseModel):
    """Single hit on a registry search results page."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    name: str = Field(..., min_length=1)
    registry_code: str = ""
    status: str = ""
    address: str = ""
    url: str = ""


class AutocompleteSuggestion(BaseModel):
    """Entry of the registry's search-as-you-type dropdown."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., min_length=1)


class _RelationRecord(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        serialize_by_alias=True,
    )


class Officer(_RelationRecord):
    """Member of the management board or other legal representative."""

    name: str = ""
    position: str = ""
    entity_type: str | None = Field(default=None, alias="entityType")


class Shareholder(_RelationRecord):
    """Holder of a participation in the company.

    Attributes:
        name: Shareholder name.
        shares: Participation as printed by the registry (e.g. "100%").
        share_count: Not published by the registry, always None.
        entity_type: Not published by the registry, always None.
        control_type: Free-text nature of the holding, taken from the
            contribution column.
    """

    name: str = ""
    shares: str = ""
    share_count: int | None = Field(default=None, alias="shareCount")
    entity_type: str | None = Field(default=None, alias="entityType")
    control_type: str = Field(default="", alias="type_of_control")


class BeneficialOwner(_RelationRecord):
    """Natural person with ultimate control over the company."""

    name: str = ""
    position: str | None = None
    entity_type: str | None = Field(default=None, alias="entityType")
    control_type: str = Field(default="", alias="type_of_control")


RelationRecord = Officer | Shareholder | BeneficialOwner


class CompanyDetailRecord(BaseModel):
    """Composed company profile returned by ``/getCompleteInfo``.

    Attributes:
        company_name: Name taken from the page title.
        company_number: Registry code.
        jurisdiction_ident: VAT number, empty when not VAT registered.
        incorporation_date: Registration date as printed.
        dissolution_date: Not extracted, always empty.
        company_type: Legal form.
        current_status: Registry status (e.g. "Entered into the register").
        more_info_available: True when at least one wanted section was found.
        ultimate_beneficial_owners: Beneficial owners.
        officers: Legal representatives.
        shareholders: Shareholders.
    """

    model_config = ConfigDict(frozen=True)

    company_name: str = ""
    company_number: str = ""
    jurisdiction_ident: str = ""
    incorporation_date: str = ""
    dissolution_date: str = ""
    company_type: str = ""
    current_status: str = ""
    more_info_available: bool = False
    ultimate_beneficial_owners: list[BeneficialOwner] = Field(default_factory=list)
    officers: list[Officer] = Field(default_factory=list)
    shareholders: list[Shareholder] = Field(default_factory=list)
