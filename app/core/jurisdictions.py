"""Registry endpoints keyed by ISO 3166-1 alpha-2 jurisdiction code."""

from dataclasses import dataclass

DEFAULT_JURISDICTION = "ee"


@dataclass(frozen=True)
class JurisdictionEndpoints:
    """Base and search URLs of a national company registry."""

    base_url: str
    search_url: str


JURISDICTION_ENDPOINTS: dict[str, JurisdictionEndpoints] = {
    "ee": JurisdictionEndpoints(
        base_url="https://ariregister.rik.ee",
        search_url="https://ariregister.rik.ee/eng",
    ),
    "lv": JurisdictionEndpoints(
        base_url="https://www.ur.gov.lv",
        search_url="https://www.ur.gov.lv/lv/search",
    ),
    "lt": JurisdictionEndpoints(
        base_url="https://www.registrucentras.lt",
        search_url="https://www.registrucentras.lt/jar/paieska",
    ),
    "fi": JurisdictionEndpoints(
        base_url="https://www.ytj.fi",
        search_url="https://www.ytj.fi/en/yrityshaku",
    ),
    "se": JurisdictionEndpoints(
        base_url="https://www.bolagsverket.se",
        search_url="https://www.bolagsverket.se/en/foretagsinformation/foretagsregister",
    ),
    "dk": JurisdictionEndpoints(
        base_url="https://datacvr.virk.dk",
        search_url="https://datacvr.virk.dk/data/visenhed",
    ),
    "no": JurisdictionEndpoints(
        base_url="https://www.brreg.no",
        search_url="https://w2.brreg.no/enhet/sok",
    ),
    "de": JurisdictionEndpoints(
        base_url="https://www.handelsregister.de",
        search_url="https://www.handelsregister.de/rp_web/mask.do?Typ=e",
    ),
    "pl": JurisdictionEndpoints(
        base_url="https://ekrs.ms.gov.pl",
        search_url="https://ekrs.ms.gov.pl/rdf/podmioty",
    ),
}


def normalize_jurisdiction(code: str | None) -> str:
    """Lower-case a jurisdiction code, defaulting to Estonia."""
    return (code or DEFAULT_JURISDICTION).strip().lower() or DEFAULT_JURISDICTION


def resolve_jurisdiction_endpoints(code: str | None) -> JurisdictionEndpoints:
    """Look up registry endpoints, falling back to the default jurisdiction."""
    return JURISDICTION_ENDPOINTS.get(
        normalize_jurisdiction(code), JURISDICTION_ENDPOINTS[DEFAULT_JURISDICTION]
    )
