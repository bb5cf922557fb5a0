"""Services package for the Company Registry Extraction API."""

from app.services.detail_composer import compose_company_detail, extract_company_detail
from app.services.registry_scraper_service import (
    RegistryScraperService,
    get_registry_scraper_service,
)
from app.services.search_result_extractor import (
    extract_autocomplete_suggestions,
    extract_search_results,
)
from app.services.section_extractor import extract_all_sections

__all__ = [
    "RegistryScraperService",
    "get_registry_scraper_service",
    "compose_company_detail",
    "extract_company_detail",
    "extract_all_sections",
    "extract_search_results",
    "extract_autocomplete_suggestions",
]
