"""Company registry router.

Provides endpoints for searching a national company registry, reading its
autocomplete suggestions and scraping a company's full detail page. Each
request drives its own browser session through RegistryScraperService.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.jurisdictions import normalize_jurisdiction
from app.models import CompanyDetailRecord
from app.schemas.company import (
    AutocompleteResponse,
    CompanyLookupRequest,
    CompanySearchResult,
    CompleteInfoRequest,
)
from app.services.registry_scraper_service import (
    RegistryScraperService,
    get_registry_scraper_service,
)

logger = logging.getLogger(__name__)

router = APIRouter()

MISSING_QUERY_ERROR = 'At least one of "company_name" or "company_number" is required.'
MISSING_URL_ERROR = '"url" is required and must be a non-empty string.'
EXAMPLE_DETAIL_URL = "https://ariregister.rik.ee/eng/company/14532901/Bolt-Operations-O%C3%9C"


def _sanitize_for_log(value: str, max_length: int = 100) -> str:
    """Sanitize a string for safe logging to prevent log injection."""
    sanitized = "".join(c if c.isprintable() and c not in "\n\r\t" else " " for c in value)
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "..."
    return sanitized


def _require_query(request: CompanyLookupRequest, example_name: str) -> str:
    query = request.query
    if not query:
        logger.info("Validation failed: no query provided")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": MISSING_QUERY_ERROR,
                "example": {"jurisdiction_code": "ee", "company_name": example_name},
            },
        )
    return query


@router.post(
    "/getCompanyByNameOrNumber",
    response_model=list[CompanySearchResult],
    status_code=status.HTTP_200_OK,
    summary="Search companies",
    description="Search a company registry by company name or registry code.",
)
async def get_company_by_name_or_number(
    request: CompanyLookupRequest,
    service: RegistryScraperService = Depends(get_registry_scraper_service),
) -> list[CompanySearchResult]:
    """Search the registry and return every matching company.

    Raises:
        HTTPException: 400 without a query, 404 when nothing matches,
            500 when the registry could not be searched.
    """
    query = _require_query(request, "BOLT OPERATIONS OÜ")
    jurisdiction = normalize_jurisdiction(request.jurisdiction_code)
    logger.info(f"Company search for '{_sanitize_for_log(query)}' in {jurisdiction}")

    try:
        entries = await service.search_companies(query, jurisdiction)
    except Exception as e:
        logger.error(f"Company search failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to search company.", "details": str(e)},
        )

    if not entries:
        logger.info(f"No companies found for '{_sanitize_for_log(query)}' in {jurisdiction}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "No companies found.", "query": query},
        )

    logger.info(f"Found {len(entries)} companies")
    return [
        CompanySearchResult(
            jurisdiction_code=jurisdiction,
            company_name=entry.name,
            company_number=entry.registry_code,
            address=entry.address,
            status=entry.status,
            url=entry.url,
        )
        for entry in entries
    ]


@router.post(
    "/getAutocompleteSuggestions",
    response_model=AutocompleteResponse,
    status_code=status.HTTP_200_OK,
    summary="Autocomplete suggestions",
    description="Read the registry's search-as-you-type suggestions for a partial query.",
)
async def get_autocomplete_suggestions(
    request: CompanyLookupRequest,
    service: RegistryScraperService = Depends(get_registry_scraper_service),
) -> AutocompleteResponse:
    """Return the registry's autocomplete suggestions for a query."""
    query = _require_query(request, "abc")
    jurisdiction = normalize_jurisdiction(request.jurisdiction_code)
    logger.info(f"Autocomplete for '{_sanitize_for_log(query)}' in {jurisdiction}")

    try:
        suggestions = await service.get_autocomplete_suggestions(query, jurisdiction)
    except Exception as e:
        logger.error(f"Autocomplete lookup failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to get suggestions.", "details": str(e)},
        )

    if not suggestions:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "No autocomplete suggestions found.", "query": query},
        )

    return AutocompleteResponse(
        jurisdiction_code=jurisdiction, query=query, suggestions=suggestions
    )


@router.post(
    "/getCompleteInfo",
    response_model=CompanyDetailRecord,
    status_code=status.HTTP_200_OK,
    summary="Company details",
    description="Scrape a company detail page into identity, officers, shareholders and beneficial owners.",
)
async def get_complete_info(
    request: CompleteInfoRequest,
    service: RegistryScraperService = Depends(get_registry_scraper_service),
) -> CompanyDetailRecord:
    """Scrape the company detail page at the given URL."""
    url = (request.url or "").strip()
    jurisdiction = normalize_jurisdiction(request.jurisdiction_code)

    if not url:
        logger.info("Validation failed: invalid url")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": MISSING_URL_ERROR,
                "example": {"jurisdiction_code": "ee", "url": EXAMPLE_DETAIL_URL},
            },
        )

    logger.info(f"Complete info for {_sanitize_for_log(url, 200)} in {jurisdiction}")
    try:
        return await service.scrape_company_by_url(url, jurisdiction)
    except Exception as e:
        logger.error(f"Company detail scrape failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to retrieve company info.", "details": str(e)},
        )
