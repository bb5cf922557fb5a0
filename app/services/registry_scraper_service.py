"""Registry scraper service driving a headless browser against company registries.

Every public method opens its own browser, so concurrent API requests never
share page state. The browser is always closed, including when navigation
fails. Waits that time out while looking for search results or autocomplete
suggestions mean "nothing found" and produce an empty list; navigation and
other driver errors are logged and re-raised for the router to report.
"""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from app.core.config import RegistryConfig, get_registry_config
from app.models import AutocompleteSuggestion, CompanyDetailRecord, SearchResultEntry
from app.services.detail_composer import compose_company_detail
from app.services.relation_table_extractor import (
    extract_relations_from_page,
    relation_table_specs,
)
from app.services.search_result_extractor import (
    extract_autocomplete_suggestions,
    extract_search_results,
)
from app.services.section_extractor import extract_all_sections
from app.services.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)

# Browser waits (milliseconds)
COOKIE_BANNER_TIMEOUT_MS = 2000
COOKIE_SETTLE_MS = 800
SEARCH_SETTLE_MS = 1500
SEARCH_RESULTS_TIMEOUT_MS = 5000
AUTOCOMPLETE_TIMEOUT_MS = 4000
AUTOCOMPLETE_KEY_DELAY_MS = 80
DETAIL_CONTENT_TIMEOUT_MS = 15000

ITEM_TEXT_SCRIPT = "items => items.map(item => item.textContent ?? '')"


class RegistryScraperService:
    """Searches company registries and scrapes company detail pages."""

    def __init__(
        self,
        config_provider: Callable[[str | None], RegistryConfig] = get_registry_config,
    ) -> None:
        """Initialize the scraper service.

        Args:
            config_provider: Builds the registry configuration for a
                jurisdiction code on every call.
        """
        self._config_provider = config_provider

    @asynccontextmanager
    async def _open_page(self, config: RegistryConfig) -> AsyncIterator[Page]:
        """Launch a browser for one request and yield a fresh page."""
        logger.info(
            f"Launching browser for jurisdiction {config.jurisdiction} "
            f"(search URL {config.search_url})"
        )
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(headless=config.headless)
            try:
                page = await browser.new_page(user_agent=config.user_agent)
                yield page
            finally:
                await browser.close()
                logger.info(f"Browser closed for jurisdiction {config.jurisdiction}")

    async def _accept_cookies(self, page: Page, config: RegistryConfig) -> None:
        """Dismiss the cookie banner when it shows up."""
        button = page.locator(config.selectors.cookie_button).first
        try:
            await button.wait_for(state="visible", timeout=COOKIE_BANNER_TIMEOUT_MS)
            await button.click()
            await page.wait_for_timeout(COOKIE_SETTLE_MS)
            logger.debug("Cookie banner accepted")
        except PlaywrightError:
            logger.debug("No cookie banner present")

    async def _open_search(self, page: Page, config: RegistryConfig) -> None:
        await page.goto(config.search_url, wait_until="networkidle")
        await self._accept_cookies(page, config)
        await page.wait_for_selector(config.selectors.search_input)

    async def _save_snapshot(
        self,
        page: Page,
        config: RegistryConfig,
        name: str,
        data: Any,
        full_page: bool = True,
    ) -> None:
        store = SnapshotStore(config.data_folder)
        screenshot_path, json_path = store.snapshot_paths(config.jurisdiction, name)
        await page.screenshot(path=str(screenshot_path), full_page=full_page)
        store.save_json(json_path, data)

    async def search_companies(
        self, query: str, jurisdiction_code: str | None = None
    ) -> list[SearchResultEntry]:
        """Search the registry by company name or registry code.

        Args:
            query: Company name or registry code.
            jurisdiction_code: Registry to search.

        Returns:
            Matching entries; empty when the registry shows no results.
        """
        config = self._config_provider(jurisdiction_code)
        selectors = config.selectors
        logger.info(f"Searching {config.jurisdiction} registry")

        async with self._open_page(config) as page:
            try:
                await self._open_search(page, config)
                await page.fill(selectors.search_input, query)
                await page.click(selectors.search_button)
                await page.wait_for_timeout(SEARCH_SETTLE_MS)

                try:
                    await page.wait_for_selector(
                        selectors.result_link,
                        state="attached",
                        timeout=SEARCH_RESULTS_TIMEOUT_MS,
                    )
                except PlaywrightTimeoutError:
                    logger.info(f"No search results in {config.jurisdiction} registry")
                    return []

                html = await page.content()
                results = extract_search_results(html, config.base_url, selectors)
                logger.info(f"Extracted {len(results)} search results")

                if results:
                    await self._save_snapshot(
                        page,
                        config,
                        f"search-{query}",
                        [r.model_dump() for r in results],
                    )
                return results
            except Exception as e:
                logger.error(f"Registry search failed: {e}")
                raise

    async def get_autocomplete_suggestions(
        self, query: str, jurisdiction_code: str | None = None
    ) -> list[AutocompleteSuggestion]:
        """Type a query into the search box and read the suggestion dropdown.

        Returns:
            Suggestions in dropdown order; empty when no dropdown appears.
        """
        config = self._config_provider(jurisdiction_code)
        selectors = config.selectors
        logger.info(f"Fetching autocomplete suggestions from {config.jurisdiction} registry")

        async with self._open_page(config) as page:
            try:
                await self._open_search(page, config)
                await page.click(selectors.search_input)
                await page.type(selectors.search_input, query, delay=AUTOCOMPLETE_KEY_DELAY_MS)

                try:
                    await page.wait_for_selector(
                        selectors.autocomplete_dropdown,
                        state="visible",
                        timeout=AUTOCOMPLETE_TIMEOUT_MS,
                    )
                except PlaywrightTimeoutError:
                    logger.info("No autocomplete dropdown appeared")
                    return []

                try:
                    item_texts = await page.eval_on_selector_all(
                        selectors.autocomplete_item, ITEM_TEXT_SCRIPT
                    )
                except PlaywrightError as e:
                    logger.warning(f"Failed to read autocomplete items: {e}")
                    item_texts = []

                suggestions = extract_autocomplete_suggestions(item_texts)
                logger.info(f"Extracted {len(suggestions)} suggestions")

                await self._save_snapshot(
                    page,
                    config,
                    f"autocomplete-{query}",
                    [s.model_dump() for s in suggestions],
                    full_page=False,
                )
                return suggestions
            except Exception as e:
                logger.error(f"Autocomplete lookup failed: {e}")
                raise

    async def scrape_company_by_url(
        self, url: str, jurisdiction_code: str | None = None
    ) -> CompanyDetailRecord:
        """Open a company detail page and extract its full record.

        Args:
            url: Company detail page URL.
            jurisdiction_code: Registry the URL belongs to.

        Returns:
            The composed company detail record.
        """
        config = self._config_provider(jurisdiction_code)
        logger.info(f"Scraping company detail page for {config.jurisdiction}")

        async with self._open_page(config) as page:
            try:
                await page.goto(url, wait_until="networkidle")

                # Accepting cookies reloads the page, so read the title first
                page_title = await page.title()
                await self._accept_cookies(page, config)
                await page.wait_for_selector(
                    config.selectors.content_card, timeout=DETAIL_CONTENT_TIMEOUT_MS
                )
                await page.wait_for_load_state("networkidle")

                html = await page.content()
                sections = extract_all_sections(
                    html, config.wanted_sections, config.base_url, config.selectors
                )
                logger.info(f"Extracted {len(sections)} sections")

                specs = relation_table_specs(config.relation_tables)
                record = compose_company_detail(
                    page_title,
                    sections,
                    officers=await extract_relations_from_page(page, specs.officers),
                    shareholders=await extract_relations_from_page(page, specs.shareholders),
                    beneficial_owners=await extract_relations_from_page(
                        page, specs.beneficial_owners
                    ),
                    field_map=config.field_map,
                )

                await self._save_snapshot(
                    page, config, record.company_name or "company", record.model_dump()
                )
                return record
            except Exception as e:
                logger.error(f"Company detail scrape failed: {e}")
                raise


# Module-level singleton
_registry_scraper_service: RegistryScraperService | None = None


def get_registry_scraper_service() -> RegistryScraperService:
    """Get the singleton RegistryScraperService instance."""
    global _registry_scraper_service
    if _registry_scraper_service is None:
        _registry_scraper_service = RegistryScraperService()
    return _registry_scraper_service
