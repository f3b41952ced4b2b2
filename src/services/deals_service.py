# src/services/deals_service.py

"""Orchestrates the scrape, extract and cache pipeline."""

import asyncio
import logging
import threading
from collections.abc import Callable

from src.config.settings import Settings
from src.extraction.gemini_client import GeminiOfferExtractor
from src.models.offer import Location, ResponseData
from src.scrapers.specials_scraper import SpecialsScraper
from src.storage.offer_cache import OfferCache, today_str

logger = logging.getLogger("daily_deals.service")


class DealsService:
    """Serves today's offers, running the full pipeline at most daily.

    Scraper and extractor are built per run through the given
    factories so that each run gets fresh HTTP sessions and a fresh
    Gemini client.
    """

    def __init__(
        self,
        cache: OfferCache | None = None,
        scraper_factory: Callable[[], SpecialsScraper] = SpecialsScraper,
        extractor_factory: Callable[
            [], GeminiOfferExtractor
        ] = GeminiOfferExtractor,
    ) -> None:
        self.settings = Settings()
        self.cache = cache or OfferCache()
        self._scraper_factory = scraper_factory
        self._extractor_factory = extractor_factory
        # One refresh at a time, within a loop and across threads
        self._lock = asyncio.Lock()
        self._sync_lock = threading.Lock()

    def _empty_response(self, today: str) -> ResponseData:
        return ResponseData(
            last_updated=today,
            business=self.settings.BUSINESS_NAME,
            location=Location.from_dict(self.settings.LOCATION),
        )

    async def fetch_offers(
        self, force_refresh: bool = False,
    ) -> ResponseData:
        """Return today's offers from cache or from a fresh run."""
        async with self._lock:
            if not force_refresh:
                cached = await asyncio.to_thread(self.cache.load_fresh)
                if cached is not None:
                    return cached
            return await self._run_pipeline()

    async def _run_pipeline(self) -> ResponseData:
        logger.info("Starting offers extraction run")
        today = today_str()
        extractor = self._extractor_factory()
        try:
            removed = await asyncio.to_thread(
                extractor.cleanup_remote_files
            )
            if removed:
                logger.info("Removed %d leftover remote files", removed)

            scraper = self._scraper_factory()
            images = await scraper.fetch_images()

            resp = self._empty_response(today)
            resp.offers = await extractor.extract_all(images)
        finally:
            extractor.close()

        logger.info(
            "Run complete: %d offers from %d images",
            len(resp.offers),
            len(images),
        )
        await asyncio.to_thread(self.cache.store, resp)
        return resp

    def fetch_offers_sync(self, force_refresh: bool = False) -> ResponseData:
        """Blocking wrapper for callers outside an event loop."""
        with self._sync_lock:
            return asyncio.run(self.fetch_offers(force_refresh))
