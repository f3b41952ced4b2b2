# src/services/health_checker.py

"""Connectivity health checks for the specials page and Gemini."""

import asyncio
import logging
import time
from dataclasses import dataclass

from src.config.settings import Settings
from src.extraction.gemini_client import GeminiOfferExtractor
from src.scrapers.specials_scraper import SpecialsScraper

logger = logging.getLogger("daily_deals.health")

_HEALTH_TIMEOUT = 10  # seconds per probe
_SLOW_MS = 5000


@dataclass
class HealthResult:
    """Result of a single health probe."""

    source_id: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def probe_specials_page() -> HealthResult:
    """GET the specials page and count the specials links on it."""
    source_id = "specials_page"
    try:
        scraper = SpecialsScraper()
    except Exception as exc:
        return HealthResult(
            source_id=source_id,
            status="down",
            latency_ms=0.0,
            message=f"Failed to create scraper: {exc}",
        )

    start = time.monotonic()
    try:
        resp = scraper.session.get(
            scraper.settings.SPECIALS_URL,
            headers=scraper.settings.DEFAULT_HEADERS,
            timeout=_HEALTH_TIMEOUT,
        )
        elapsed_ms = (time.monotonic() - start) * 1000

        if resp.status_code != 200:
            return HealthResult(
                source_id=source_id,
                status="down",
                latency_ms=elapsed_ms,
                message=f"HTTP {resp.status_code}",
            )

        urls = SpecialsScraper.extract_image_urls(
            resp.text, scraper.settings.SPECIALS_MARKER
        )
        if not urls:
            return HealthResult(
                source_id=source_id,
                status="down",
                latency_ms=elapsed_ms,
                message="No specials images linked",
            )

        return HealthResult(
            source_id=source_id,
            status="slow" if elapsed_ms > _SLOW_MS else "ok",
            latency_ms=elapsed_ms,
            message=f"{len(urls)} images linked",
        )

    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(
            source_id=source_id,
            status="down",
            latency_ms=elapsed_ms,
            message=str(exc)[:80],
        )
    finally:
        scraper.session.close()


def probe_gemini() -> HealthResult:
    """Check that a Gemini client can be built and can list files."""
    source_id = "gemini"
    if not Settings.GEMINI_API_KEY:
        return HealthResult(
            source_id=source_id,
            status="down",
            latency_ms=0.0,
            message="GEMINI_API_KEY is not set",
        )

    extractor = GeminiOfferExtractor()
    if extractor.client is None:
        return HealthResult(
            source_id=source_id,
            status="down",
            latency_ms=0.0,
            message="Failed to create Gemini client",
        )

    start = time.monotonic()
    try:
        remote_files = list(extractor.client.files.list())
        elapsed_ms = (time.monotonic() - start) * 1000
        leftovers = sum(1 for f in remote_files if extractor._is_ours(f))
        return HealthResult(
            source_id=source_id,
            status="slow" if elapsed_ms > _SLOW_MS else "ok",
            latency_ms=elapsed_ms,
            message=f"{leftovers} leftover uploads" if leftovers else "",
        )
    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(
            source_id=source_id,
            status="down",
            latency_ms=elapsed_ms,
            message=str(exc)[:80],
        )
    finally:
        extractor.close()


class HealthChecker:
    """Runs every probe concurrently."""

    def __init__(self) -> None:
        self.probes = [probe_specials_page, probe_gemini]

    async def check_all(self) -> list[HealthResult]:
        tasks = [asyncio.to_thread(probe) for probe in self.probes]
        results: list[HealthResult] = list(await asyncio.gather(*tasks))
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.source_id,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
