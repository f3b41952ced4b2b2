# src/scrapers/specials_scraper.py

"""Scraper for the Big Watermelon daily specials page and its images."""

import asyncio
import logging
import re
from typing import Any

import cloudscraper  # type: ignore[import-untyped]
from bs4 import BeautifulSoup
from curl_cffi import requests as curl_requests

from src.config.settings import Settings


class SpecialsScraper:
    """Downloads the specials page and every linked specials image."""

    # Cloudflare challenge page markers
    _CF_CHALLENGE_MARKERS: list[str] = [
        "challenges.cloudflare.com",
        "cdn-cgi/challenge-platform",
        "cf-turnstile",
        "cf_chl_opt",
    ]

    def __init__(self) -> None:
        self.logger = logging.getLogger("daily_deals.scraper")
        self.settings = Settings()
        self.session = self._new_session()
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def _new_session(self) -> curl_requests.Session:
        """Create a browser-impersonating HTTP session."""
        return curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )

    def _is_challenge_page(self, text: str) -> bool:
        """Check for a Cloudflare challenge instead of real content."""
        lower = text.lower()
        for marker in self._CF_CHALLENGE_MARKERS:
            if marker in lower:
                self.logger.warning(
                    "Cloudflare challenge detected (marker: '%s')",
                    marker,
                )
                return True
        return False

    def _fetch_get(
        self,
        session: curl_requests.Session,
        url: str,
        headers: dict[str, str],
    ) -> curl_requests.Response | None:
        """GET *url*, returning the response only on HTTP 200."""
        for attempt in range(self.settings.MAX_RETRIES):
            try:
                resp = session.get(
                    url,
                    headers=headers,
                    timeout=self._request_timeout,
                )
                if resp.status_code == 200:
                    return resp
                self.logger.error(
                    "HTTP %d for %s on attempt %d",
                    resp.status_code,
                    url,
                    attempt + 1,
                )
            except Exception as exc:
                self.logger.error(
                    "Request error for %s on attempt %d: %s",
                    url,
                    attempt + 1,
                    exc,
                    exc_info=True,
                )
        return None

    def fetch_page_html(self) -> str | None:
        """Fetch the specials page, falling back to cloudscraper."""
        url = self.settings.SPECIALS_URL
        headers: dict[str, str] = {**self.settings.DEFAULT_HEADERS}
        self.logger.info("Downloading specials page %s", url)

        # Primary: curl_cffi (browser-impersonating TLS)
        resp = self._fetch_get(self.session, url, headers)
        if resp is not None and resp.text and not self._is_challenge_page(
            resp.text
        ):
            self.logger.info("Successfully fetched specials page")
            return str(resp.text)

        # Fallback: cloudscraper (JS challenge solver)
        self.logger.info("curl_cffi failed, falling back to cloudscraper")
        try:
            _cs: Any = cloudscraper
            scraper: Any = _cs.create_scraper()
            fallback_resp: Any = scraper.get(
                url,
                headers=headers,
                timeout=self._request_timeout,
            )
            if fallback_resp.status_code == 200 and fallback_resp.text:
                return str(fallback_resp.text)
            self.logger.error(
                "cloudscraper got HTTP %d for %s",
                fallback_resp.status_code,
                url,
            )
        except Exception as e:
            self.logger.error(
                "cloudscraper fallback also failed: %s",
                e,
                exc_info=True,
            )
        return None

    @staticmethod
    def extract_image_urls(
        html: str, marker: str = Settings.SPECIALS_MARKER,
    ) -> list[str]:
        """Return every href containing *marker* (case-insensitive).

        Document order is kept; repeated links are returned once.
        """
        soup = BeautifulSoup(html, "lxml")
        pattern = re.compile(re.escape(marker), re.IGNORECASE)
        urls: list[str] = []
        for tag in soup.find_all(href=pattern):
            href = str(tag.get("href", "")).strip()
            if href and href not in urls:
                urls.append(href)
        return urls

    def download_image(self, url: str) -> bytes | None:
        """Download one image; ``None`` on any failure or empty body."""
        self.logger.info("Downloading image %s", url)
        # Sessions are not shared between worker threads
        session = self._new_session()
        try:
            resp = self._fetch_get(
                session,
                url,
                {**self.settings.DEFAULT_HEADERS, "Accept": "image/*"},
            )
            if resp is None:
                return None
            content = bytes(resp.content or b"")
            if not content:
                self.logger.error("Empty image body for %s", url)
                return None
            return content
        finally:
            session.close()

    async def download_images(self, urls: list[str]) -> list[bytes]:
        """Download *urls* concurrently with at most MAX_WORKERS in flight.

        Each task fills its own slot; failed slots are dropped once
        every task has finished.
        """
        semaphore = asyncio.Semaphore(max(1, self.settings.MAX_WORKERS))

        async def run_one(url: str) -> bytes | None:
            async with semaphore:
                return await asyncio.to_thread(self.download_image, url)

        slots = await asyncio.gather(
            *(run_one(u) for u in urls), return_exceptions=True
        )

        images: list[bytes] = []
        for url, slot in zip(urls, slots):
            if isinstance(slot, bytes):
                images.append(slot)
            elif isinstance(slot, BaseException):
                self.logger.error(
                    "Image download crashed for %s: %s",
                    url,
                    slot,
                    exc_info=slot,
                )
        self.logger.info(
            "Downloaded %d of %d specials images", len(images), len(urls)
        )
        return images

    async def fetch_images(self) -> list[bytes]:
        """Fetch the specials page and download every specials image."""
        html = await asyncio.to_thread(self.fetch_page_html)
        if not html:
            return []

        urls = self.extract_image_urls(html, self.settings.SPECIALS_MARKER)
        if not urls:
            self.logger.error(
                "No specials images found on %s",
                self.settings.SPECIALS_URL,
            )
            return []

        self.logger.info("Extracted %d specials image URLs", len(urls))
        return await self.download_images(urls)
