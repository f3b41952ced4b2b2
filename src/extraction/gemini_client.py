# src/extraction/gemini_client.py

"""Gemini-backed extraction of structured offers from specials images."""

import asyncio
import io
import logging
from typing import Any

import simplejson
from google import genai
from google.genai import types

from src.config.settings import Settings
from src.models.offer import Offer

logger = logging.getLogger("daily_deals.gemini")


class GeminiOfferExtractor:
    """Uploads images to the Gemini Files API and asks for offer JSON.

    A client that cannot be constructed is logged and left as ``None``;
    every operation then logs and returns an empty result so a single
    run never aborts on extraction problems.
    """

    def __init__(self, api_key: str | None = None) -> None:
        self.settings = Settings()
        self.prefix: str = self.settings.REMOTE_FILE_PREFIX
        self.client: Any = self._create_client(
            api_key if api_key is not None else self.settings.GEMINI_API_KEY
        )

    @staticmethod
    def _create_client(api_key: str) -> Any:
        try:
            return genai.Client(api_key=api_key)
        except Exception as exc:
            logger.error(
                "Error creating Gemini client: %s", exc, exc_info=True
            )
            return None

    def close(self) -> None:
        """Release the underlying HTTP transport."""
        if self.client is None:
            return
        close = getattr(self.client, "close", None)
        if close is None:
            return
        try:
            close()
        except Exception as exc:
            logger.error("Error closing Gemini client: %s", exc)

    # ── Remote file housekeeping ─────────────────────────

    def _is_ours(self, remote_file: Any) -> bool:
        name = str(getattr(remote_file, "name", "") or "")
        display = str(getattr(remote_file, "display_name", "") or "")
        return self.prefix in name or self.prefix in display

    def cleanup_remote_files(self) -> int:
        """Delete leftover uploads carrying this server's prefix.

        Returns the number of files deleted.
        """
        if self.client is None:
            logger.error("Gemini client unavailable, skipping cleanup")
            return 0

        deleted = 0
        try:
            remote_files = list(self.client.files.list())
        except Exception as exc:
            logger.error(
                "Error while listing files: %s", exc, exc_info=True
            )
            return 0

        for remote_file in remote_files:
            if not self._is_ours(remote_file):
                continue
            logger.info("Deleting file %s", remote_file.name)
            if self.delete_remote_file(remote_file.name):
                deleted += 1
        return deleted

    def delete_remote_file(self, name: str) -> bool:
        """Best-effort delete of one uploaded file."""
        if self.client is None:
            return False
        try:
            self.client.files.delete(name=name)
            return True
        except Exception as exc:
            logger.error("Error deleting file %s: %s", name, exc)
            return False

    # ── Per-image operations ─────────────────────────────

    def upload_image(self, index: int, image: bytes) -> Any:
        """Upload one image; ``None`` when empty or on failure."""
        if not image:
            logger.error("Empty image at index %d", index)
            return None
        if self.client is None:
            logger.error("Gemini client unavailable, cannot upload")
            return None

        image_name = f"{self.prefix}{index}-jpg"
        logger.info("Uploading image %d as %s", index, image_name)
        try:
            remote_file = self.client.files.upload(
                file=io.BytesIO(image),
                config=types.UploadFileConfig(
                    name=image_name,
                    display_name=image_name,
                    mime_type=self.settings.IMAGE_MIME_TYPE,
                ),
            )
        except Exception as exc:
            logger.error(
                "Failed to upload image %d to Gemini: %s",
                index,
                exc,
                exc_info=True,
            )
            return None
        logger.info("Uploading image %d successful", index)
        return remote_file

    def extract_offers(self, remote_file: Any) -> list[Offer]:
        """Ask Gemini for the offers in one uploaded image.

        The uploaded file is deleted afterwards whether or not the
        request succeeded.
        """
        if self.client is None:
            logger.error("Gemini client unavailable, cannot extract")
            return []

        name = str(getattr(remote_file, "name", ""))
        try:
            logger.info("Requesting offer extraction for %s", name)
            response = self.client.models.generate_content(
                model=self.settings.GEMINI_MODEL,
                contents=[remote_file, self.settings.EXTRACTION_PROMPT],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                ),
            )
        except Exception as exc:
            logger.error(
                "Offer extraction failed for %s: %s",
                name,
                exc,
                exc_info=True,
            )
            return []
        finally:
            self.delete_remote_file(name)

        text = self._first_text(response)
        if text is None:
            logger.error("Empty response received for %s", name)
            return []

        offers = self.parse_offers(text)
        logger.info("Extracted %d offers from %s", len(offers), name)
        return offers

    @staticmethod
    def _first_text(response: Any) -> str | None:
        """Return the text of the first part of the first candidate."""
        if response is None:
            return None
        for candidate in getattr(response, "candidates", None) or []:
            content = getattr(candidate, "content", None)
            for part in getattr(content, "parts", None) or []:
                text = getattr(part, "text", None)
                return text if isinstance(text, str) else None
        return None

    @staticmethod
    def parse_offers(text: str) -> list[Offer]:
        """Parse a JSON ``Array<Offer>`` into Offer records.

        Malformed JSON yields ``[]``; individual invalid entries are
        skipped.
        """
        try:
            raw: Any = simplejson.loads(text, use_decimal=True)
        except simplejson.JSONDecodeError as exc:
            logger.error("Error decoding offers JSON: %s", exc)
            return []

        if not isinstance(raw, list):
            logger.error(
                "Expected a JSON array of offers, got %s",
                type(raw).__name__,
            )
            return []

        offers: list[Offer] = []
        for item in raw:
            if not isinstance(item, dict):
                logger.warning("Skipping non-object offer: %r", item)
                continue
            try:
                offers.append(Offer.from_dict(item))
            except ValueError as exc:
                logger.warning("Skipping invalid offer %r: %s", item, exc)
        return offers

    # ── Fan-out ──────────────────────────────────────────

    async def extract_all(self, images: list[bytes]) -> list[Offer]:
        """Upload every image, then extract offers from every upload.

        Each stage runs at most MAX_WORKERS calls at once and completes
        before the next begins.  Offers are flattened across images in
        image order.
        """
        semaphore = asyncio.Semaphore(max(1, self.settings.MAX_WORKERS))

        async def upload_one(index: int, image: bytes) -> Any:
            async with semaphore:
                return await asyncio.to_thread(
                    self.upload_image, index, image
                )

        async def extract_one(remote_file: Any) -> list[Offer]:
            async with semaphore:
                return await asyncio.to_thread(
                    self.extract_offers, remote_file
                )

        uploads = await asyncio.gather(
            *(upload_one(i, img) for i, img in enumerate(images)),
            return_exceptions=True,
        )
        remote_files = [
            u for u in uploads
            if u is not None and not isinstance(u, BaseException)
        ]
        for u in uploads:
            if isinstance(u, BaseException):
                logger.error("Upload task crashed: %s", u, exc_info=u)

        logger.info(
            "Querying Gemini for %d uploaded images", len(remote_files)
        )
        batches = await asyncio.gather(
            *(extract_one(f) for f in remote_files),
            return_exceptions=True,
        )

        offers: list[Offer] = []
        for batch in batches:
            if isinstance(batch, list):
                offers.extend(batch)
            elif isinstance(batch, BaseException):
                logger.error(
                    "Extraction task crashed: %s", batch, exc_info=batch
                )
        return offers
