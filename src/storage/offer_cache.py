# src/storage/offer_cache.py

"""Single-slot JSON file cache for the daily offers."""

import logging
from datetime import datetime
from pathlib import Path

import simplejson

from src.config.settings import Settings
from src.models.offer import ResponseData

logger = logging.getLogger("daily_deals.cache")


def today_str() -> str:
    """Today's date on the local process clock, as ``YYYY-MM-DD``."""
    return datetime.now().strftime(Settings.DATE_FORMAT)


class OfferCache:
    """Persists the last extraction result and serves it for the day.

    Read problems of any kind mean "no cache"; write problems are
    logged and never fail the result already computed.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path if path is not None else Settings.CACHE_PATH

    def load(self) -> ResponseData | None:
        """Return the cached result regardless of its date."""
        if not self.path.exists():
            logger.info("No local file found at %s", self.path)
            return None

        try:
            with open(self.path, encoding="utf-8") as f:
                raw = simplejson.load(f, use_decimal=True)
            return ResponseData.from_dict(raw)
        except (OSError, ValueError, TypeError, AttributeError) as exc:
            # simplejson.JSONDecodeError is a ValueError
            logger.error(
                "Error reading cache file %s: %s", self.path, exc
            )
            return None

    def load_fresh(self, today: str | None = None) -> ResponseData | None:
        """Return the cached result only if it was written today."""
        cached = self.load()
        if cached is None:
            return None
        current = today or today_str()
        if cached.last_updated != current:
            logger.info(
                "Cache is stale (lastUpdated=%s, today=%s)",
                cached.last_updated,
                current,
            )
            return None
        logger.info("Local file is up to date (%s)", current)
        return cached

    def store(self, data: ResponseData) -> bool:
        """Overwrite the cache slot with *data*."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                simplejson.dump(
                    data.to_dict(),
                    f,
                    ensure_ascii=False,
                    indent="\t",
                    use_decimal=True,
                )
        except (OSError, TypeError, ValueError) as exc:
            logger.error(
                "Error writing cache file %s: %s",
                self.path,
                exc,
                exc_info=True,
            )
            return False

        logger.info(
            "Wrote %d offers to %s", len(data.offers), self.path
        )
        return True
