# tests/test_offer_cache.py

"""Tests for the single-slot offers file cache."""

import json
import tempfile
import unittest
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import simplejson

from src.models.offer import Location, Offer, ResponseData
from src.storage.offer_cache import OfferCache, today_str


def _response(last_updated: str) -> ResponseData:
    return ResponseData(
        last_updated=last_updated,
        business="Big Watermelon Bushy Park",
        location=Location(city="Wantirna South", state="VIC"),
        offers=[Offer("Bananas", Decimal("2.99"), "AUD", "kg")],
    )


class TestOfferCache(unittest.TestCase):
    """OfferCache unit tests."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "offers.json"
        self.cache = OfferCache(self.path)

    # ── load() ───────────────────────────────────────────

    def test_missing_file_is_no_cache(self) -> None:
        self.assertIsNone(self.cache.load())

    def test_invalid_json_is_no_cache(self) -> None:
        self.path.write_text("{broken", encoding="utf-8")
        self.assertIsNone(self.cache.load())

    def test_wrong_shape_is_no_cache(self) -> None:
        self.path.write_text("[1, 2, 3]", encoding="utf-8")
        self.assertIsNone(self.cache.load())

    def test_bad_offer_is_no_cache(self) -> None:
        self.path.write_text(
            json.dumps({"lastUpdated": today_str(),
                        "offers": [{"productName": "x", "price": "?"}]}),
            encoding="utf-8",
        )
        self.assertIsNone(self.cache.load())

    # ── store() ──────────────────────────────────────────

    def test_store_then_load(self) -> None:
        self.assertTrue(self.cache.store(_response("2026-10-17")))
        loaded = self.cache.load()
        assert loaded is not None
        self.assertEqual(loaded.last_updated, "2026-10-17")
        self.assertEqual(loaded.offers[0].price, Decimal("2.99"))
        self.assertEqual(loaded.location.city, "Wantirna South")

    def test_store_writes_camel_case_json(self) -> None:
        self.cache.store(_response("2026-10-17"))
        raw = simplejson.loads(
            self.path.read_text(encoding="utf-8"), use_decimal=True
        )
        self.assertEqual(raw["lastUpdated"], "2026-10-17")
        self.assertEqual(raw["offers"][0]["productName"], "Bananas")
        self.assertEqual(raw["offers"][0]["price"], Decimal("2.99"))

    def test_store_keeps_long_decimal_price(self) -> None:
        data = _response("2026-10-17")
        data.offers[0].price = Decimal("0.1000000000000000001")
        self.assertTrue(self.cache.store(data))
        self.assertIn(
            "0.1000000000000000001", self.path.read_text(encoding="utf-8")
        )
        loaded = self.cache.load()
        assert loaded is not None
        self.assertEqual(
            loaded.offers[0].price, Decimal("0.1000000000000000001")
        )

    def test_store_overwrites_slot(self) -> None:
        self.cache.store(_response("2026-10-16"))
        newer = _response("2026-10-17")
        newer.offers = []
        self.cache.store(newer)
        loaded = self.cache.load()
        assert loaded is not None
        self.assertEqual(loaded.last_updated, "2026-10-17")
        self.assertEqual(loaded.offers, [])

    def test_store_failure_returns_false(self) -> None:
        self.path.mkdir()  # a directory cannot be opened for writing
        self.assertFalse(self.cache.store(_response("2026-10-17")))

    # ── load_fresh() ─────────────────────────────────────

    def test_fresh_same_day(self) -> None:
        self.cache.store(_response("2026-10-17"))
        self.assertIsNotNone(self.cache.load_fresh(today="2026-10-17"))

    def test_stale_previous_day(self) -> None:
        self.cache.store(_response("2026-10-16"))
        self.assertIsNone(self.cache.load_fresh(today="2026-10-17"))

    def test_fresh_uses_process_clock(self) -> None:
        self.cache.store(_response("2026-10-17"))
        with patch(
            "src.storage.offer_cache.today_str", return_value="2026-10-17"
        ):
            self.assertIsNotNone(self.cache.load_fresh())
        with patch(
            "src.storage.offer_cache.today_str", return_value="2026-10-18"
        ):
            self.assertIsNone(self.cache.load_fresh())

    def test_default_path_from_settings(self) -> None:
        from src.config.settings import Settings

        self.assertEqual(OfferCache().path, Settings.CACHE_PATH)


class TestTodayStr(unittest.TestCase):

    def test_format(self) -> None:
        self.assertRegex(today_str(), r"^\d{4}-\d{2}-\d{2}$")


if __name__ == "__main__":
    unittest.main()
