# tests/test_settings.py

"""Tests for the Settings configuration class."""

import unittest
from pathlib import Path

from src.config.settings import Settings


class TestSettings(unittest.TestCase):
    """Verify Settings constants."""

    def test_request_timeout_is_positive_int(self) -> None:
        """REQUEST_TIMEOUT must be a positive integer."""
        self.assertIsInstance(Settings.REQUEST_TIMEOUT, int)
        self.assertGreater(Settings.REQUEST_TIMEOUT, 0)

    def test_single_attempt_per_request(self) -> None:
        """Failed downloads are dropped, not retried."""
        self.assertEqual(Settings.MAX_RETRIES, 1)

    def test_max_workers_positive(self) -> None:
        """MAX_WORKERS bounds the fan-out and must be >= 1."""
        self.assertGreaterEqual(Settings.MAX_WORKERS, 1)

    def test_specials_url_is_https(self) -> None:
        self.assertTrue(Settings.SPECIALS_URL.startswith("https://"))

    def test_remote_prefix_is_valid_file_name(self) -> None:
        """Remote names only allow lowercase alphanumerics and dashes."""
        self.assertRegex(Settings.REMOTE_FILE_PREFIX, r"^[a-z0-9-]+$")

    def test_prompt_describes_offer_schema(self) -> None:
        """The extraction prompt names every Offer field."""
        for key in ("productName", "price", "currency", "size"):
            with self.subTest(key=key):
                self.assertIn(key, Settings.EXTRACTION_PROMPT)

    def test_location_has_required_keys(self) -> None:
        for key in ("latitude", "longitude", "address", "city",
                    "state", "zip", "country"):
            with self.subTest(key=key):
                self.assertIn(key, Settings.LOCATION)

    def test_port_default(self) -> None:
        self.assertIsInstance(Settings.PORT, int)
        self.assertGreater(Settings.PORT, 0)

    def test_path_constants_are_paths(self) -> None:
        """Path-typed settings are Path instances."""
        self.assertIsInstance(Settings.BASE_DIR, Path)
        self.assertIsInstance(Settings.CACHE_PATH, Path)
        self.assertIsInstance(Settings.LOGS_DIR, Path)

    def test_impersonate_browser_is_string(self) -> None:
        """IMPERSONATE_BROWSER must be a non-empty string."""
        self.assertIsInstance(Settings.IMPERSONATE_BROWSER, str)
        self.assertTrue(len(Settings.IMPERSONATE_BROWSER) > 0)

    def test_cache_path_redirected_per_test(self) -> None:
        """conftest points CACHE_PATH at an empty temp directory."""
        cache_path = Settings.CACHE_PATH
        self.assertTrue(cache_path.parent.is_dir())
        self.assertNotEqual(cache_path.parent.resolve(), Path.cwd().resolve())
        self.assertFalse(cache_path.exists())


if __name__ == "__main__":
    unittest.main()
