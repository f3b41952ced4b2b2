# src/config/settings.py

"""Central configuration for the daily_deals server."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the daily_deals server."""

    # --- Scraping ---
    SPECIALS_URL: str = "https://www.bigwatermelon.com.au/dailyspecials/"
    # e.g. .../wp-content/uploads/2025/04/1-2.FRI-SPECIALS-11-4-25.jpg
    SPECIALS_MARKER: str = "-SPECIALS-"
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    MAX_RETRIES: int = 1                # Single attempt, failures are dropped
    MAX_WORKERS: int = int(os.getenv("MAX_WORKERS", "4"))

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,image/avif,"
            "image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "en-AU,en;q=0.9",
        "Upgrade-Insecure-Requests": "1",
    }

    # --- Extraction (Gemini) ---
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    REMOTE_FILE_PREFIX: str = "au-bigwatermelon-image-"
    IMAGE_MIME_TYPE: str = "image/jpeg"
    EXTRACTION_PROMPT: str = """
The image is an advertisement for fruits and vegetables that are on sale.
Offers are separated by thin vertical and horizontal black lines.
There are one or two offers per row.
The name and price of the fruits are in the right lower corner of each row.
Please extract the name and price of each offer from the image.
Split each item into product name, price, currency and optionally the packaging type (e.g. ea, pk, kg etc.).
Normalize the product names to start with upper case letters and the rest lower case letters.
For the result use this JSON schema:
Offer = {'productName': string, 'price': number, 'currency': string, 'size': string}
Return: Array<Offer>
"""

    # --- Business ---
    BUSINESS_NAME: str = "Big Watermelon Bushy Park"
    LOCATION: dict[str, str | float] = {
        "latitude": -37.8748714,
        "longitude": 145.2053244,
        "address": "1161 High St Rd",
        "city": "Wantirna South",
        "state": "VIC",
        "zip": "3152",
        "country": "Australia",
    }

    # --- Cache ---
    CACHE_PATH: Path = Path(os.getenv("OFFERS_CACHE_PATH", "offers.json"))
    DATE_FORMAT: str = "%Y-%m-%d"

    # --- Server ---
    HOST: str = os.getenv("DEALS_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("DEALS_PORT", "8080"))
    MCP_SERVER_NAME: str = "bigwatermelon"
    MCP_TOOL_NAME: str = "get-big-watermelon-deals"
    MCP_TOOL_DESCRIPTION: str = "Get today's deals from Big Watermelon"

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
