"""Parser for the JR East Green Car charge page.

Only parsing is done here: the page must already be saved locally.
"""

import logging
import re
from datetime import datetime, timezone

from bs4 import BeautifulSoup

from ..core.exceptions import FareTableParseError
from ..core.models import FareBand, FareTable

logger = logging.getLogger(__name__)

JR_EAST_GREEN_FARE_URL = "https://www.jreast.co.jp/railway/train/green/charge/"

# Row label pattern -> upper bound of the band (None = open-ended)
BAND_PATTERNS: list[tuple[re.Pattern[str], float | None]] = [
    (re.compile(r"50.?km"), 50),
    (re.compile(r"100.?km"), 100),
    (re.compile(r"101"), None),
]
EXPECTED_BANDS = 3


def _parse_price(text: str) -> int:
    digits = re.sub(r"\D", "", text)
    if not digits:
        raise FareTableParseError(f"No price found in cell: {text!r}")
    return int(digits)


def parse_fare_table_html(
    html: str,
    source: str = JR_EAST_GREEN_FARE_URL,
    updated_at: str | None = None,
) -> FareTable:
    """Extract the Green Car fare bands from the charge page HTML.

    Args:
        html: Page HTML
        source: URL recorded as the table's source
        updated_at: ISO-8601 timestamp, defaults to now (UTC)

    Returns:
        FareTable with the 50km, 100km and open-ended bands

    Raises:
        FareTableParseError: If the page does not yield exactly three bands
    """
    soup = BeautifulSoup(html, "html.parser")
    bands: list[FareBand] = []

    for row in soup.select("table tr"):
        cells = [td.get_text(strip=True) for td in row.find_all("td")]
        if len(cells) < 3:
            continue

        for pattern, max_km in BAND_PATTERNS:
            if pattern.search(cells[0]):
                bands.append(
                    FareBand(
                        max_km=max_km,
                        suica=_parse_price(cells[1]),
                        ticket=_parse_price(cells[2]),
                    )
                )
                logger.debug(f"Parsed fare band {cells[0]!r}: {cells[1]} / {cells[2]}")

    if len(bands) != EXPECTED_BANDS:
        raise FareTableParseError(
            f"Failed to parse fare bands. Found {len(bands)} bands "
            f"instead of {EXPECTED_BANDS}"
        )

    if updated_at is None:
        updated_at = datetime.now(timezone.utc).isoformat()

    logger.info(f"Parsed {len(bands)} fare bands from {source}")
    return FareTable(source=source, updated_at=updated_at, fare_bands=bands)
