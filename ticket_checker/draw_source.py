"""
Powerball Draw Source
Fetches the official previous-results page and extracts the most recent drawing block.
"""

from typing import List, Optional

import requests
from bs4 import BeautifulSoup
from loguru import logger

from ticket_checker.draw_parser import parse_draw_lines
from ticket_checker.exceptions import DrawSourceError
from ticket_checker.models import DrawResult

DEFAULT_RESULTS_URL = "https://www.powerball.com/previous-results"
DRAW_BLOCK_SELECTOR = 'a[href*="draw-result"]'

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}


def extract_latest_block_lines(html: str) -> List[str]:
    """
    Return the trimmed, non-empty text lines of the first drawing block on the page.

    Raises:
        DrawSourceError: no drawing block on the page
    """
    soup = BeautifulSoup(html, "html.parser")
    block = soup.select_one(DRAW_BLOCK_SELECTOR)
    if block is None:
        raise DrawSourceError(
            f"No drawing block ({DRAW_BLOCK_SELECTOR}) found - page structure may have changed"
        )

    text = block.get_text(separator="\n")
    return [line.strip() for line in text.split("\n") if line.strip()]


class PowerballDrawSource:
    """
    Reads the latest drawing from powerball.com.

    Only the most recent block is returned; older drawings on the page are ignored.
    """

    def __init__(self, url: str = DEFAULT_RESULTS_URL, timeout: float = 15,
                 session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_latest_lines(self) -> List[str]:
        logger.info(f"Fetching latest Powerball results from {self.url}")
        try:
            response = self.session.get(self.url, headers=DEFAULT_HEADERS, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching latest results: {e}")
            raise DrawSourceError(f"Could not fetch {self.url}", original_error=e) from e

        lines = extract_latest_block_lines(response.text)
        logger.debug(f"Latest drawing block lines: {lines}")
        return lines

    def fetch_latest_draw(self) -> DrawResult:
        return parse_draw_lines(self.fetch_latest_lines())
