"""
Ticket Checker Orchestration
Fetches the latest drawing, reads every receipt image and classifies the tickets.

Collaborators are injected:
- draw_source: anything with fetch_latest_lines() -> list of text lines
- reader: anything with read_tickets(image_path) -> list of raw ticket candidates
"""

import time
from pathlib import Path
from typing import Any, List, Protocol, Sequence, Tuple

from loguru import logger

from ticket_checker.batch_aggregator import RecognitionResult, aggregate
from ticket_checker.draw_parser import parse_draw_lines
from ticket_checker.exceptions import RecognitionFailure
from ticket_checker.models import BatchSummary, DrawResult


class DrawSource(Protocol):
    def fetch_latest_lines(self) -> List[str]:
        ...


class TicketReader(Protocol):
    def read_tickets(self, image_path: Path) -> Sequence[Any]:
        ...


class TicketChecker:
    """Runs one checking pass over a set of receipt images."""

    def __init__(self, draw_source: DrawSource, reader: TicketReader, request_delay: float = 0.0):
        self.draw_source = draw_source
        self.reader = reader
        self.request_delay = request_delay

    def load_draw(self) -> DrawResult:
        """
        Fetch and parse the latest drawing.

        DrawSourceError and MalformedDrawResult propagate: without a drawing
        there is nothing to check against.
        """
        return parse_draw_lines(self.draw_source.fetch_latest_lines())

    def _read_one(self, image_path: Path) -> RecognitionResult:
        try:
            return list(self.reader.read_tickets(image_path))
        except RecognitionFailure as e:
            logger.warning(f"Could not read ticket numbers from {image_path.name}: {e.reason}")
            return e
        except Exception as e:
            logger.error(f"Error processing {image_path.name}: {e}")
            return RecognitionFailure(image_path.name, str(e), original_error=e)

    def recognize_all(self, images: Sequence[Path]) -> List[Tuple[str, RecognitionResult]]:
        """Read each image in order. A failing image never stops the others."""
        recognized = []
        for i, image_path in enumerate(images):
            image_path = Path(image_path)
            if i > 0 and self.request_delay > 0:
                time.sleep(self.request_delay)
            logger.info(f"Processing: {image_path.name}")
            recognized.append((image_path.name, self._read_one(image_path)))
        return recognized

    def check(self, images: Sequence[Path]) -> BatchSummary:
        draw = self.load_draw()
        return aggregate(draw, self.recognize_all(images))
