"""
Draw Result Parser
Turns the text lines of one drawing block from the results page into a DrawResult.

Expected block layout (after trimming and dropping blank lines):

    Wed, Sep 3, 2025      <- date
    3 16 29 61 69         <- one number per line, 5 lines
    22                    <- powerball
    Power Play            <- optional marker
    2x                    <- multiplier (line after the marker)
"""

import re
from typing import Iterable, List, Optional

from loguru import logger

from ticket_checker.exceptions import MalformedDrawResult
from ticket_checker.models import (
    MAIN_NUMBER_MAX,
    MAIN_NUMBER_MIN,
    POWERBALL_MAX,
    POWERBALL_MIN,
    DrawResult,
)

MIN_BLOCK_LINES = 7
POWER_PLAY_MARKER = "power play"

_INTEGER_RE = re.compile(r"^[0-9]+$")


def _clean_lines(lines: Iterable[str]) -> List[str]:
    return [line.strip() for line in lines if line and line.strip()]


def _parse_number(text: str, field_name: str, low: int, high: int) -> int:
    if not _INTEGER_RE.match(text):
        raise MalformedDrawResult(f"{field_name} is not an integer: {text!r}")
    value = int(text, 10)
    if not low <= value <= high:
        raise MalformedDrawResult(f"{field_name} {value} out of range {low}-{high}")
    return value


def _find_multiplier(lines: List[str]) -> str:
    marker_index: Optional[int] = None
    for i, line in enumerate(lines):
        if POWER_PLAY_MARKER in line.lower():
            marker_index = i
            break
    if marker_index is not None and marker_index + 1 < len(lines):
        return lines[marker_index + 1]
    return ""


def parse_draw_lines(lines: Iterable[str]) -> DrawResult:
    """
    Parse one drawing block.

    Args:
        lines: Ordered text lines of a single drawing block

    Returns:
        Validated DrawResult

    Raises:
        MalformedDrawResult: too few lines, or any number field invalid
    """
    cleaned = _clean_lines(lines)

    if len(cleaned) < MIN_BLOCK_LINES:
        logger.error(f"Drawing block has {len(cleaned)} lines, need at least {MIN_BLOCK_LINES}: {cleaned}")
        raise MalformedDrawResult(
            f"Drawing block too short: {len(cleaned)} lines, need at least {MIN_BLOCK_LINES}"
        )

    date = cleaned[0]
    try:
        numbers = [
            _parse_number(text, f"Number {i}", MAIN_NUMBER_MIN, MAIN_NUMBER_MAX)
            for i, text in enumerate(cleaned[1:6], start=1)
        ]
        powerball = _parse_number(cleaned[6], "Powerball", POWERBALL_MIN, POWERBALL_MAX)
        draw = DrawResult(
            date=date,
            numbers=tuple(numbers),
            powerball=powerball,
            multiplier=_find_multiplier(cleaned),
        )
    except MalformedDrawResult as e:
        logger.error(f"Could not parse drawing block for {date!r}: {e}")
        raise

    logger.info(
        f"Parsed draw {draw.date}: {' '.join(str(n) for n in draw.numbers)} "
        f"PB:{draw.powerball} Power Play:{draw.multiplier or '-'}"
    )
    return draw


class DrawResultParser:
    """Thin object wrapper so the parser can be injected where a collaborator is expected."""

    def parse(self, lines: Iterable[str]) -> DrawResult:
        return parse_draw_lines(lines)
