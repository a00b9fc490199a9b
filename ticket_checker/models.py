"""
Ticket Checker Data Model
=========================

Immutable records shared by the parser, the classifier and the aggregator:

- DrawResult: one official drawing (date, 5 numbers, powerball, power play)
- Ticket: one validated play from a receipt
- TicketCandidate: loosely typed play as returned by the recognition model
- MatchOutcome / ImageResult / BatchSummary: derived, read-only results
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, List, Optional, Sequence, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from ticket_checker.exceptions import InvalidTicketShape, MalformedDrawResult

MAIN_NUMBER_COUNT = 5
MAIN_NUMBER_MIN, MAIN_NUMBER_MAX = 1, 69
POWERBALL_MIN, POWERBALL_MAX = 1, 26


def _main_numbers_problem(numbers: Sequence[Any]) -> Optional[str]:
    """Return a description of what is wrong with a main number set, or None."""
    if len(numbers) != MAIN_NUMBER_COUNT:
        return f"expected {MAIN_NUMBER_COUNT} main numbers, got {len(numbers)}"
    for n in numbers:
        if isinstance(n, bool) or not isinstance(n, int):
            return f"main number {n!r} is not an integer"
        if not MAIN_NUMBER_MIN <= n <= MAIN_NUMBER_MAX:
            return f"main number {n} out of range {MAIN_NUMBER_MIN}-{MAIN_NUMBER_MAX}"
    if len(set(numbers)) != MAIN_NUMBER_COUNT:
        return f"main numbers contain duplicates: {list(numbers)}"
    return None


def _powerball_problem(powerball: Any) -> Optional[str]:
    if isinstance(powerball, bool) or not isinstance(powerball, int):
        return f"powerball {powerball!r} is not an integer"
    if not POWERBALL_MIN <= powerball <= POWERBALL_MAX:
        return f"powerball {powerball} out of range {POWERBALL_MIN}-{POWERBALL_MAX}"
    return None


@dataclass(frozen=True)
class DrawResult:
    """Latest official drawing. Invalid values are rejected on construction."""
    date: str
    numbers: Tuple[int, ...]
    powerball: int
    multiplier: str = ""

    def __post_init__(self):
        object.__setattr__(self, "numbers", tuple(self.numbers))
        problem = _main_numbers_problem(self.numbers) or _powerball_problem(self.powerball)
        if problem:
            raise MalformedDrawResult(f"Invalid draw result: {problem}")


@dataclass(frozen=True)
class Ticket:
    """A single validated play (line A, B, ...) from a receipt."""
    line_id: str
    main_numbers: Tuple[int, ...]
    powerball: int

    def __post_init__(self):
        object.__setattr__(self, "main_numbers", tuple(self.main_numbers))
        problem = _main_numbers_problem(self.main_numbers) or _powerball_problem(self.powerball)
        if problem:
            raise InvalidTicketShape(self.line_id, problem)


MainNumber = Annotated[int, Field(ge=MAIN_NUMBER_MIN, le=MAIN_NUMBER_MAX)]


class TicketCandidate(BaseModel):
    """Schema for one ticket line as returned by the recognition model."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    line: str = Field(default="?", validation_alias=AliasChoices("line", "lineId", "line_id"))
    main_numbers: List[MainNumber] = Field(
        ...,
        min_length=MAIN_NUMBER_COUNT,
        max_length=MAIN_NUMBER_COUNT,
        validation_alias=AliasChoices("mainNumbers", "main_numbers"),
    )
    powerball: int = Field(..., ge=POWERBALL_MIN, le=POWERBALL_MAX)

    @field_validator("line", mode="before")
    @classmethod
    def _normalize_line(cls, value):
        if value is None:
            return "?"
        text = str(value).strip().rstrip(".").upper()
        return text or "?"

    @field_validator("main_numbers", mode="before")
    @classmethod
    def _reject_bool_numbers(cls, value):
        if isinstance(value, (list, tuple)) and any(isinstance(n, bool) for n in value):
            raise ValueError(f"main numbers must be integers, got {value}")
        return value

    @field_validator("powerball", mode="before")
    @classmethod
    def _reject_bool_powerball(cls, value):
        if isinstance(value, bool):
            raise ValueError(f"powerball must be an integer, got {value}")
        return value

    @field_validator("main_numbers")
    @classmethod
    def _distinct_numbers(cls, value):
        if len(set(value)) != len(value):
            raise ValueError(f"main numbers contain duplicates: {value}")
        return value

    def to_ticket(self) -> Ticket:
        return Ticket(line_id=self.line, main_numbers=tuple(self.main_numbers), powerball=self.powerball)


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        location = ".".join(str(p) for p in err.get("loc", ())) or "ticket"
        parts.append(f"{location}: {err.get('msg')}")
    return "; ".join(parts)


def validate_ticket(candidate: Any) -> Ticket:
    """
    Turn a recognition candidate into a Ticket.

    Accepts an existing Ticket, a TicketCandidate, or a raw mapping from the
    recognition payload. Raises InvalidTicketShape when the shape is wrong.
    """
    if isinstance(candidate, Ticket):
        return candidate
    if isinstance(candidate, TicketCandidate):
        return candidate.to_ticket()
    if not isinstance(candidate, dict):
        raise InvalidTicketShape("?", f"unsupported ticket candidate type {type(candidate).__name__}")

    try:
        return TicketCandidate.model_validate(candidate).to_ticket()
    except ValidationError as e:
        line_id = candidate.get("line") or candidate.get("lineId") or candidate.get("line_id") or "?"
        raise InvalidTicketShape(str(line_id), _describe_validation_error(e)) from e


class MatchTier(str, Enum):
    """Named match categories, highest first."""
    FIVE_PLUS_PB = "5+PB"
    FIVE = "5"
    FOUR_PLUS_PB = "4+PB"
    FOUR = "4"
    THREE_PLUS_PB = "3+PB"
    THREE = "3"
    TWO_PLUS_PB = "2+PB"
    ONE_PLUS_PB = "1+PB"
    PB_ONLY = "PB"

    @property
    def label(self) -> str:
        return _TIER_LABELS[self][0]

    @property
    def description(self) -> str:
        return _TIER_LABELS[self][1]


_TIER_LABELS = {
    MatchTier.FIVE_PLUS_PB: ("5 + Powerball", "All 5 numbers + Powerball"),
    MatchTier.FIVE: ("5 numbers", "All 5 numbers"),
    MatchTier.FOUR_PLUS_PB: ("4 + Powerball", "4 numbers + Powerball"),
    MatchTier.FOUR: ("4 numbers", "4 numbers"),
    MatchTier.THREE_PLUS_PB: ("3 + Powerball", "3 numbers + Powerball"),
    MatchTier.THREE: ("3 numbers", "3 numbers"),
    MatchTier.TWO_PLUS_PB: ("2 + Powerball", "2 numbers + Powerball"),
    MatchTier.ONE_PLUS_PB: ("1 + Powerball", "1 number + Powerball"),
    MatchTier.PB_ONLY: ("Powerball only", "Powerball only"),
}


@dataclass(frozen=True)
class MatchOutcome:
    ticket: Ticket
    main_match_count: int
    powerball_match: bool
    matching_numbers: Tuple[int, ...]
    tier: Optional[MatchTier]

    @property
    def is_winner(self) -> bool:
        return self.tier is not None


class ImageStatus(str, Enum):
    CLASSIFIED = "classified"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class ImageResult:
    """Outcome of one receipt image. `dropped` keeps reasons for rejected tickets."""
    image_id: str
    status: ImageStatus
    outcomes: Tuple[MatchOutcome, ...] = ()
    dropped: Tuple[str, ...] = ()
    error: Optional[str] = None

    @property
    def winner_count(self) -> int:
        return sum(1 for o in self.outcomes if o.is_winner)


@dataclass(frozen=True)
class BatchSummary:
    draw: DrawResult
    results: Tuple[ImageResult, ...] = field(default_factory=tuple)
    winner_count: int = 0

    @property
    def total_tickets(self) -> int:
        return sum(len(r.outcomes) for r in self.results)

    @property
    def failed_images(self) -> List[str]:
        return [r.image_id for r in self.results if r.status is ImageStatus.FAILED]

    @property
    def has_winners(self) -> bool:
        return self.winner_count > 0
