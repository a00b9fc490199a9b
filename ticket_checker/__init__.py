"""
Powerball Ticket Checker
========================

Checks lottery tickets photographed on paper receipts against the latest
published Powerball drawing:

- Draw parsing: results page block -> DrawResult
- Match classification: ticket + drawing -> MatchOutcome with tier
- Batch aggregation: many receipt images -> BatchSummary
"""

__version__ = "1.0.0"

from .exceptions import (
    TicketCheckerError,
    MalformedDrawResult,
    DrawSourceError,
    RecognitionFailure,
    InvalidTicketShape,
    ConfigurationError,
    ReceiptDirectoryError,
)

from .models import (
    DrawResult,
    Ticket,
    TicketCandidate,
    MatchTier,
    MatchOutcome,
    ImageStatus,
    ImageResult,
    BatchSummary,
    validate_ticket,
)

from .draw_parser import DrawResultParser, parse_draw_lines
from .match_classifier import classify, tier_for
from .batch_aggregator import aggregate

__all__ = [
    # Errors
    'TicketCheckerError',
    'MalformedDrawResult',
    'DrawSourceError',
    'RecognitionFailure',
    'InvalidTicketShape',
    'ConfigurationError',
    'ReceiptDirectoryError',

    # Data model
    'DrawResult',
    'Ticket',
    'TicketCandidate',
    'MatchTier',
    'MatchOutcome',
    'ImageStatus',
    'ImageResult',
    'BatchSummary',
    'validate_ticket',

    # Core operations
    'DrawResultParser',
    'parse_draw_lines',
    'classify',
    'tier_for',
    'aggregate',
]
