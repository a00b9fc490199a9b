"""
Match Classifier
Compares one ticket with the drawing and names the match tier.
No prize amounts are computed; the tier only says which combination matched.
"""

from typing import Optional, Tuple

from ticket_checker.models import DrawResult, MatchOutcome, MatchTier, Ticket

# Evaluated top to bottom, first row that applies wins.
# A count of None matches any number of main matches.
TIER_TABLE: Tuple[Tuple[Optional[int], bool, MatchTier], ...] = (
    (5, True, MatchTier.FIVE_PLUS_PB),
    (5, False, MatchTier.FIVE),
    (4, True, MatchTier.FOUR_PLUS_PB),
    (4, False, MatchTier.FOUR),
    (3, True, MatchTier.THREE_PLUS_PB),
    (3, False, MatchTier.THREE),
    (2, True, MatchTier.TWO_PLUS_PB),
    (1, True, MatchTier.ONE_PLUS_PB),
    (None, True, MatchTier.PB_ONLY),
)


def tier_for(main_match_count: int, powerball_match: bool) -> Optional[MatchTier]:
    """
    Look up the tier for a match combination.

    Two or fewer main matches without the Powerball never win.
    """
    for count, pb, tier in TIER_TABLE:
        if pb == powerball_match and (count is None or count == main_match_count):
            return tier
    return None


def classify(ticket: Ticket, draw: DrawResult) -> MatchOutcome:
    """
    Classify a single ticket against the drawing.

    Args:
        ticket: Validated ticket
        draw: Validated drawing result

    Returns:
        MatchOutcome with the matching numbers (in ticket order) and tier
    """
    drawn = set(draw.numbers)
    matching = tuple(n for n in ticket.main_numbers if n in drawn)
    powerball_match = ticket.powerball == draw.powerball

    return MatchOutcome(
        ticket=ticket,
        main_match_count=len(matching),
        powerball_match=powerball_match,
        matching_numbers=matching,
        tier=tier_for(len(matching), powerball_match),
    )
