"""
Report sinks for a BatchSummary: console text and a JSON-ready dict.
"""

from typing import Any, Dict, List

from ticket_checker.models import BatchSummary, DrawResult, ImageResult, ImageStatus, MatchOutcome

RULE = "=" * 80


def _numbers(values) -> str:
    return " ".join(str(n) for n in values)


def format_draw(draw: DrawResult) -> str:
    lines = [
        "🏆 LATEST WINNING NUMBERS:",
        f"📅 {draw.date}",
        f"🔢 Numbers: {_numbers(draw.numbers)}",
        f"🎱 Powerball: {draw.powerball}",
        f"⚡ Power Play: {draw.multiplier or '-'}",
    ]
    return "\n".join(lines)


def format_outcome(outcome: MatchOutcome) -> List[str]:
    ticket = outcome.ticket
    pb_text = "Powerball" if outcome.powerball_match else "no Powerball"
    lines = [f"{ticket.line_id}. Your numbers: {_numbers(ticket.main_numbers)} | PB: {ticket.powerball}"]

    if outcome.is_winner:
        lines.append(f"   🎉 WINNER! {outcome.tier.label}")
        lines.append(f"   ✓ Matched {outcome.main_match_count} main number(s) + {pb_text}")
        lines.append("   💰 Check official sources for prize amounts")
    elif outcome.main_match_count > 0 or outcome.powerball_match:
        lines.append(f"   📍 Partial match: {outcome.main_match_count} main number(s) + {pb_text}")
        if outcome.matching_numbers:
            lines.append(f"   🔢 Matching numbers: {', '.join(str(n) for n in outcome.matching_numbers)}")
    else:
        lines.append("   ❌ No matches")
    return lines


def format_image(result: ImageResult) -> List[str]:
    lines = [f"📷 {result.image_id}"]
    if result.status is ImageStatus.FAILED:
        lines.append(f"   ❌ Could not read ticket numbers from this image: {result.error}")
        return lines
    if result.status is ImageStatus.EMPTY:
        lines.append("   ❌ No valid tickets found on this image")
    for reason in result.dropped:
        lines.append(f"   ⚠️ Skipped unreadable line - {reason}")
    for outcome in result.outcomes:
        lines.extend(format_outcome(outcome))
    return lines


def format_summary(summary: BatchSummary) -> str:
    """Render the whole run as console text."""
    lines = [format_draw(summary.draw), "", RULE, "🎫 CHECKING YOUR TICKETS...", RULE]
    for result in summary.results:
        lines.append("")
        lines.extend(format_image(result))

    lines.extend(["", RULE])
    if summary.has_winners:
        lines.append(f"🎊 CONGRATULATIONS! You have {summary.winner_count} winning ticket(s) total!")
    else:
        lines.append("😔 No winning tickets found. Better luck next draw!")
    lines.append(RULE)
    return "\n".join(lines)


def draw_to_dict(draw: DrawResult) -> Dict[str, Any]:
    return {
        "date": draw.date,
        "numbers": list(draw.numbers),
        "powerball": draw.powerball,
        "power_play": draw.multiplier,
    }


def outcome_to_dict(outcome: MatchOutcome) -> Dict[str, Any]:
    return {
        "line": outcome.ticket.line_id,
        "main_numbers": list(outcome.ticket.main_numbers),
        "powerball": outcome.ticket.powerball,
        "main_matches": outcome.main_match_count,
        "powerball_match": outcome.powerball_match,
        "matching_numbers": list(outcome.matching_numbers),
        "tier": outcome.tier.value if outcome.tier else None,
        "match": outcome.tier.label if outcome.tier else None,
        "is_winner": outcome.is_winner,
    }


def summary_to_dict(summary: BatchSummary) -> Dict[str, Any]:
    """JSON-serializable view of a BatchSummary."""
    return {
        "draw": draw_to_dict(summary.draw),
        "images": [
            {
                "image": r.image_id,
                "status": r.status.value,
                "error": r.error,
                "dropped": list(r.dropped),
                "tickets": [outcome_to_dict(o) for o in r.outcomes],
            }
            for r in summary.results
        ],
        "total_tickets": summary.total_tickets,
        "total_winning_tickets": summary.winner_count,
    }
