"""
Batch Aggregator
Classifies every ticket of every receipt image against one drawing.

A failed or empty image is recorded and skipped, an invalid ticket is dropped
from its image; neither stops the rest of the batch.
"""

from typing import Any, List, Sequence, Tuple, Union

from loguru import logger

from ticket_checker.exceptions import InvalidTicketShape, RecognitionFailure
from ticket_checker.match_classifier import classify
from ticket_checker.models import (
    BatchSummary,
    DrawResult,
    ImageResult,
    ImageStatus,
    MatchOutcome,
    validate_ticket,
)

RecognitionResult = Union[Sequence[Any], RecognitionFailure]


def _aggregate_image(image_id: str, recognition: RecognitionResult, draw: DrawResult) -> ImageResult:
    if isinstance(recognition, RecognitionFailure):
        logger.warning(f"Image {image_id} skipped: {recognition.reason}")
        return ImageResult(image_id=image_id, status=ImageStatus.FAILED, error=recognition.reason)

    if not recognition:
        logger.warning(f"Image {image_id}: no tickets recognized")
        return ImageResult(image_id=image_id, status=ImageStatus.EMPTY)

    outcomes: List[MatchOutcome] = []
    dropped: List[str] = []
    for candidate in recognition:
        try:
            ticket = validate_ticket(candidate)
        except InvalidTicketShape as e:
            logger.warning(f"Image {image_id}: dropping ticket - {e}")
            dropped.append(str(e))
            continue
        outcomes.append(classify(ticket, draw))

    status = ImageStatus.CLASSIFIED if outcomes else ImageStatus.EMPTY
    return ImageResult(image_id=image_id, status=status, outcomes=tuple(outcomes), dropped=tuple(dropped))


def aggregate(draw: DrawResult, per_image: Sequence[Tuple[str, RecognitionResult]]) -> BatchSummary:
    """
    Classify all recognized tickets, image by image.

    Args:
        draw: The drawing to check against
        per_image: (image_id, tickets or RecognitionFailure) in the order to report

    Returns:
        BatchSummary with results in input order and the total winner count
    """
    results = []
    winner_count = 0

    for image_id, recognition in per_image:
        result = _aggregate_image(image_id, recognition, draw)
        winner_count += result.winner_count
        results.append(result)
        logger.info(
            f"Image {image_id}: {result.status.value}, {len(result.outcomes)} ticket(s), "
            f"{result.winner_count} winner(s)"
        )

    summary = BatchSummary(draw=draw, results=tuple(results), winner_count=winner_count)
    logger.info(
        f"Batch complete: {len(results)} image(s), {summary.total_tickets} ticket(s), "
        f"{winner_count} winning ticket(s)"
    )
    return summary
