from ticket_checker.batch_aggregator import aggregate
from ticket_checker.exceptions import RecognitionFailure
from ticket_checker.models import ImageStatus, MatchTier, Ticket

JACKPOT = {"line": "A", "mainNumbers": [3, 16, 29, 61, 69], "powerball": 22}
PB_ONLY = {"line": "B", "mainNumbers": [1, 2, 4, 5, 6], "powerball": 22}
LOSER = {"line": "C", "mainNumbers": [9, 29, 38, 40, 52], "powerball": 23}


def test_failed_image_is_isolated(draw):
    summary = aggregate(
        draw,
        [
            ("one.jpg", [JACKPOT, LOSER]),
            ("two.jpg", RecognitionFailure("two.jpg", "JSON parsing failed")),
            ("three.jpg", [PB_ONLY]),
        ],
    )

    assert [r.image_id for r in summary.results] == ["one.jpg", "two.jpg", "three.jpg"]
    one, two, three = summary.results
    assert one.status is ImageStatus.CLASSIFIED
    assert [o.ticket.line_id for o in one.outcomes] == ["A", "C"]
    assert two.status is ImageStatus.FAILED
    assert two.error == "JSON parsing failed"
    assert two.outcomes == ()
    assert three.outcomes[0].tier is MatchTier.PB_ONLY
    assert summary.winner_count == 2
    assert summary.failed_images == ["two.jpg"]


def test_failure_does_not_change_other_images(draw):
    without_failure = aggregate(draw, [("one.jpg", [JACKPOT]), ("three.jpg", [PB_ONLY])])
    with_failure = aggregate(
        draw,
        [("one.jpg", [JACKPOT]), ("two.jpg", RecognitionFailure("two.jpg", "x")), ("three.jpg", [PB_ONLY])],
    )
    assert with_failure.results[0] == without_failure.results[0]
    assert with_failure.results[2] == without_failure.results[1]
    assert with_failure.winner_count == without_failure.winner_count


def test_empty_image_marked_empty(draw):
    summary = aggregate(draw, [("blank.png", [])])
    assert summary.results[0].status is ImageStatus.EMPTY
    assert summary.winner_count == 0


def test_invalid_ticket_dropped_siblings_kept(draw):
    bad = {"line": "B", "mainNumbers": [1, 2, 3, 4], "powerball": 22}
    summary = aggregate(draw, [("r.png", [JACKPOT, bad, LOSER])])
    result = summary.results[0]
    assert [o.ticket.line_id for o in result.outcomes] == ["A", "C"]
    assert len(result.dropped) == 1
    assert "Ticket B" in result.dropped[0]
    assert summary.winner_count == 1


def test_all_tickets_invalid_marks_image_empty(draw):
    summary = aggregate(draw, [("r.png", [{"line": "A", "mainNumbers": [], "powerball": 1}])])
    assert summary.results[0].status is ImageStatus.EMPTY
    assert summary.results[0].dropped


def test_ticket_order_preserved_without_sorting(draw):
    tickets = [
        Ticket("C", (9, 29, 38, 40, 52), 23),
        Ticket("A", (3, 16, 29, 61, 69), 22),
        Ticket("B", (3, 16, 29, 1, 2), 5),
    ]
    summary = aggregate(draw, [("r.png", tickets)])
    assert [o.ticket.line_id for o in summary.results[0].outcomes] == ["C", "A", "B"]
    assert summary.winner_count == 2


def test_empty_batch(draw):
    summary = aggregate(draw, [])
    assert summary.results == ()
    assert summary.winner_count == 0
    assert summary.draw is draw
