import os
import sys

import pytest

# Ensure repository root is on sys.path so `import ticket_checker.*` works during tests
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from ticket_checker.models import DrawResult, Ticket  # noqa: E402

DRAW_LINES = ["Wed, Sep 3, 2025", "3", "16", "29", "61", "69", "22"]


@pytest.fixture
def draw() -> DrawResult:
    return DrawResult(date="Wed, Sep 3, 2025", numbers=(3, 16, 29, 61, 69), powerball=22, multiplier="2x")


@pytest.fixture
def jackpot_ticket() -> Ticket:
    return Ticket(line_id="A", main_numbers=(3, 16, 29, 61, 69), powerball=22)


class FakeDrawSource:
    def __init__(self, lines=None, error=None):
        self.lines = list(DRAW_LINES) if lines is None else lines
        self.error = error
        self.calls = 0

    def fetch_latest_lines(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.lines


class FakeReader:
    """Returns canned tickets per image name; values that are exceptions are raised."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def read_tickets(self, image_path):
        self.calls.append(image_path.name)
        response = self.responses[image_path.name]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def fake_draw_source():
    return FakeDrawSource()


@pytest.fixture
def make_reader():
    return FakeReader


@pytest.fixture
def make_draw_source():
    return FakeDrawSource
