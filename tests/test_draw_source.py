from unittest.mock import MagicMock

import pytest
import requests

from ticket_checker.draw_source import PowerballDrawSource, extract_latest_block_lines
from ticket_checker.exceptions import DrawSourceError

RESULTS_HTML = """
<html><body>
  <div class="results">
    <a href="/draw-result?gc=powerball&date=2025-09-03" class="card">
      <h5 class="card-title">Wed, Sep 3, 2025</h5>
      <div class="white-balls">3</div>
      <div class="white-balls">16</div>
      <div class="white-balls">29</div>
      <div class="white-balls">61</div>
      <div class="white-balls">69</div>
      <div class="powerball">22</div>
      <div class="multiplier"><span>Power Play</span> <span>2x</span></div>
    </a>
    <a href="/draw-result?gc=powerball&date=2025-09-01" class="card">
      <h5 class="card-title">Mon, Sep 1, 2025</h5>
      <div class="white-balls">8</div>
    </a>
  </div>
</body></html>
"""


def _session_returning(text, status_code=200):
    response = MagicMock()
    response.text = text
    response.status_code = status_code
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(f"{status_code} error")
    session = MagicMock()
    session.get.return_value = response
    return session


def test_extract_takes_only_first_block():
    lines = extract_latest_block_lines(RESULTS_HTML)
    assert lines == ["Wed, Sep 3, 2025", "3", "16", "29", "61", "69", "22", "Power Play", "2x"]


def test_extract_without_block_raises():
    with pytest.raises(DrawSourceError):
        extract_latest_block_lines("<html><body><p>Maintenance</p></body></html>")


def test_fetch_latest_draw_parses_page():
    session = _session_returning(RESULTS_HTML)
    source = PowerballDrawSource(url="https://example.test/results", timeout=5, session=session)

    draw = source.fetch_latest_draw()

    assert draw.numbers == (3, 16, 29, 61, 69)
    assert draw.powerball == 22
    assert draw.multiplier == "2x"
    args, kwargs = session.get.call_args
    assert args[0] == "https://example.test/results"
    assert kwargs["timeout"] == 5
    assert "User-Agent" in kwargs["headers"]


def test_http_error_becomes_draw_source_error():
    source = PowerballDrawSource(session=_session_returning("", status_code=503))
    with pytest.raises(DrawSourceError):
        source.fetch_latest_lines()


def test_network_error_becomes_draw_source_error():
    session = MagicMock()
    session.get.side_effect = requests.exceptions.ConnectionError("no route")
    source = PowerballDrawSource(session=session)
    with pytest.raises(DrawSourceError) as exc_info:
        source.fetch_latest_lines()
    assert isinstance(exc_info.value.original_error, requests.exceptions.ConnectionError)
