from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from ticket_checker.api import create_app, get_checker, get_draw_source
from ticket_checker.checker import TicketChecker
from ticket_checker.config import Settings
from ticket_checker.exceptions import DrawSourceError, RecognitionFailure

WINNER = {"line": "A", "mainNumbers": [3, 16, 29, 61, 69], "powerball": 22}


@pytest.fixture
def client_with(fake_draw_source):
    def _build(reader, draw_source=None):
        app = create_app()
        source = draw_source or fake_draw_source
        checker = TicketChecker(source, reader)
        app.dependency_overrides[get_checker] = lambda: checker
        app.dependency_overrides[get_draw_source] = lambda: source
        return TestClient(app)
    return _build


def test_health_endpoint():
    client = TestClient(create_app())
    r = client.get("/api/v1/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


def test_latest_draw(client_with, make_reader):
    client = client_with(make_reader({}))
    r = client.get("/api/v1/draws/latest")
    assert r.status_code == 200
    assert r.json() == {"date": "Wed, Sep 3, 2025", "numbers": [3, 16, 29, 61, 69],
                        "powerball": 22, "power_play": ""}


def test_latest_draw_source_down_returns_502(client_with, make_reader, make_draw_source):
    client = client_with(make_reader({}), make_draw_source(error=DrawSourceError("down")))
    r = client.get("/api/v1/draws/latest")
    assert r.status_code == 502


def test_check_tickets_in_upload_order(client_with, make_reader):
    reader = make_reader({
        "000-first.png": [WINNER],
        "001-second.jpg": RecognitionFailure("001-second.jpg", "Empty response from Gemini"),
    })
    client = client_with(reader)
    files = [
        ("files", ("first.png", b"img1", "image/png")),
        ("files", ("second.jpg", b"img2", "image/jpeg")),
    ]

    r = client.post("/api/v1/tickets/check", files=files)

    assert r.status_code == 200
    body = r.json()
    assert [i["image"] for i in body["images"]] == ["first.png", "second.jpg"]
    assert [i["status"] for i in body["images"]] == ["classified", "failed"]
    assert body["total_winning_tickets"] == 1


def test_check_tickets_rejects_non_image(client_with, make_reader):
    client = client_with(make_reader({}))
    r = client.post("/api/v1/tickets/check", files={"files": ("test.txt", b"hello", "text/plain")})
    assert r.status_code == 400
    assert "Invalid file type" in r.json()["detail"]


def test_check_tickets_malformed_draw_returns_502(client_with, make_reader, make_draw_source):
    reader = make_reader({"000-first.png": [WINNER]})
    client = client_with(reader, make_draw_source(lines=["Wed", "1", "2"]))
    r = client.post("/api/v1/tickets/check", files={"files": ("first.png", b"img", "image/png")})
    assert r.status_code == 502
    assert reader.calls == []


def test_latest_draw_does_not_need_gemini_key(fake_draw_source):
    app = create_app()
    app.dependency_overrides[get_draw_source] = lambda: fake_draw_source
    client = TestClient(app)

    with patch("ticket_checker.api.get_settings", return_value=Settings(gemini_api_key=None)):
        r = client.get("/api/v1/draws/latest")

    assert r.status_code == 200
    assert r.json()["powerball"] == 22


def test_check_tickets_without_gemini_key_returns_503():
    client = TestClient(create_app())
    with patch("ticket_checker.api.get_settings", return_value=Settings(gemini_api_key=None)):
        r = client.post("/api/v1/tickets/check", files={"files": ("first.png", b"img", "image/png")})
    assert r.status_code == 503
    assert "GEMINI_API_KEY" in r.json()["detail"]
