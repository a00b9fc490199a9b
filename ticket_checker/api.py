"""
HTTP API for ticket checking.
"""

import os
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import List

from fastapi import APIRouter, Depends, FastAPI, File, HTTPException, UploadFile
from loguru import logger

from ticket_checker import __version__
from ticket_checker.batch_aggregator import aggregate
from ticket_checker.checker import TicketChecker
from ticket_checker.config import CONFIG_PATH_ENV, Settings, load_settings
from ticket_checker.draw_parser import parse_draw_lines
from ticket_checker.draw_source import PowerballDrawSource
from ticket_checker.exceptions import ConfigurationError, DrawSourceError, MalformedDrawResult
from ticket_checker.gemini_service import create_gemini_reader
from ticket_checker.report import draw_to_dict, summary_to_dict

ticket_router = APIRouter(prefix="/api/v1", tags=["tickets"])


@lru_cache()
def get_settings() -> Settings:
    return load_settings(os.getenv(CONFIG_PATH_ENV))


def get_draw_source() -> PowerballDrawSource:
    settings = get_settings()
    return PowerballDrawSource(settings.results_url, timeout=settings.request_timeout)


def get_checker() -> TicketChecker:
    settings = get_settings()
    try:
        reader = create_gemini_reader(settings.gemini_api_key, settings.gemini_model,
                                      settings.max_output_tokens)
    except ConfigurationError as e:
        logger.error(f"Ticket reader unavailable: {e}")
        raise HTTPException(status_code=503, detail=str(e))

    return TicketChecker(get_draw_source(), reader, request_delay=settings.request_delay)


@ticket_router.get("/health")
async def health_check():
    return {"status": "healthy", "version": __version__}


@ticket_router.get("/draws/latest")
def latest_draw(draw_source: PowerballDrawSource = Depends(get_draw_source)):
    """Return the latest drawing as parsed from the results page."""
    try:
        draw = parse_draw_lines(draw_source.fetch_latest_lines())
    except (DrawSourceError, MalformedDrawResult) as e:
        logger.error(f"Could not load latest drawing: {e}")
        raise HTTPException(status_code=502, detail=f"Could not load latest Powerball results: {e.message}")
    return draw_to_dict(draw)


@ticket_router.post("/tickets/check")
def check_tickets(files: List[UploadFile] = File(...), checker: TicketChecker = Depends(get_checker)):
    """
    Check one or more receipt images against the latest drawing.

    Each uploaded file is one image of the batch, reported in upload order.
    """
    for upload in files:
        if not upload.content_type or not upload.content_type.startswith("image/"):
            raise HTTPException(
                status_code=400,
                detail=f"Invalid file type for {upload.filename}: file must be an image (JPG, PNG, etc.)",
            )

    try:
        draw = checker.load_draw()
    except (DrawSourceError, MalformedDrawResult) as e:
        logger.error(f"Ticket check aborted, no drawing available: {e}")
        raise HTTPException(status_code=502, detail=f"Could not load latest Powerball results: {e.message}")

    with tempfile.TemporaryDirectory(prefix="receipts-") as workdir:
        names, paths = [], []
        for i, upload in enumerate(files):
            name = Path(upload.filename or f"receipt-{i}.png").name
            # index prefix keeps duplicate upload names apart
            path = Path(workdir) / f"{i:03d}-{name}"
            path.write_bytes(upload.file.read())
            names.append(name)
            paths.append(path)

        recognized = checker.recognize_all(paths)

    per_image = [(name, result) for name, (_, result) in zip(names, recognized)]
    return summary_to_dict(aggregate(draw, per_image))


def create_app() -> FastAPI:
    app = FastAPI(
        title="Powerball Ticket Checker API",
        description="Checks photographed Powerball receipts against the latest drawing.",
        version=__version__,
    )
    app.include_router(ticket_router)
    return app


app = create_app()
