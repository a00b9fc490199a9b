#!/usr/bin/env python3
"""
Powerball Ticket Checker Entrypoint

    python main.py check [--images DIR] [--json] [--config PATH]
    python main.py serve [--host HOST] [--port PORT] [--config PATH]

Reads GEMINI_API_KEY, RECEIPTS_DIR, LOG_LEVEL, HOST, PORT from the environment
(loaded from .env when available).
"""
import argparse
import json
import os
import sys

# Load environment variables from .env if available
try:
    from dotenv import load_dotenv  # type: ignore
    load_dotenv()
except ImportError:
    pass

from loguru import logger

from ticket_checker.checker import TicketChecker
from ticket_checker.config import CONFIG_PATH_ENV, configure_logging, load_settings
from ticket_checker.draw_source import PowerballDrawSource
from ticket_checker.exceptions import (
    ConfigurationError,
    DrawSourceError,
    MalformedDrawResult,
    ReceiptDirectoryError,
)
from ticket_checker.gemini_service import create_gemini_reader
from ticket_checker.image_source import find_receipt_images
from ticket_checker.report import format_summary, summary_to_dict


def build_parser() -> argparse.ArgumentParser:
    config_help = "Path to config.ini (default: config/config.ini)"
    # SUPPRESS keeps a value given before the subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=argparse.SUPPRESS, help=config_help)

    parser = argparse.ArgumentParser(description="Check Powerball receipts against the latest drawing")
    parser.add_argument("--config", default=None, help=config_help)
    parser.set_defaults(images=None, json=False)
    sub = parser.add_subparsers(dest="command")

    check = sub.add_parser("check", parents=[common], help="Check every receipt image in a directory")
    check.add_argument("--images", default=None, help="Receipt images directory (default from config)")
    check.add_argument("--json", action="store_true", help="Print the summary as JSON")

    serve = sub.add_parser("serve", parents=[common], help="Run the HTTP API")
    serve.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    serve.add_argument("--port", type=int, default=None)
    return parser


def run_check(args, settings) -> int:
    try:
        images = find_receipt_images(args.images or settings.receipts_dir, settings.image_extensions)
        if not images:
            print(f"❌ No receipt images found in {args.images or settings.receipts_dir}")
            return 1

        reader = create_gemini_reader(settings.gemini_api_key, settings.gemini_model,
                                      settings.max_output_tokens)
        draw_source = PowerballDrawSource(settings.results_url, timeout=settings.request_timeout)
        checker = TicketChecker(draw_source, reader, request_delay=settings.request_delay)
        summary = checker.check(images)

    except (ConfigurationError, ReceiptDirectoryError) as e:
        logger.error(str(e))
        print(f"❌ {e.message}")
        return 1
    except (DrawSourceError, MalformedDrawResult) as e:
        logger.error(f"Could not fetch latest Powerball results: {e}")
        print("❌ Could not fetch latest Powerball results")
        return 1

    if args.json:
        print(json.dumps(summary_to_dict(summary), indent=2))
    else:
        print(format_summary(summary))
    return 0


def run_server(args) -> None:
    import uvicorn

    port = args.port
    if port is None:
        try:
            port = int(os.getenv("PORT", "8000"))
        except ValueError:
            port = 8000

    log_level = os.getenv("LOG_LEVEL", "info").lower()
    # Uvicorn supported levels: critical, error, warning, info, debug, trace
    if log_level not in {"critical", "error", "warning", "info", "debug", "trace"}:
        log_level = "info"

    if args.config:
        os.environ[CONFIG_PATH_ENV] = args.config

    uvicorn.run("ticket_checker.api:app", host=args.host, port=port, log_level=log_level)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigurationError as e:
        print(f"❌ {e.message}")
        return 1
    configure_logging(settings.log_level)

    try:
        if args.command == "serve":
            run_server(args)
            return 0
        return run_check(args, settings)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
