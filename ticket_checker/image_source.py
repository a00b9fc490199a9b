"""
Receipt image discovery.
"""

from pathlib import Path
from typing import Iterable, List

from loguru import logger

from ticket_checker.exceptions import ReceiptDirectoryError

DEFAULT_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".bmp")


def find_receipt_images(directory, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> List[Path]:
    """
    List receipt images in a directory, sorted by file name.

    Raises:
        ReceiptDirectoryError: directory missing or not a directory
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise ReceiptDirectoryError(f"Images directory not found: {directory}")

    wanted = {ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions}
    images = sorted(
        (p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in wanted),
        key=lambda p: p.name,
    )

    if not images:
        logger.warning(f"No receipt images found in {directory}")
    else:
        logger.info(f"Found {len(images)} receipt image(s) in {directory}")
    return images
