"""
Google Gemini Ticket Reader
Reads the ticket lines printed on a Powerball receipt image with Gemini vision.

The reader returns raw ticket candidates exactly as the model produced them;
validation happens in the aggregator.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import google.generativeai as genai
from loguru import logger

from ticket_checker.exceptions import ConfigurationError, RecognitionFailure

DEFAULT_MODEL = "gemini-2.5-flash-lite"
DEFAULT_MAX_OUTPUT_TOKENS = 1000

MEDIA_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
}

PROMPT_TEMPLATE = """
Please read this Powerball lottery receipt very carefully. The ticket lines are labeled with letters (A, B, C, ...).

Each line shows:
[Letter]. [5 main numbers] QP [powerball number] QP

For example: "A. 02 05 30 38 42 QP 01 QP"

CRITICAL: Read each number exactly as printed. Numbers like "09" should become 9, "02" should become 2.

Extract ALL visible ticket lines and return them as JSON:

{
  "tickets": [
    {
      "line": "A",
      "mainNumbers": [2, 5, 30, 38, 42],
      "powerball": 1
    }
  ]
}

Return ONLY the JSON, no markdown, no explanations.
"""


def media_type_for(image_path: Path) -> str:
    return MEDIA_TYPES.get(image_path.suffix.lower(), "image/png")


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences the model sometimes wraps around JSON."""
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def extract_ticket_candidates(image_id: str, response_text: Optional[str]) -> List[Dict[str, Any]]:
    """
    Decode the model response into a list of raw ticket candidates.

    Raises:
        RecognitionFailure: empty response, invalid JSON or unexpected structure
    """
    if not response_text or not response_text.strip():
        raise RecognitionFailure(image_id, "Empty response from Gemini")

    json_text = strip_code_fences(response_text)
    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as e:
        logger.debug(f"Undecodable Gemini response for {image_id}: {json_text}")
        raise RecognitionFailure(image_id, f"JSON parsing failed: {e}", original_error=e) from e

    if isinstance(data, dict):
        tickets = data.get("tickets")
    elif isinstance(data, list):
        tickets = data
    else:
        tickets = None

    if not isinstance(tickets, list):
        raise RecognitionFailure(image_id, "Invalid JSON format: expected object with tickets array or array")

    return tickets


class GeminiTicketReader:
    """
    Ticket reader backed by a Gemini GenerativeModel.

    The model is passed in; use create_gemini_reader() to build one from an API key.
    """

    def __init__(self, model: Any, max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS):
        self.model = model
        self.max_output_tokens = max_output_tokens

    def read_tickets(self, image_path: Path) -> List[Dict[str, Any]]:
        """
        Read all ticket lines from one receipt image.

        Args:
            image_path: Path to the receipt image

        Returns:
            Raw ticket candidates (line, mainNumbers, powerball)

        Raises:
            RecognitionFailure: the image could not be read or the model gave no usable answer
        """
        image_path = Path(image_path)
        image_id = image_path.name
        logger.info(f"Reading receipt with Gemini: {image_id}")

        try:
            image_data = image_path.read_bytes()
        except OSError as e:
            raise RecognitionFailure(image_id, f"Cannot read image file: {e}", original_error=e) from e

        contents = [
            PROMPT_TEMPLATE,
            {"mime_type": media_type_for(image_path), "data": image_data},
        ]

        try:
            response = self.model.generate_content(
                contents,
                generation_config={"max_output_tokens": self.max_output_tokens},
            )
            response_text = response.text
        except Exception as e:
            logger.error(f"Gemini API error for {image_id}: {e}")
            raise RecognitionFailure(image_id, f"Gemini API error: {e}", original_error=e) from e

        logger.debug(f"Raw Gemini response for {image_id}: {response_text}")
        tickets = extract_ticket_candidates(image_id, response_text)
        logger.info(f"Found {len(tickets)} ticket line(s) on {image_id}")
        return tickets


def create_gemini_reader(api_key: Optional[str], model_name: str = DEFAULT_MODEL,
                         max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS) -> GeminiTicketReader:
    """
    Build a GeminiTicketReader for the given credential.

    Raises:
        ConfigurationError: no API key supplied
    """
    if not api_key:
        raise ConfigurationError("GEMINI_API_KEY is required to read receipt images")

    genai.configure(api_key=api_key)
    model = genai.GenerativeModel(model_name)
    logger.info(f"Gemini ticket reader initialized with model {model_name}")
    return GeminiTicketReader(model, max_output_tokens=max_output_tokens)
