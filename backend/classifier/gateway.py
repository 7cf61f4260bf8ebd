"""
Classification Gateway - brand/generic name in, schedule + formatted names out.

WHAT THE GATEWAY DOES:
- Builds the classification prompt
- Calls the LLM once
- Validates the answer against ClassificationResponse

WHAT IT DOES NOT DO:
- Decide whether the schedule is acceptable (the inventory service maps the
  token and rejects "N/A" or anything outside II..V)
- Touch the catalog

Any object with an async classify(brand_name, generic_name) method can stand
in for GroqClassificationGateway; tests pass fakes.
"""

import json
import logging
from typing import Optional, Protocol

from pydantic import ValidationError

from csinventory.core.exceptions import ClassificationError

from .classification_schema import ClassificationResponse
from .groq_client import GroqClient
from .prompts import SYSTEM_PROMPT, build_prompt

logger = logging.getLogger(__name__)


class ClassificationGateway(Protocol):
    async def classify(self, brand_name: str, generic_name: str) -> ClassificationResponse:
        ...


class GroqClassificationGateway:
    def __init__(self, client: Optional[GroqClient] = None):
        self.client = client or GroqClient()

    async def classify(self, brand_name: str, generic_name: str) -> ClassificationResponse:
        prompt = build_prompt(brand_name, generic_name)
        logger.debug(f"Classifying drug: {brand_name} ({generic_name})")
        raw = await self.client.complete_json(SYSTEM_PROMPT, prompt)
        response = parse_classification_response(raw)
        logger.info(
            f"Classified {brand_name} ({generic_name}): schedule={response.schedule!r}"
        )
        return response


def _strip_code_fence(text: str) -> str:
    # Handle ```json\n{...}\n``` even though JSON mode should prevent it
    clean = text.strip()
    if clean.startswith("```"):
        lines = clean.split("\n")
        if lines[0].strip().startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        clean = "\n".join(lines).strip()
    return clean


def parse_classification_response(raw: str) -> ClassificationResponse:
    """Parse and validate the classifier's JSON answer.

    Raises:
        ClassificationError: not JSON, not an object, or missing fields
    """
    try:
        data = json.loads(_strip_code_fence(raw))
    except json.JSONDecodeError as e:
        logger.warning(f"Invalid JSON from classifier: {e}")
        raise ClassificationError("Classifier returned a malformed response") from e

    try:
        return ClassificationResponse.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Classifier schema validation failed: {e.error_count()} error(s)")
        raise ClassificationError(
            "Classifier returned a malformed response",
            detail={"errors": [err["loc"] for err in e.errors()]},
        ) from e
