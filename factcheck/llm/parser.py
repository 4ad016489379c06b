"""JSON extraction from LLM responses.

Models asked for JSON still wrap it in markdown fences, prefix it with
"Here is the result:", or trail an offer to help further. This module
pulls the JSON value out of that.
"""

import json
import re
from typing import Any

from factcheck.utils.logging import log, get_logger

MODULE = "llm.parser"
logger = get_logger()

_FENCE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL | re.IGNORECASE)
_THINK = re.compile(r"<think>.*?</think>", re.DOTALL)


class JSONExtractionError(Exception):
    """Raised when JSON cannot be extracted from LLM output."""

    def __init__(self, message: str, raw_output: str):
        super().__init__(message)
        self.raw_output = raw_output


def extract_json(raw: str) -> Any:
    """Extract the first JSON object or array from LLM output.

    Tried in order:
      1. the whole (stripped) text
      2. the body of a ```json fenced block
      3. the first decodable value starting at a '{' or '['

    Raises:
        JSONExtractionError: If nothing decodes.
    """
    text = _THINK.sub("", raw).strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    fence = _FENCE.search(text)
    if fence:
        try:
            return json.loads(fence.group(1).strip())
        except json.JSONDecodeError:
            log.debug(logger, MODULE, "fence_invalid", "Fenced block is not valid JSON")

    decoder = json.JSONDecoder()
    for i, char in enumerate(text):
        if char not in "{[":
            continue
        try:
            value, _ = decoder.raw_decode(text[i:])
            return value
        except json.JSONDecodeError:
            continue

    raise JSONExtractionError(
        f"Could not extract valid JSON from LLM output ({len(text)} chars)",
        raw_output=raw,
    )

