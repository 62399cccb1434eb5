"""Pre-decode normalization and JSON decoding of model responses."""

import json
import re
from typing import Any

from assesspo.errors import MalformedResponseError

# Opening fence line: ``` optionally followed by a language tag (```json).
_OPENING_FENCE = re.compile(r"\A```[\w+-]*[ \t]*\r?\n?")
_CLOSING_FENCE = re.compile(r"\r?\n?```\Z")


def strip_code_fences(text: str) -> str:
    """Remove markdown code-fence wrapping from a model response.

    Strips surrounding whitespace, then at most one leading fence line and
    one trailing fence. Interior content is returned untouched, including
    any fences that appear inside it.
    """
    cleaned = text.strip()
    if not cleaned.startswith("```"):
        return cleaned
    cleaned = _OPENING_FENCE.sub("", cleaned, count=1)
    cleaned = _CLOSING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def decode_json_object(text: str) -> dict[str, Any]:
    """Strip fences and decode a single JSON object.

    Raises:
        MalformedResponseError: If the text is not JSON or not an object.
    """
    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"response is not valid JSON: {e}", raw=text) from e
    if not isinstance(data, dict):
        raise MalformedResponseError(
            f"expected a JSON object, got {type(data).__name__}", raw=text
        )
    return data
