import json
import logging
from typing import Any, List

from studyquiz.errors import ResponseFormatError

logger = logging.getLogger(__name__)


def extract_json_array(raw_text: str) -> List[Any]:
    """
    Pull the JSON array out of a free-text model reply.

    The model may wrap the array in prose or code fences, so everything from
    the first '[' to the last ']' is sliced out and parsed. Anything that is
    not a JSON array raises ResponseFormatError with the raw text attached.
    """
    if not isinstance(raw_text, str):
        raise ResponseFormatError(raw_text, "Model response is not text.")

    start = raw_text.find("[")
    end = raw_text.rfind("]")
    if start < 0 or end <= start:
        logger.warning("No JSON array found in model response: %r", raw_text[:500])
        raise ResponseFormatError(raw_text, "Model response does not contain a JSON array.")

    json_content = raw_text[start:end + 1]
    try:
        data = json.loads(json_content)
    except json.JSONDecodeError as e:
        logger.warning("Model response is not valid JSON (%s): %r", e, raw_text[:500])
        raise ResponseFormatError(raw_text, f"Failed to parse model response as JSON: {e}") from e

    if not isinstance(data, list):
        raise ResponseFormatError(raw_text, "Response is not an array")

    return data
