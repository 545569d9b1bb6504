"""
Helpers for parsing free-form completion text.

Completions are expected to contain a JSON array of strings but often wrap it
in markdown fences or explanatory prose.
"""

import json
from typing import List

from common.logging_config import get_logger

logger = get_logger(__name__)


def strip_markdown_fences(text: str) -> str:
    """Strip markdown code fences (```json ... ```) from text.

    Examples:
        >>> strip_markdown_fences('```json\\n["a"]\\n```')
        '["a"]'
        >>> strip_markdown_fences('["a"]')
        '["a"]'
    """
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n", 1)
        text = lines[1] if len(lines) > 1 else text[3:]
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3].rstrip()
    return text


def parse_string_array(text: str) -> List[str]:
    """
    Extract a JSON array of strings from completion text.

    Accepts a bare array or the span from the first '[' to the last ']'.
    Non-string entries are dropped. Never raises: anything unparsable
    yields an empty list.
    """
    if not text:
        return []

    candidate = strip_markdown_fences(text)
    if not (candidate.startswith("[") and candidate.endswith("]")):
        start = candidate.find("[")
        end = candidate.rfind("]")
        if start < 0 or end <= start:
            return []
        candidate = candidate[start:end + 1]

    try:
        parsed = json.loads(candidate)
    except ValueError:
        logger.warning(f"Could not parse completion as a JSON array: {text[:200]!r}")
        return []

    if not isinstance(parsed, list):
        return []
    return [item for item in parsed if isinstance(item, str)]
