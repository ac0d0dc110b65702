"""
Recover a JSON object from free-form model output.

Handles Markdown code fences, prose around the object, trailing commas and
bare object keys. Repairs skip over string literals so values are never edited.
"""
import json
import re
from typing import Optional

from ..exceptions import ModelResponseError

_FENCE_RE = re.compile(r"```(?:json|JSON)?")
_STRING = r'"(?:\\.|[^"\\])*"'
_TRAILING_COMMA_RE = re.compile(_STRING + r"|,(\s*[}\]])")
_BARE_KEY_RE = re.compile(_STRING + r"|([{,]\s*)([A-Za-z_][A-Za-z0-9_]*)(\s*:)")


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text or "").strip()


def find_json_object(text: str) -> Optional[str]:
    """Return the first balanced {...} block, ignoring braces inside strings."""
    start = text.find("{")
    if start < 0:
        return None

    depth = 0
    in_string = False
    escape_next = False
    for i in range(start, len(text)):
        char = text[i]
        if escape_next:
            escape_next = False
            continue
        if char == "\\":
            escape_next = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]

    # Unbalanced: fall back to the widest candidate
    end = text.rfind("}")
    return text[start:end + 1] if end > start else None


def repair_json(text: str) -> str:
    def _drop_comma(match):
        return match.group(1) if match.group(1) is not None else match.group(0)

    def _quote_key(match):
        if match.group(2) is None:
            return match.group(0)
        return f'{match.group(1)}"{match.group(2)}"{match.group(3)}'

    text = _TRAILING_COMMA_RE.sub(_drop_comma, text)
    return _BARE_KEY_RE.sub(_quote_key, text)


def parse_model_json(raw: str) -> dict:
    """
    Parse the first JSON object in a model response.

    Tries strict parsing first, then one repair pass. Raises
    ModelResponseError when no object can be recovered.
    """
    cleaned = strip_code_fences(raw)
    block = find_json_object(cleaned)
    if block is None:
        raise ModelResponseError("No JSON object found in model response")

    try:
        data = json.loads(block)
    except json.JSONDecodeError:
        try:
            data = json.loads(repair_json(block))
        except json.JSONDecodeError as e:
            raise ModelResponseError(f"Unparseable JSON after repair: {e}") from e

    if not isinstance(data, dict):
        raise ModelResponseError("Model response JSON is not an object")
    return data
