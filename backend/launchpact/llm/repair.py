"""Best-effort repair of quasi-JSON model output.

Models asked for JSON still wrap it in prose, fence it in markdown, or run
out of tokens mid-object. These helpers target exactly those failure modes;
they are not a general JSON parser.
"""

import json
import logging
import re
from typing import Any, Optional

from launchpact.utils.errors import MalformedStructuredOutputError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json|JSON)?")
_CLOSER_FOR = {"{": "}", "[": "]"}
EMPTY_OBJECT = "{}"


def strip_fences(text: str) -> str:
    """Remove markdown code fence markers."""
    return _FENCE_RE.sub("", text).strip()


def _opening_index(text: str) -> int:
    """Index of the first ``{`` or ``[``, whichever comes first, or -1."""
    candidates = [i for i in (text.find("{"), text.find("[")) if i != -1]
    return min(candidates) if candidates else -1


def extract_structured(raw: Optional[str]) -> str:
    """Extract and repair the JSON payload embedded in model output.

    Args:
        raw: Text returned by a model

    Returns:
        Text ready for ``json.loads``. It is not guaranteed to parse;
        callers surface a parse failure as MalformedStructuredOutputError.
    """
    if not raw:
        return EMPTY_OBJECT

    text = strip_fences(raw)
    start = _opening_index(text)

    if start == -1:
        try:
            json.loads(text)
            return text
        except ValueError:
            pass
        # Bare key: value pairs without the outer braces
        if ":" in text:
            text = "{" + text + "}"
            start = 0
        else:
            return EMPTY_OBJECT

    text = text[start:]

    pending: list[str] = []
    in_string = False
    escaped = False

    for idx, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch in _CLOSER_FOR:
            pending.append(_CLOSER_FOR[ch])
        elif pending and ch == pending[-1]:
            pending.pop()
            if not pending:
                # Drop whatever prose followed the payload
                return text[: idx + 1]

    # Truncated generation: close what is still open
    repaired = text
    if in_string:
        if escaped:
            repaired = repaired[:-1]
        repaired += '"'
    repaired = repaired.rstrip().rstrip(",")
    closing = "".join(reversed(pending))

    logger.debug(f"[LLM] Repaired truncated output | appended={closing!r}")
    return repaired + closing


def parse_structured(raw: Optional[str]) -> Any:
    """Repair and parse model output.

    Raises:
        MalformedStructuredOutputError: If the repaired text is still not JSON
    """
    repaired = extract_structured(raw)
    try:
        return json.loads(repaired)
    except json.JSONDecodeError as e:
        raise MalformedStructuredOutputError(
            f"Model output is not valid JSON after repair: {e.msg}",
            raw_text=raw or "",
            details={"position": e.pos},
        ) from e
