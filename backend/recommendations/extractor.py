from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Sequence
from typing import Any

logger = logging.getLogger(__name__)

NO_ARRAY = "no array found"
MALFORMED_JSON = "malformed json"
NOT_A_LIST = "not a list or empty"
EMPTY_AFTER_FILTERING = "empty after filtering"

REQUIRED_KEYS: tuple[str, ...] = ("name", "city", "matchScore")
NUMERIC_KEYS: tuple[str, ...] = ("matchScore",)


class ValidationError(ValueError):
    """Model output could not be turned into a usable list of records."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def _closing_index(text: str, start: int) -> int | None:
    """Return the index of the ``]`` balancing the ``[`` at ``start``, if any.

    Brackets inside JSON string literals are ignored.
    """
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
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
        elif ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return i
    return None


def iter_array_spans(text: str) -> Iterator[str]:
    """Yield balanced ``[...]`` substrings in order of their opening bracket.

    Spans nested inside an already-yielded span are skipped.
    """
    pos = text.find("[")
    while pos != -1:
        end = _closing_index(text, pos)
        if end is None:
            pos = text.find("[", pos + 1)
            continue
        yield text[pos : end + 1]
        pos = text.find("[", end + 1)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_valid(item: Any, required: Sequence[str], numeric: Sequence[str]) -> bool:
    if not isinstance(item, dict):
        return False
    if not all(item.get(key) for key in required):
        return False
    return all(_is_number(item.get(key)) for key in numeric)


def extract(
    raw_text: str,
    required: Sequence[str] = REQUIRED_KEYS,
    numeric: Sequence[str] = NUMERIC_KEYS,
) -> list[dict[str, Any]]:
    """
    Pull the first JSON array out of free-form model output.

    Elements missing any ``required`` key (or with a falsy value for it), or
    whose ``numeric`` keys are not numbers, are dropped. Kept elements are
    returned unchanged. Raises ValidationError when nothing usable remains.
    """
    span = next(iter_array_spans(raw_text or ""), None)
    if span is None:
        raise ValidationError(NO_ARRAY)

    # oversized integers raise ValueError, deep nesting RecursionError
    try:
        parsed = json.loads(span)
    except (ValueError, RecursionError) as exc:
        raise ValidationError(MALFORMED_JSON) from exc

    if not isinstance(parsed, list) or not parsed:
        raise ValidationError(NOT_A_LIST)

    kept = [item for item in parsed if _is_valid(item, required, numeric)]
    if not kept:
        raise ValidationError(EMPTY_AFTER_FILTERING)

    dropped = len(parsed) - len(kept)
    if dropped:
        logger.info("Dropped %d malformed entries from model output", dropped)
    return kept
