"""Small string helpers: delimiter splitting and whitespace trimming."""

from __future__ import annotations

import logging
from typing import List

log = logging.getLogger(__name__)

_C_SPACE = " \t\n\v\f\r"


def split_string(raw: str, max_substrings: int, delimiter: str) -> List[str]:
    """Split ``raw`` on ``delimiter``, keeping at most ``max_substrings`` parts.

    Parts beyond the limit are dropped. At least one part is always returned.
    """
    if raw is None:
        raise ValueError("raw string is required")
    if not isinstance(delimiter, str) or len(delimiter) != 1:
        raise ValueError("delimiter must be a single character")
    log.debug("raw string: %s", raw)
    parts = raw.split(delimiter)[: max(max_substrings, 1)]
    log.debug("num_split_strings: %d", len(parts))
    return parts


def trim_space(text: str) -> str:
    """Remove leading and trailing whitespace.

    A string made only of whitespace is returned unchanged.
    """
    if text is None:
        raise ValueError("text is required")
    trimmed = text.strip(_C_SPACE)
    return trimmed if trimmed else text