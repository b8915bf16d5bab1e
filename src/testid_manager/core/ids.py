"""Seed parsing for sequential, prefix-and-width identifiers.

A seed such as ``"e2e-007"`` splits into the prefix ``"e2e-"`` (everything
before the final run of digits) and the number ``7`` rendered with a fixed
width of 3. The resulting :class:`IdPattern` is built once per run and
passed to every component that needs it.
"""

from __future__ import annotations

import re

from testid_manager.core.errors import InvalidSeedFormat
from testid_manager.core.models import IdPattern

_SEED_RE = re.compile(r"(?P<prefix>.*?)(?P<digits>[0-9]+)", re.DOTALL)


def parse_base_id(base_id: str) -> IdPattern:
    """Build the :class:`IdPattern` for *base_id*.

    Example: parse_base_id("e2e-007") -> prefix "e2e-", width 3, base 7.

    Raises:
        InvalidSeedFormat: If *base_id* does not end with a digit.
    """
    match = _SEED_RE.fullmatch(base_id)
    if match is None:
        raise InvalidSeedFormat(base_id)
    digits = match.group("digits")
    return IdPattern(
        prefix=match.group("prefix"),
        width=len(digits),
        base_number=int(digits),
    )
