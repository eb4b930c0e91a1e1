# src/goodstein/fmt.py
from __future__ import annotations

import re

from goodstein.decomposition import Decomposition
from goodstein.runtime import CFG
from goodstein.utility import dec_digits, effective_digit_limit

# Single source of truth for ANSI stripping
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(s: str) -> str:
    return ANSI_RE.sub("", s)


def abbr_int_fast(n: int, head: int = 10, tail: int = 10, threshold: int = 35, ellipsis: str = "…") -> str:
    """Abbreviate very large ints as first<head>…last<tail> without str(n)."""
    # Keep non-ints and small ints simple
    if not isinstance(n, int):
        return str(n)
    if n == 0:
        return "0"

    sign = "-" if n < 0 else ""
    a = -n if n < 0 else n

    # If not long enough, fall back to normal str()
    d = dec_digits(a)
    if d <= threshold or head + tail >= d:
        return sign + str(a)

    # compute first/last blocks exactly
    first = a // 10 ** (d - head)
    last = a % 10 ** tail
    # zero-pad last block to width 'tail'
    return f"{sign}{first}{ellipsis}{last:0{tail}d}"


def format_value(d: Decomposition, *, abbreviate: bool | None = None) -> str:
    """
    Value column for one Goodstein step.

    Values beyond the effective digit limit are never materialized: they are
    reported as '>10^<limit>' using the symbolic bound check. Otherwise the
    exact value is printed, abbreviated per FORMATTING.NUM_ABBR_* when
    OUTPUT.ABBREVIATE (or `abbreviate`) is on.
    """
    limit = effective_digit_limit()
    if limit is not None and d.exceeds(10 ** limit - 1):
        return f">10^{limit}"

    value = d.evaluate()
    if abbreviate is None:
        abbreviate = bool(CFG("OUTPUT.ABBREVIATE", False))
    if not abbreviate:
        return str(value)

    return abbr_int_fast(
        value,
        int(CFG("FORMATTING.NUM_ABBR_HEAD", 10)),
        int(CFG("FORMATTING.NUM_ABBR_TAIL", 10)),
        int(CFG("FORMATTING.NUM_ABBR_THRESHOLD", 35)),
        str(CFG("FORMATTING.ELLIPSIS", "…")),
    )
