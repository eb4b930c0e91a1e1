# -----------------------------------------------------------------------------
#  Utility functions
# -----------------------------------------------------------------------------

from __future__ import annotations

import sys

from goodstein.runtime import CFG


class UserInputError(Exception):
    pass


class InvalidArgument(UserInputError, ValueError):
    """
    Bad argument for decompose().

    `constraint` is the name of the argument that failed ("base" or "n"),
    `value` the rejected value.
    """
    def __init__(self, constraint: str, value: object, message: str):
        super().__init__(message)
        self.constraint = constraint
        self.value = value


def dec_digits(n: int) -> int:
    """Exact decimal digit count without str(); handles n >= 0."""
    n = abs(n)
    if n == 0:
        return 1
    # floor(log10(n)) ~= floor(bitlen*log10(2))
    bl = n.bit_length()
    # 0.30102999566 ~ log10(2)
    est = int((bl * 30103) // 100000)
    # bring into correct decade with at most a couple of steps
    p10 = 10 ** est
    if n < p10:
        while n < p10:
            est -= 1
            p10 //= 10
    else:
        p10 *= 10
        while n >= p10:
            est += 1
            p10 *= 10
    return est + 1


def effective_digit_limit() -> int | None:
    """
    Effective decimal-digit limit for stringifying integers.

    - Primary source: profile setting BEHAVIOUR.MAX_DIGITS.
    - Secondary: Python's own guard (sys.get_int_max_str_digits), if available.

    A value of 0 means "no limit" on both sides; the tighter of the two wins.
    """
    try:
        profile_limit = int(CFG("BEHAVIOUR.MAX_DIGITS", 100_000)) or None
    except (TypeError, ValueError):
        profile_limit = None
    py_limit = sys.get_int_max_str_digits() or None

    limits = [x for x in (profile_limit, py_limit) if x is not None]
    return min(limits) if limits else None


def typename(v: object) -> str:
    return type(v).__name__


def flatten_dotted(d: dict, prefix: str = "") -> dict[str, object]:
    """{'A': {'B': 1}} -> {'A.B': 1}"""
    out: dict[str, object] = {}
    for k, v in d.items():
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            out.update(flatten_dotted(v, key))
        else:
            out[key] = v
    return out


def validate_output_setting(output_file: str | None) -> str | None:
    """
    Check an --output / OUTPUT.OUTPUT_FILE value.

    None or "" means screen only. Directory targets are rejected: a
    Goodstein run is a single stream, so output always goes to one file.
    """
    if output_file is None:
        return None
    s = str(output_file).strip()
    if not s:
        return ""
    if s in (".", "./") or s.endswith(("/", "\\")):
        raise ValueError(f"'{output_file}' is a directory; give a file name instead.")
    if any(ch in s for ch in "\0\n\r"):
        raise ValueError("output path contains control characters.")
    return s
