from __future__ import annotations

import ast
import operator as op
import re

from goodstein.utility import UserInputError, dec_digits, effective_digit_limit

# ---- simple number parsing helpers ----
_THIN_SPACES = ("\u2009", "\u202F", "\u00A0")  # thin, narrow no-break, no-break
_SEP_CLASS = r"[ ,._\u00A0\u2009\u202F]"      # spaces/commas/dots/underscores & NBSP variants
_GROUPED_RE = re.compile(rf"^[+-]?\d{{1,3}}(?:{_SEP_CLASS}\d{{3}})+$")

# ---- allowed operators (safe subset) ----
_ALLOWED_BINOPS = {
    ast.Add:      op.add,
    ast.Sub:      op.sub,
    ast.Mult:     op.mul,
    ast.FloorDiv: op.floordiv,
    ast.Mod:      op.mod,
}
_ALLOWED_UNARYOPS = {
    ast.UAdd: op.pos,
    ast.USub: op.neg,
}

_MAX_NODES = 256  # sanity guard


class _IntExprError(Exception):
    pass


def _too_many_digits(limit: int) -> UserInputError:
    return UserInputError(
        f"number has more than {limit} decimal digits. "
        "Increase the limit in the profile or pass a smaller value."
    )


def _check_digits(value: int) -> int:
    limit = effective_digit_limit()
    if limit is not None and dec_digits(value) > limit:
        raise _too_many_digits(limit)
    return value


def _would_exceed_digit_limit_for_pow(base: int, exp: int, limit: int | None) -> bool:
    """
    Cheap lower bound on the decimal digits of base**exp.

    For |base| >= 2, base**exp >= 2**exp, and digits(2**exp) ~= exp*log10(2) + 1,
    with log10(2) approximated by 30103/100000.
    """
    if limit is None or exp <= 0 or abs(base) <= 1:
        return False
    digits_lb = 1 + (exp * 30103) // 100000
    return digits_lb > limit


def _eval_int_expr(expr: str) -> int:
    """
    Evaluate a *safe* integer expression.

    Allowed: integers (incl. underscores), parentheses, + - * // % **, unary +/-.
    Disallowed: names, calls, attributes, subscripts, floats, etc.
    Negative exponents and division by zero are rejected.
    """
    try:
        tree = ast.parse(expr, mode="eval")
    except SyntaxError as e:
        raise _IntExprError("invalid integer expression") from e

    if sum(1 for _ in ast.walk(tree)) > _MAX_NODES:
        raise _IntExprError("expression too large")

    def _eval(node) -> int:
        if isinstance(node, ast.Constant):
            if isinstance(node.value, bool) or not isinstance(node.value, int):
                raise _IntExprError("only integers are allowed")
            return _check_digits(node.value)

        if isinstance(node, ast.UnaryOp) and type(node.op) in _ALLOWED_UNARYOPS:
            return _ALLOWED_UNARYOPS[type(node.op)](_eval(node.operand))

        if isinstance(node, ast.BinOp):
            op_type = type(node.op)
            left = _eval(node.left)
            right = _eval(node.right)

            if op_type is ast.Pow:
                if right < 0:
                    raise UserInputError("negative exponents are not allowed in integer expressions")
                limit = effective_digit_limit()
                if _would_exceed_digit_limit_for_pow(left, right, limit):
                    raise _too_many_digits(limit)
                return _check_digits(left ** right)

            if op_type in (ast.FloorDiv, ast.Mod) and right == 0:
                raise _IntExprError("division by zero")

            if op_type in _ALLOWED_BINOPS:
                return _check_digits(_ALLOWED_BINOPS[op_type](left, right))

        raise _IntExprError(f"unsupported syntax: {type(node).__name__}")

    return _eval(tree.body)


def _decimal_literal(digits: str) -> int:
    limit = effective_digit_limit()
    if limit is not None and sum(ch.isdigit() for ch in digits) > limit:
        raise _too_many_digits(limit)
    return int(digits)


def _parse_int_literal(text: str) -> int | None:
    """Accepts: 42  -7  1_000_000  0xFF  0b1010  123.456.789  123 456 789
       Rejects: 3.14  1,23  12.34.56  0xG1"""

    if text is None:
        return None

    s = text.strip()

    if not s:
        return None

    for ch in _THIN_SPACES:
        s = s.replace(ch, " ")

    if s.lower().startswith(("0x", "0b", "0o")):
        try:
            return int(s.replace("_", ""), 0)
        except ValueError:
            return None

    if re.fullmatch(r"[+-]?\d[\d_]*", s):
        try:
            return _decimal_literal(s.replace("_", ""))
        except ValueError:
            return None

    if _GROUPED_RE.match(s):
        compact = re.sub(_SEP_CLASS, "", s)
        try:
            return _decimal_literal(compact)
        except ValueError:
            return None

    return None


# ---- public entry point ----
def parse_int(s: str) -> int | None:
    """
    Integer from a literal or a safe expression ('2**10', '3*7+1').
    Returns None when the text is neither.
    """
    n = _parse_int_literal(s)
    if n is not None:
        return n

    try:
        return _eval_int_expr(s.strip())
    except _IntExprError:
        return None
