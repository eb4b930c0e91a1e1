# src/goodstein/decomposition.py
"""
Hereditary base-b decomposition.

The hereditary base-b decomposition of a non-negative integer n is

    n = sum_k  n_k * b ^ decompose(k)

where every digit n_k satisfies 0 <= n_k < b and every place index k is
itself written in hereditary base b, down to terms with a zero exponent.

A Decomposition is an immutable tree: a tuple of Terms sorted from the least
to the most significant one, each Term owning its exponent Decomposition.
Every transform returns a new, cleaned Decomposition and never touches its
input, so older values can be kept around and compared.

Recursion depth of every operation is bounded by the height of the
hereditary tower (a handful of levels for anything that fits in memory).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache

import gmpy2
import sympy

from goodstein.utility import InvalidArgument, UserInputError

# --- Rendering styles ---------------------------------------------------------


@dataclass(frozen=True)
class RenderStyle:
    multiplication_symbol: str
    left_grouping: str
    right_grouping: str


PLAIN = RenderStyle("*", "(", ")")
LATEX = RenderStyle("\\times", "{", "}")

_STYLE_ALIASES = {
    "plain": PLAIN,
    "text": PLAIN,
    "latex": LATEX,
    "tex": LATEX,
}


def style_by_name(name: str) -> RenderStyle:
    """Resolve a style name from the CLI or a profile ('plain' or 'latex')."""
    key = str(name or "").strip().lower()
    try:
        return _STYLE_ALIASES[key]
    except KeyError:
        raise UserInputError(
            f"unknown rendering style '{name}' (expected 'plain' or 'latex')."
        ) from None


# --- Data model ---------------------------------------------------------------


@dataclass(frozen=True)
class Term:
    """A single summand: coefficient * base ^ exponent."""
    coefficient: int
    base: int
    exponent: Decomposition = field(default_factory=lambda: ZERO)

    def is_zero(self) -> bool:
        return self.coefficient == 0

    def is_one(self) -> bool:
        return self.coefficient == 1 and self.exponent.is_zero()

    def copy(self) -> Term:
        return Term(self.coefficient, self.base, self.exponent.copy())

    def evaluate(self) -> int:
        power = gmpy2.mpz(self.base) ** self.exponent.evaluate()
        return int(self.coefficient * power)

    def render(self, style: RenderStyle = PLAIN) -> str:
        if self.is_zero():
            return "0"

        coeff = str(self.coefficient)
        base = str(self.base)
        times = f" {style.multiplication_symbol} "

        # base ^ 0 == 1
        if self.exponent.is_zero():
            return coeff

        # base ^ 1 == base
        if self.exponent.is_one():
            return base if self.coefficient == 1 else coeff + times + base

        power = (
            f"{base} ^ {style.left_grouping}"
            f"{self.exponent.render(style)}"
            f"{style.right_grouping}"
        )
        return power if self.coefficient == 1 else coeff + times + power

    def increment_base(self) -> Term:
        return Term(self.coefficient, self.base + 1, self.exponent.increment_base())

    def to_sympy(self) -> sympy.Expr:
        coeff = sympy.Integer(self.coefficient)
        if self.is_zero() or self.exponent.is_zero():
            return coeff
        base = sympy.Integer(self.base)
        if self.exponent.is_one():
            power = base
        else:
            power = sympy.Pow(base, self.exponent.to_sympy(), evaluate=False)
        if self.coefficient == 1:
            return power
        return sympy.Mul(coeff, power, evaluate=False)


@dataclass(frozen=True, repr=False)
class Decomposition:
    """
    Sum of Terms, least significant first.

    The empty tuple is the canonical zero. Equality and hashing are
    structural, so two cleaned decompositions compare equal exactly when
    they denote the same value in the same base.
    """
    terms: tuple[Term, ...] = ()

    def __post_init__(self) -> None:
        # accept any iterable (lists from callers) but store a tuple
        if not isinstance(self.terms, tuple):
            object.__setattr__(self, "terms", tuple(self.terms))

    def __len__(self) -> int:
        return len(self.terms)

    def __iter__(self):
        return iter(self.terms)

    def __str__(self) -> str:
        return self.render(PLAIN)

    def __repr__(self) -> str:
        return f"Decomposition({self.render(PLAIN)!r})"

    # --- predicates ---

    def is_zero(self) -> bool:
        return len(self.terms) == 0

    def is_one(self) -> bool:
        """True for the decomposition of 1. Only meaningful once cleaned."""
        return len(self.terms) == 1 and self.terms[0].is_one()

    @property
    def base(self) -> int | None:
        """Base of the most significant term, None for zero."""
        return self.terms[-1].base if self.terms else None

    # --- structural helpers ---

    def copy(self) -> Decomposition:
        """Deep copy (exponents included)."""
        return Decomposition(tuple(t.copy() for t in self.terms))

    def clean(self) -> Decomposition:
        return clean(self)

    # --- numeric value ---

    def evaluate(self) -> int:
        """
        Exact value as a Python int.

        Uses gmpy2 for the big powers. Only call this for display or
        testing: a few Goodstein steps are enough to leave any range where
        the value can be materialized.
        """
        total = gmpy2.mpz(0)
        for t in self.terms:
            total += t.evaluate()
        return int(total)

    def exceeds(self, bound: int) -> bool:
        """
        Return True if the value is strictly greater than `bound`.

        The most significant term alone is >= 2 ** exponent, so if its
        exponent is larger than bound.bit_length() the answer is known
        without building the full value. Otherwise every exponent in the
        tree is small and exact evaluation is cheap.
        """
        if self.is_zero() or bound < 0:
            return bound < 0
        top = self.terms[-1]
        if top.exponent.exceeds(bound.bit_length()):
            return True
        return self.evaluate() > bound

    # --- rendering ---

    def render(self, style: RenderStyle = PLAIN) -> str:
        if self.is_zero():
            return "0"
        return " + ".join(t.render(style) for t in reversed(self.terms))

    def latex(self) -> str:
        """Render with LaTeX symbols. Backslashes are not escaped."""
        return self.render(LATEX)

    def to_sympy(self) -> sympy.Expr:
        """
        Unevaluated sympy expression with the same shape as the rendering.

        `expr.doit()` folds it back into the integer value.
        """
        if self.is_zero():
            return sympy.Integer(0)
        parts = [t.to_sympy() for t in reversed(self.terms)]
        if len(parts) == 1:
            return parts[0]
        return sympy.Add(*parts, evaluate=False)

    # --- transforms ---

    def increment_base(self) -> Decomposition:
        """Replace every base in the tree, exponents included, by base + 1."""
        return Decomposition(tuple(t.increment_base() for t in self.terms))

    def decrement(self) -> Decomposition:
        """
        Symbolically subtract one.

        The least significant term c * b ^ e becomes (c - 1) * b ^ e and the
        borrowed b ^ e is spread as (b - 1) * b ^ (e - 1) + ... + (b - 1) * b ^ 0,
        where e - 1, e - 2, ... are obtained by decrementing the exponent
        tree itself. Decrementing zero returns zero.
        """
        if self.is_zero():
            return ZERO

        first, rest = self.terms[0], self.terms[1:]
        lowered = Term(first.coefficient - 1, first.base, first.exponent)

        # fillers come out most significant first
        fillers: list[Term] = []
        exp = first.exponent
        while not exp.is_zero():
            exp = exp.decrement()
            fillers.append(Term(first.base - 1, first.base, exp))
        fillers.reverse()

        return clean(Decomposition((*fillers, lowered, *rest)))


ZERO = Decomposition()


# --- Normalization ------------------------------------------------------------


def clean(d: Decomposition) -> Decomposition:
    """Drop zero-coefficient terms, recursively through the exponents."""
    return Decomposition(tuple(
        Term(t.coefficient, t.base, clean(t.exponent))
        for t in d.terms
        if not t.is_zero()
    ))


# --- Construction -------------------------------------------------------------


@lru_cache(maxsize=4096)
def _place_exponent(base: int, k: int) -> Decomposition:
    """Hereditary decomposition of the place index k (cached, immutable)."""
    return clean(Decomposition(_raw_terms(base, k)))


def _raw_terms(base: int, n: int) -> list[Term]:
    """
    Digits of n in base `base`, least significant first, each carrying its
    place index as a hereditary exponent. Zero digits are kept; clean()
    removes them.
    """
    terms: list[Term] = []
    k = 0
    while n:
        n, digit = divmod(n, base)
        terms.append(Term(digit, base, _place_exponent(base, k)))
        k += 1
    return terms


def _check_int(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(name, value, f"{name} must be an integer, got {type(value).__name__}")
    return value


def decompose(base: int, n: int) -> Decomposition:
    """
    Return the hereditary base-`base` decomposition of n.

    Raises InvalidArgument when n is negative or base is below 2; the
    `constraint` attribute names the offending argument ("n" or "base").
    """
    _check_int("base", base)
    _check_int("n", n)
    if n < 0:
        raise InvalidArgument("n", n, "n must be non negative")
    if base < 2:
        raise InvalidArgument("base", base, "base must be at least 2")

    return clean(Decomposition(_raw_terms(base, n)))
