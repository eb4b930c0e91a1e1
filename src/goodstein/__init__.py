from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("goodstein")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .decomposition import (
    LATEX,
    PLAIN,
    ZERO,
    Decomposition,
    RenderStyle,
    Term,
    clean,
    decompose,
    style_by_name,
)
from .runtime import APPLY, CFG
from .sequence import GoodsteinStep, goodstein_step, sequence
from .utility import InvalidArgument, UserInputError

__all__ = [
    "APPLY",
    "CFG",
    "LATEX",
    "PLAIN",
    "ZERO",
    "Decomposition",
    "GoodsteinStep",
    "InvalidArgument",
    "RenderStyle",
    "Term",
    "UserInputError",
    "__version__",
    "clean",
    "decompose",
    "goodstein_step",
    "sequence",
    "style_by_name",
]
