# tests/conftest.py
from __future__ import annotations

import sys

import pytest

from goodstein import runtime


@pytest.fixture(autouse=True)
def isolated_runtime(tmp_path, monkeypatch):
    """Fresh runtime settings and a throwaway workspace for every test."""
    monkeypatch.setenv("GOODSTEIN_HOME", str(tmp_path))
    int_digits = sys.get_int_max_str_digits()
    rt = runtime.reset()
    yield rt
    runtime.reset()
    # main() lowers the interpreter's str/int guard to the profile limit
    sys.set_int_max_str_digits(int_digits)
