# tests/test_cli.py
"""
End-to-end tests for the goodstein command (main() is called in-process).
"""

from __future__ import annotations

import pytest

from goodstein.cli import main
from goodstein.fmt import strip_ansi

# ---------- helpers -----------------------------------------------------------


def _run(capsys, *argv):
    code = main(list(argv))
    out, err = capsys.readouterr()
    return code, strip_ansi(out).splitlines(), strip_ansi(err)


def _write_profile(tmp_path, name, body):
    pdir = tmp_path / "profiles"
    pdir.mkdir(parents=True, exist_ok=True)
    (pdir / f"{name}.toml").write_text(body, encoding="utf-8")


# ---------- sequence output ---------------------------------------------------


def test_sequence_lines(capsys):
    code, lines, _ = _run(capsys, "2", "10", "--steps", "2", "--no-header")
    assert code == 0
    assert lines == [
        "0\t2\t10\t2 ^ (2 + 1) + 2",
        "1\t3\t83\t3 ^ (3 + 1) + 2",
        "2\t4\t1025\t4 ^ (4 + 1) + 1",
    ]


def test_header_is_printed_by_default(capsys):
    code, lines, _ = _run(capsys, "3", "1", "--steps", "0")
    assert code == 0
    assert lines == [
        "step\tbase\tvalue\tdecomposition",
        "0\t3\t1\t1",
        "1\t4\t0\t0",
    ]


def test_single_number_uses_base_two(capsys):
    code, lines, _ = _run(capsys, "3", "--steps", "0", "--no-header")
    assert code == 0
    assert [line.split("\t")[2] for line in lines] == ["3", "3", "3", "2", "1", "0"]
    assert lines[0] == "0\t2\t3\t2 + 1"


def test_latex_style(capsys):
    code, lines, _ = _run(capsys, "2", "10", "--steps", "1", "--no-header", "--style", "latex")
    assert code == 0
    assert lines[0].endswith("\t2 ^ {2 + 1} + 2")
    assert lines[1].endswith("\t3 ^ {3 + 1} + 2")


def test_decompose_only(capsys):
    code, lines, _ = _run(capsys, "3", "10", "--decompose")
    assert code == 0
    assert lines == ["10 = 3 ^ (2) + 1"]


def test_expression_input(capsys):
    code, lines, _ = _run(capsys, "2", "2**10", "--decompose")
    assert code == 0
    assert lines == ["1024 = 2 ^ (2 ^ (2 + 1) + 2)"]


# ---------- errors & exit codes -----------------------------------------------


@pytest.mark.parametrize("argv,message", [
    (("1", "5"), "base must be at least 2"),
    (("2", "-3"), "n must be non negative"),
    (("2", "abc"), "n must be an integer"),
    (("x", "5"), "base must be an integer"),
    (("1", "2", "3"), "expected [base] n"),
    (("2", "5", "--steps", "-1"), "--steps must be zero or positive"),
    (("2", "5", "--profile", "nope"), "unknown profile 'nope'"),
])
def test_user_errors_exit_with_two(capsys, argv, message):
    code, lines, err = _run(capsys, *argv)
    assert code == 2
    assert "Error:" in err
    assert message in err


def test_no_arguments_prints_usage(capsys):
    code = main([])
    _, err = capsys.readouterr()
    assert code == 2
    assert "usage:" in err


# ---------- profiles, config, output ------------------------------------------


def test_latex_profile_is_applied_and_remembered(capsys, tmp_path):
    code, lines, _ = _run(capsys, "2", "10", "--steps", "1", "--no-header", "--profile", "latex")
    assert code == 0
    assert lines[0] == "0\t2\t10\t2 ^ {2 + 1} + 2"
    assert (tmp_path / "profiles" / ".current").read_text(encoding="utf-8") == "latex"

    # next run without --profile picks up the remembered one
    code, lines, _ = _run(capsys, "3", "10", "--decompose")
    assert lines == ["10 = 3 ^ {2} + 1"]


def test_cli_style_overrides_profile(capsys):
    code, lines, _ = _run(capsys, "3", "10", "--decompose", "--profile", "latex", "--style", "plain")
    assert code == 0
    assert lines == ["10 = 3 ^ (2) + 1"]


def test_workspace_profile_digit_guard(capsys, tmp_path):
    _write_profile(tmp_path, "tiny", """
        [PROFILE]
        description = "three digits at most"

        [BEHAVIOUR]
        MAX_DIGITS = 3
        MAX_STEPS = 2

        [OUTPUT]
        HEADER = false
    """.replace("        ", ""))
    code, lines, _ = _run(capsys, "2", "10", "--profile", "tiny")
    assert code == 0
    assert [line.split("\t")[2] for line in lines] == ["10", "83", ">10^3"]
    assert lines[2].endswith("4 ^ (4 + 1) + 1")


def test_long_literal_reports_digit_limit(capsys, tmp_path):
    _write_profile(tmp_path, "short", "[BEHAVIOUR]\nMAX_DIGITS = 700\n")
    code, _, err = _run(capsys, "2", "9" * 800, "--decompose", "--profile", "short")
    assert code == 2
    assert "more than 700 decimal digits" in err
    assert "must be an integer" not in err


def test_broken_profile_reports_location(capsys, tmp_path):
    _write_profile(tmp_path, "broken", "[OUTPUT]\nSTYLE = \n")
    code, _, err = _run(capsys, "2", "10", "--profile", "broken")
    assert code == 2
    assert "broken.toml" in err
    assert "line 2" in err


def test_output_file_gets_plain_text(capsys, tmp_path):
    code, lines, _ = _run(capsys, "2", "3", "--steps", "0", "--output", "runs/g3.txt", "--quiet")
    assert code == 0
    assert lines == []
    text = (tmp_path / "runs" / "g3.txt").read_text(encoding="utf-8")
    assert "\x1b[" not in text
    assert text.splitlines()[0] == "step\tbase\tvalue\tdecomposition"
    assert text.splitlines()[-2] == "5\t7\t0\t0"
    assert text.endswith("\n\n")


def test_output_directory_is_rejected(capsys):
    code, _, err = _run(capsys, "2", "3", "--output", "results/")
    assert code == 2
    assert "--output" in err


# ---------- commands ----------------------------------------------------------


def test_where(capsys, tmp_path):
    code, lines, _ = _run(capsys, "where")
    assert code == 0
    assert lines[0] == f"Workspace: {tmp_path.resolve()}"


def test_profiles_lists_packaged_profiles(capsys):
    code, lines, _ = _run(capsys, "profiles")
    assert code == 0
    names = [line.split()[0] for line in lines]
    assert "default" in names
    assert "latex" in names


def test_init_seeds_workspace(capsys, tmp_path):
    code, lines, _ = _run(capsys, "init")
    assert code == 0
    assert (tmp_path / "profiles" / "default.toml").is_file()
    assert lines[-1] == "Copied -> profiles: 2"

    code, lines, _ = _run(capsys, "init")
    assert lines[-1] == "Copied -> profiles: 0"


def test_debug_writes_diagnostics_to_stderr(capsys):
    code, lines, err = _run(capsys, "2", "4", "--steps", "1", "--no-header", "--debug")
    assert code == 0
    assert len(lines) == 2
    assert "[debug] active profile: default" in err
    assert "[debug] step 1:" in err
