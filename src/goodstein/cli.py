# src/goodstein/cli.py

"""
Goodstein - hereditary base-b decompositions and Goodstein sequences

Description:
    Writes an integer n in hereditary base b and follows its Goodstein
    sequence: at every step the base is bumped everywhere in the
    decomposition, then one is subtracted, symbolically.

usage: see goodstein -h
"""

from __future__ import annotations

import argparse
import faulthandler
import os
import sys
import textwrap
import threading
import time
import traceback
from importlib.resources import files as pkg_files

from colorama import Fore, Style, just_fix_windows_console

from goodstein import __version__ as _ver
from goodstein import config as CONFIG
from goodstein.decomposition import decompose, style_by_name
from goodstein.expreval import parse_int
from goodstein.fmt import format_value
from goodstein.output_manager import OutputManager
from goodstein.runtime import APPLY, CFG, ensure_runtime_deps
from goodstein.runtime import current as _rt_current
from goodstein.sequence import sequence
from goodstein.utility import (
    UserInputError,
    flatten_dotted,
    typename,
    validate_output_setting,
)
from goodstein.workspace import seed_workspace, workspace_dir

DEFAULT_BASE = 2
_TWO_ARGS = 2
HEADER = ("step", "base", "value", "decomposition")


def _install_loud_error_handlers(debug: bool) -> None:
    if not debug:
        return
    # Always show full Python tracebacks
    faulthandler.enable(file=sys.__stderr__)

    def _excepthook(exc_type, exc, tb):
        sys.stderr.write("\n[UNCAUGHT EXCEPTION]\n")
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
    sys.excepthook = _excepthook

    def _thread_excepthook(args):
        sys.stderr.write("\n[UNCAUGHT THREAD EXCEPTION]\n")
        traceback.print_exception(args.exc_type, args.exc_value, args.exc_traceback, file=sys.stderr)
        sys.stderr.flush()
    threading.excepthook = _thread_excepthook


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if not msg.startswith("Error:"):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def _debug(msg: str) -> None:
    if _rt_current().debug:
        print(f"{Style.DIM}[debug]{Style.RESET_ALL} {msg}", file=sys.stderr)


def _parse_number(text: str, what: str) -> int:
    n = parse_int(text)
    if n is None:
        raise UserInputError(f"{what} must be an integer, got '{text}'.")
    return n


def _resolve_inputs(items: list[str]) -> tuple[int, int]:
    """
    (base, n) from the positionals:
      - one item   -> n in base 2
      - two items  -> base, n
    """
    if len(items) == 1:
        return DEFAULT_BASE, _parse_number(items[0], "n")
    if len(items) == _TWO_ARGS:
        return _parse_number(items[0], "base"), _parse_number(items[1], "n")
    raise UserInputError(f"expected [base] n, got {len(items)} arguments.")


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    commands:
      init
          Create the workspace and copy the packaged profiles if missing.

      profiles
          List the available profiles with their descriptions.

      where
          Show the workspace and package paths.

    examples:
      goodstein 3 10                 Goodstein sequence of 10 starting in base 3
      goodstein 3 --steps 0          Goodstein sequence of 3, down to zero
      goodstein 2 2**10 --decompose  1024 = 2 ^ (2 ^ (2 + 1) + 2)
    """)

    p = argparse.ArgumentParser(
        prog="goodstein",
        description="Hereditary base-b decompositions & Goodstein sequences",
        usage=(
            "goodstein [base] n [--steps K] [--style plain|latex] [--no-header] [--decompose]\n"
            "                 [--profile NAME] [--output FILE] [--quiet] [--debug]\n"
            "       goodstein init | profiles | where\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("items", nargs="*", metavar="[base] n",
                   help="optional base (default 2) followed by a non-negative integer")
    p.add_argument("--steps", type=int, default=None,
                   help="Number of Goodstein steps to print (0 = until zero; default: profile MAX_STEPS)")
    p.add_argument("--style", choices=("plain", "latex"), default=None,
                   help="Rendering of the decomposition (default: profile OUTPUT.STYLE)")
    p.add_argument("--no-header", action="store_true", help="Do not print the column header line")
    p.add_argument("--decompose", action="store_true", help="Print 'n = decomposition' and stop")
    p.add_argument("--profile", default=None, help="Settings profile to use (remembered for next runs)")
    p.add_argument("--output", default=None, help="Append results to a file (also prints unless --quiet)")
    p.add_argument("--quiet", action="store_true", help="Suppress screen output")
    p.add_argument("--debug", action="store_true", help="Show timings, settings and full tracebacks")
    p.add_argument("--version", action="version", version=f"%(prog)s {_ver}")

    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return 2
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        debug = ("--debug" in (argv if argv is not None else sys.argv)) or _rt_current().debug
        if debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


def _apply_profile(explicit: str | None, *, debug: bool = False) -> None:
    """
    Precedence:
      1) explicit --profile (remembered as the current one)
      2) last used (from workspace)
      3) 'default'
    """
    if explicit and not CONFIG.has_profile(explicit):
        available = ", ".join(CONFIG.list_all_profiles())
        raise UserInputError(f"unknown profile '{explicit}'. Available profiles: {available}")

    name = explicit or CONFIG.read_current_profile() or "default"
    if not CONFIG.has_profile(name):
        name = "default"

    selected = CONFIG.load_settings(name)
    APPLY(selected)
    if debug:
        _rt_current().debug = True
    if explicit:
        CONFIG.write_current_profile(explicit)

    limit = int(CFG("BEHAVIOUR.MAX_DIGITS", 100_000))
    if not os.environ.get("PYTHONINTMAXSTRDIGITS"):
        try:
            sys.set_int_max_str_digits(limit)
        except ValueError:
            # below Python's floor of 640 digits; the profile limit still applies
            pass

    _debug(f"active profile: {selected.name} ({selected._source})")
    flat = flatten_dotted(selected.as_dict())
    for k in sorted(flat, key=str.lower):
        v = CFG(k)
        _debug(f"    {k:.<40} {v!r} ({typename(v)})")


# ---- main ----
def _main_impl(argv=None) -> int:

    just_fix_windows_console()

    parser = _build_parser()
    args = parser.parse_args(argv)
    rt = _rt_current()
    rt.debug = bool(args.debug)

    _install_loud_error_handlers(args.debug)

    if not ensure_runtime_deps(strict=True):
        return 1

    if not args.items:
        parser.print_usage(sys.stderr)
        return 2

    command = args.items[0].lower()
    if command == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('goodstein')}")
        return 0
    if command == "init":
        ws, copied = seed_workspace(overwrite=False)
        print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}")
        return 0
    if command == "profiles":
        for name, desc in CONFIG.list_profiles_with_descriptions():
            print(f"{Fore.YELLOW}{name:<16}{Style.RESET_ALL} {desc}")
        return 0

    _apply_profile(args.profile, debug=args.debug)

    base, n = _resolve_inputs(args.items)
    style = style_by_name(args.style or CFG("OUTPUT.STYLE", "plain"))
    steps = args.steps if args.steps is not None else int(CFG("BEHAVIOUR.MAX_STEPS", 20))
    if steps < 0:
        raise UserInputError("--steps must be zero or positive.")
    header = bool(CFG("OUTPUT.HEADER", True)) and not args.no_header

    try:
        target = validate_output_setting(args.output)
    except ValueError as e:
        raise UserInputError(f"--output: {e}") from None
    if target is None:
        target = validate_output_setting(CFG("OUTPUT.OUTPUT_FILE", None))

    om = OutputManager(output_file=target, quiet=args.quiet)
    try:
        if args.decompose:
            d = decompose(base, n)
            om.write(f"{n} = {d.render(style)}")
            return 0

        _debug(f"goodstein sequence of {n} from base {base}, max steps {steps or 'unlimited'}")
        if header:
            om.write(f"{Fore.CYAN}{Style.BRIGHT}" + "\t".join(HEADER) + f"{Style.RESET_ALL}")

        for step in sequence(base, n, max_steps=steps):
            t0 = time.perf_counter()
            d = step.decomposition
            line = "\t".join((str(step.index), str(step.base), format_value(d), d.render(style)))
            om.write(line)
            dt_ms = (time.perf_counter() - t0) * 1000.0
            _debug(f"step {step.index}: {len(d)} term(s), rendered in {dt_ms:.2f} ms")
    finally:
        om.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
