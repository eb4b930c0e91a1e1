from __future__ import annotations

from dataclasses import dataclass
from importlib.resources import files as pkg_files
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import tomllib as toml  # py311+

from goodstein.utility import UserInputError
from goodstein.workspace import workspace_dir


@dataclass
class Settings:
    """
    Wrap the full TOML dict (without the [PROFILE] section).
    .as_dict() feeds runtime.apply().

    Added fields:
      - name:        resolved profile name (FILE.stem if not provided in [PROFILE])
      - description: one-line description from [PROFILE] or "(no description)"
    """
    data: dict[str, Any]
    name: str
    description: str
    _source: Path | Traversable | None = None

    def as_dict(self) -> dict[str, Any]:
        return self.data


# --- Paths -----------------------------------------------------------------

def _profiles_dir() -> Path:
    return workspace_dir() / "profiles"


def _packaged_profile(name: str) -> Traversable | None:
    ref = pkg_files("goodstein") / "profiles" / f"{name}.toml"
    return ref if ref.is_file() else None


def _profile_path(name: str) -> Path | Traversable | None:
    """Workspace profile first, packaged profile second."""
    ws = _profiles_dir() / f"{name}.toml"
    if ws.is_file():
        return ws
    return _packaged_profile(name)


# --- I/O -------------------------------------------------------------------


def _load_toml(path: Path | Traversable) -> dict[str, object]:
    try:
        with path.open("rb") as f:
            return toml.load(f)
    except toml.TOMLDecodeError as e:
        lineno = getattr(e, "lineno", None)
        colno = getattr(e, "colno", None)
        msg = getattr(e, "msg", str(e))
        where = []
        if lineno is not None:
            where.append(f"line {lineno}")
        if colno is not None:
            where.append(f"column {colno}")
        loc = f" (at {', '.join(where)})" if where else ""
        # No traceback chaining
        raise UserInputError(f"reading {path.name}: {msg}{loc}.") from None
    except OSError as e:
        raise UserInputError(f"reading {path.name}: {e.strerror or e}.") from None


# --- Metadata handling -----------------------------------------------------


def _sanitize_oneline(s: str) -> str:
    return " ".join(str(s).split()) or "(no description)"


def _split_profile_data(raw: dict[str, Any], fallback_name: str) -> tuple[dict[str, Any], str, str]:
    """
    Extract [PROFILE] meta (name, description) and return:
      (settings_without_profile, resolved_name, resolved_description)
    """
    meta = raw.get("PROFILE") or {}
    if "PROFILE" in raw:
        raw = {k: v for k, v in raw.items() if k != "PROFILE"}

    name = str(meta.get("name") or fallback_name)
    description = _sanitize_oneline(str(meta.get("description") or ""))

    return raw, name, description


# --- Public API ------------------------------------------------------------


def list_all_profiles() -> list[str]:
    """Profile names (filename stems) from the workspace and the package."""
    names = {p.stem for p in _profiles_dir().glob("*.toml")}
    for ref in (pkg_files("goodstein") / "profiles").iterdir():
        if ref.is_file() and ref.name.endswith(".toml"):
            names.add(ref.name[:-5])
    return sorted(names)


def list_profiles_with_descriptions() -> list[tuple[str, str]]:
    """
    Return [(name, description), ...] for all profiles.
    Profiles lacking [PROFILE] get "(no description)".
    """
    items: list[tuple[str, str]] = []
    for stem in list_all_profiles():
        path = _profile_path(stem)
        try:
            raw = _load_toml(path)
            _, nm, desc = _split_profile_data(raw, stem)
            items.append((nm, desc))
        except UserInputError:
            # Best-effort listing; fall back to filename
            items.append((stem, "(no description)"))
    return sorted(items, key=lambda t: t[0].lower())


def has_profile(name: str) -> bool:
    return _profile_path(name) is not None


def load_settings(name: str | None) -> Settings:
    """
    Load a profile by name (default 'default'), strip the [PROFILE] metadata
    and return Settings(data=..., name=..., description=..., _source=path).
    """
    if not name:
        name = "default"

    path = _profile_path(name)
    if path is None:
        raise UserInputError(f"profile '{name}' not found in {_profiles_dir()} or the package.")

    raw = _load_toml(path)
    data, resolved_name, description = _split_profile_data(raw, name)

    # Sections are always tables, even when a profile leaves them out
    for section in ("BEHAVIOUR", "OUTPUT", "FORMATTING"):
        value = data.get(section)
        if value is None:
            data[section] = {}
        elif not isinstance(value, dict):
            raise UserInputError(f"reading {path.name}: [{section}] must be a table.")

    return Settings(
        data=data,
        name=resolved_name,
        description=description,
        _source=path,
    )


def _current_profile_path() -> Path:
    p = _profiles_dir()
    p.mkdir(parents=True, exist_ok=True)
    return p / ".current"


def read_current_profile() -> str | None:
    try:
        s = _current_profile_path().read_text(encoding="utf-8").strip()
    except OSError:
        return None
    return s[:-5] if s.lower().endswith(".toml") else (s or None)


def write_current_profile(name: str) -> None:
    nm = (name or "").strip()
    if nm.lower().endswith(".toml"):
        nm = nm[:-5]
    _current_profile_path().write_text(nm, encoding="utf-8")
