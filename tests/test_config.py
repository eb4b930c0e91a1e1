# tests/test_config.py
from __future__ import annotations

import zipfile

import pytest

from goodstein import config as CONFIG
from goodstein.runtime import APPLY, CFG, current
from goodstein.utility import UserInputError, flatten_dotted


def test_default_profile_is_packaged():
    s = CONFIG.load_settings(None)
    assert s.name == "default"
    assert "PROFILE" not in s.data
    assert s.data["OUTPUT"]["STYLE"] == "plain"
    assert s.data["BEHAVIOUR"]["MAX_DIGITS"] == 100_000


def test_workspace_profile_overrides_packaged(tmp_path):
    (tmp_path / "profiles").mkdir()
    (tmp_path / "profiles" / "default.toml").write_text(
        '[PROFILE]\ndescription = "mine"\n[OUTPUT]\nSTYLE = "latex"\n', encoding="utf-8"
    )
    s = CONFIG.load_settings("default")
    assert s.description == "mine"
    assert s.data["OUTPUT"] == {"STYLE": "latex"}
    assert s.data["BEHAVIOUR"] == {}
    assert s._source.samefile(tmp_path / "profiles" / "default.toml")


def test_missing_profile():
    assert not CONFIG.has_profile("does-not-exist")
    with pytest.raises(UserInputError, match="not found"):
        CONFIG.load_settings("does-not-exist")


def test_section_must_be_a_table(tmp_path):
    (tmp_path / "profiles").mkdir()
    (tmp_path / "profiles" / "odd.toml").write_text('OUTPUT = "plain"\n', encoding="utf-8")
    with pytest.raises(UserInputError, match=r"\[OUTPUT\] must be a table"):
        CONFIG.load_settings("odd")


def test_current_profile_roundtrip():
    assert CONFIG.read_current_profile() is None
    CONFIG.write_current_profile("latex.toml")
    assert CONFIG.read_current_profile() == "latex"


def test_profiles_with_descriptions():
    items = dict(CONFIG.list_profiles_with_descriptions())
    assert items["latex"].startswith("LaTeX-style")


def test_apply_and_dotted_lookup():
    APPLY(CONFIG.load_settings("latex"))
    assert current().profile_name == "latex"
    assert CFG("OUTPUT.STYLE") == "latex"
    assert CFG("OUTPUT.MISSING", 7) == 7
    assert CFG("NOPE.STYLE", "x") == "x"
    assert CFG("", 1) == 1


def test_apply_plain_dict_and_debug_flag():
    APPLY({"BEHAVIOUR": {"DEBUG": True}})
    assert current().debug is True
    assert CFG("BEHAVIOUR") == {"DEBUG": True}


def test_flatten_dotted():
    assert flatten_dotted({"A": {"B": 1, "C": {"D": 2}}, "E": 3}) == {"A.B": 1, "A.C.D": 2, "E": 3}


def test_packaged_profiles_read_from_zip(tmp_path, monkeypatch):
    archive = tmp_path / "goodstein.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("goodstein/profiles/default.toml", '[OUTPUT]\nSTYLE = "plain"\n')
        zf.writestr("goodstein/profiles/zipped.toml",
                    '[PROFILE]\ndescription = "from the archive"\n[OUTPUT]\nSTYLE = "latex"\n')
    monkeypatch.setattr(CONFIG, "pkg_files", lambda pkg: zipfile.Path(archive, f"{pkg}/"))

    assert CONFIG.list_all_profiles() == ["default", "zipped"]
    assert CONFIG.has_profile("zipped")
    s = CONFIG.load_settings("zipped")
    assert s.name == "zipped"
    assert s.description == "from the archive"
    assert s.data["OUTPUT"] == {"STYLE": "latex"}


def test_apply_takes_profile_name_from_settings():
    APPLY(CONFIG.Settings(data={"OUTPUT": {"STYLE": "latex"}}, name="custom", description="x"))
    assert current().profile_name == "custom"
    assert CFG("OUTPUT.STYLE") == "latex"
    APPLY({"OUTPUT": {}})
    assert current().profile_name == "default"
    assert CFG("OUTPUT.STYLE", "plain") == "plain"
