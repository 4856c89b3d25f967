from __future__ import annotations

import os

from storefront.util.env import env_flag, env_float, load_env_file


def test_load_env_file_never_overrides(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\n"
        "// another comment\n"
        "export STOREFRONT_TEST_A='quoted'\n"
        "STOREFRONT_TEST_B=plain\n"
        "MALFORMED_LINE\n"
        "=novalue\n",
        encoding="utf-8",
    )
    monkeypatch.delenv("STOREFRONT_TEST_A", raising=False)
    monkeypatch.setenv("STOREFRONT_TEST_B", "existing")

    load_env_file(env_file)

    assert os.environ["STOREFRONT_TEST_A"] == "quoted"
    assert os.environ["STOREFRONT_TEST_B"] == "existing"


def test_missing_env_file_is_ignored(tmp_path):
    load_env_file(tmp_path / "absent.env")


def test_env_helpers(monkeypatch):
    monkeypatch.setenv("STOREFRONT_FLAG", "Yes")
    monkeypatch.setenv("STOREFRONT_NUM", "2.5")
    monkeypatch.setenv("STOREFRONT_BAD", "x")

    assert env_flag("STOREFRONT_FLAG") is True
    assert env_flag("STOREFRONT_UNSET_FLAG", default=True) is True
    assert env_float("STOREFRONT_NUM") == 2.5
    assert env_float("STOREFRONT_BAD", 1.0) == 1.0
    assert env_float("STOREFRONT_UNSET_NUM") is None
