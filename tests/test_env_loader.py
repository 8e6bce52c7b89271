import os
from pathlib import Path

import pytest

from envlayer.config import EnvLoader
from envlayer.exceptions import SourceReadError


def test_env_loader_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("FOO=file\nBAR=file\nQUOTED=\"a # b\"\n")

    monkeypatch.setenv("BAR", "env")

    loader = EnvLoader(env_file)
    data = loader.load({"BAR": "override", "BAZ": "override"})

    assert data["FOO"] == "file"
    assert data["BAR"] == "override"
    assert data["BAZ"] == "override"
    assert data["QUOTED"] == "a # b"


def test_env_loader_os_env_beats_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("BAR=file\n")
    monkeypatch.setenv("BAR", "env")

    assert EnvLoader(env_file).load()["BAR"] == "env"


def test_env_loader_does_not_mutate_environ(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("ONLY_IN_FILE=1\n")
    monkeypatch.delenv("ONLY_IN_FILE", raising=False)

    EnvLoader(env_file).load()

    assert "ONLY_IN_FILE" not in os.environ


def test_env_loader_missing_file_is_skipped(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(os, "environ", {"A": "env"})

    data = EnvLoader(tmp_path / "missing.env").load()

    assert data == {"A": "env"}


def test_env_loader_defaults_to_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(os, "environ", {})
    (tmp_path / ".env").write_text("FROM_CWD=yes\n")

    assert EnvLoader().load() == {"FROM_CWD": "yes"}


def test_env_loader_unreadable_file(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_bytes(b"A=\xff\n")

    with pytest.raises(SourceReadError):
        EnvLoader(env_file).load()
