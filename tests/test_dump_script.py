from __future__ import annotations

import importlib.util
from pathlib import Path
from types import ModuleType

import pytest

from pymbapi.models.token import TokenState

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "dump_all.py"


def _load_script() -> ModuleType:
    spec = importlib.util.spec_from_file_location("dump_all", SCRIPT)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_save_token_writes_rotated_refresh_token(tmp_path: Path) -> None:
    token_file = tmp_path / "refresh_token"
    callback = _load_script()._save_token(token_file)

    callback(TokenState(access_token="t1", refresh_token="r1"))

    assert token_file.read_text(encoding="utf-8") == "r1\n"


def test_save_token_without_file_prints_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    callback = _load_script()._save_token(None)

    callback(TokenState(access_token="t1", refresh_token="r1"))

    assert "New refresh token: r1" in capsys.readouterr().err
