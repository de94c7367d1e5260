"""Tests for the command-line interface."""

import json
import sys

import pytest

from speccontext import cli


def _run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["speccontext", *argv])
    cli.main()


def test_diff_command(tmp_path, monkeypatch, capsys):
    old = tmp_path / "old.md"
    new = tmp_path / "new.md"
    old.write_text("## Scope\n- ALL\n", encoding="utf-8")
    new.write_text("## Scope\n- ALL\n- Extra\n", encoding="utf-8")

    _run(monkeypatch, "diff", str(old), str(new), "--no-color")
    assert capsys.readouterr().out == "Chapter: Scope\n  - ALL\n+ - Extra\n"


def test_diff_command_missing_old_file(tmp_path, monkeypatch, capsys):
    new = tmp_path / "new.md"
    new.write_text("## A\nx", encoding="utf-8")

    _run(monkeypatch, "diff", str(tmp_path / "missing.md"), str(new), "--no-color")
    assert capsys.readouterr().out == "Chapter: A\n- \n+ x\n"


def test_context_command_json(workspace, monkeypatch, capsys):
    _run(monkeypatch, "--workspace", str(workspace), "context", "sum", "--json", "--limit", "2")
    data = json.loads(capsys.readouterr().out)
    assert [e["path"] for e in data["specs"]] == ["src/cli/quicksum.js.spec"]
    assert [e["path"] for e in data["requirements"]] == ["R#001-sum.req"]


def test_no_command_prints_help(monkeypatch, capsys):
    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch)
    assert exc.value.code == 0
    assert "speccontext" in capsys.readouterr().out
