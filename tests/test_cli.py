import json
import locale
from pathlib import Path

import pytest

from main import main


@pytest.fixture(autouse=True)
def collation_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(locale, "setlocale", lambda category, value=None: calls.append((category, value)))
    return calls


def write(p: Path, content: str) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content, encoding="utf-8")


def make_workspace(root: Path) -> None:
    write(root / "src" / "a.ts", "// A\n")
    write(root / "src" / "b.py", "# B\n")
    write(root / "node_modules" / "dep.js", "// dep\n")


def test_text_output(tmp_path, capsys):
    make_workspace(tmp_path)
    assert main([str(tmp_path), "-c", str(tmp_path)]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [
        "src/a.ts (1 comment)",
        "  1:0  A",
        "src/b.py (1 comment)",
        "  1:0  B",
        "Found 2 comments in 2 files",
    ]


def test_json_output_with_extension_filter(tmp_path, capsys):
    make_workspace(tmp_path)
    assert main([str(tmp_path), "-c", str(tmp_path), "--json", "--ext", "py"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data == [
        {
            "file_path": str(tmp_path / "src" / "b.py"),
            "comments": [{"text": "# B", "line_number": 1, "column": 0, "kind": "hash"}],
        }
    ]


def test_roots_from_config(tmp_path, capsys):
    make_workspace(tmp_path / "ws")
    (tmp_path / "comment-explorer.yaml").write_text("roots: [ws]\nfileExtensions: [ts]\n", encoding="utf-8")
    assert main(["-c", str(tmp_path)]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["src/a.ts (1 comment)", "  1:0  A", "Found 1 comment in 1 file"]


def test_check_exclusions(tmp_path, capsys):
    make_workspace(tmp_path)
    assert main([str(tmp_path), "-c", str(tmp_path), "--check-exclusions", "--exclude", "**/*.log"]) == 0
    out = capsys.readouterr().out
    assert "- node_modules files: 1" in out
    assert "Some exclusions not working" in out


def test_invalid_config_returns_error(tmp_path, capsys):
    bad = tmp_path / "comment-explorer.yaml"
    bad.write_text("exclude: [1]\n", encoding="utf-8")
    assert main([str(tmp_path), "-c", str(bad)]) == 1
    assert capsys.readouterr().out == ""


def test_main_applies_environment_collation(tmp_path, capsys, collation_calls):
    assert main([str(tmp_path), "-c", str(tmp_path)]) == 0
    assert collation_calls == [(locale.LC_COLLATE, "")]
    assert capsys.readouterr().out.strip() == "No comments found in the current workspace"
