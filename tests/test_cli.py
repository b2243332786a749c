"""
Тесты CLI: render / resolve / reverse / list.

Большинство тестов вызывают main() в процессе; один — через подпроцесс,
как это делает пользователь.
"""

import json
import sys
from pathlib import Path

import pytest

from alexi.cli import main
from tests.infrastructure.cli_utils import jload, run_cli
from tests.infrastructure.file_utils import write


@pytest.fixture
def project(tmpproj: Path, monkeypatch) -> Path:
    """tmpproj с изолированными sys.path / sys.modules для модуля маршрутов."""
    monkeypatch.setattr(sys, "path", list(sys.path))
    monkeypatch.delitem(sys.modules, "project_urls", raising=False)
    return tmpproj


def _run(root: Path, *args: str) -> int:
    return main(["--root", str(root), *args])


def test_render(project: Path, capsys):
    write(project / "ctx.yaml", "notes: [a, b]\n")

    rc = _run(project, "render", "notes/note_list.html", "--context", str(project / "ctx.yaml"))

    assert rc == 0
    assert capsys.readouterr().out == "<main>a;b;</main>"


def test_render_with_vars(project: Path, capsys):
    write(project / "templates" / "hello.html", "Hello {{ name }}{% if admin == 'yes' %}!{% endif %}")

    rc = _run(project, "render", "hello.html", "--var", "name=Ann", "--var", "admin=yes")

    assert rc == 0
    assert capsys.readouterr().out == "Hello Ann!"


def test_render_json_context(project: Path, capsys):
    write(project / "ctx.json", json.dumps({"notes": ["x"]}))

    rc = _run(project, "render", "notes/note_list.html", "--context", str(project / "ctx.json"))

    assert rc == 0
    assert capsys.readouterr().out == "<main>x;</main>"


def test_render_missing_template(project: Path, capsys):
    rc = _run(project, "render", "absent.html")

    assert rc == 2
    assert 'Template not found: "absent.html"' in capsys.readouterr().err


def test_render_bad_var(project: Path, capsys):
    rc = _run(project, "render", "base.html", "--var", "novalue")

    assert rc == 2
    assert "Expected 'key=value'" in capsys.readouterr().err


def test_resolve(project: Path, capsys):
    rc = _run(project, "resolve", "/notes/42/")

    assert rc == 0
    data = jload(capsys.readouterr().out)
    assert data["path"] == "/notes/42/"
    assert data["match"]["name"] == "note-detail"
    assert data["match"]["params"] == {"id": "42"}
    assert data["match"]["view"].endswith("note_detail")


def test_resolve_no_match(project: Path, capsys):
    rc = _run(project, "resolve", "/nowhere/")

    assert rc == 0
    assert jload(capsys.readouterr().out)["match"] is None


def test_reverse(project: Path, capsys):
    rc = _run(project, "reverse", "note-detail", "--param", "id=7")

    assert rc == 0
    assert capsys.readouterr().out == "/notes/7/\n"


def test_reverse_missing_param(project: Path, capsys):
    rc = _run(project, "reverse", "note-detail")

    assert rc == 2
    assert "Missing required parameter 'id'" in capsys.readouterr().err


def test_reverse_unknown_name(project: Path, capsys):
    rc = _run(project, "reverse", "nope")

    assert rc == 2
    assert "No route found with name: nope" in capsys.readouterr().err


def test_list_templates(project: Path, capsys):
    rc = _run(project, "list", "templates")

    assert rc == 0
    assert jload(capsys.readouterr().out) == {"templates": ["base.html", "notes/note_list.html"]}


def test_list_routes(project: Path, capsys):
    rc = _run(project, "list", "routes")

    assert rc == 0
    routes = jload(capsys.readouterr().out)["routes"]
    assert [r["name"] for r in routes] == ["home", "note-add", "note-detail"]
    assert routes[2] == {"name": "note-detail", "pattern": "notes/:id/", "params": ["id"]}


def test_invalid_config(tmp_path: Path, capsys):
    write(tmp_path / "alexi.yaml", "- not a mapping\n")

    rc = _run(tmp_path, "list", "templates")

    assert rc == 2
    assert "must be a mapping" in capsys.readouterr().err


def test_version_subprocess(tmp_path: Path):
    cp = run_cli(tmp_path, "--version")

    assert cp.returncode == 0, cp.stderr
    assert cp.stdout.startswith("alexi ")


def test_debug_setting_enables_debug_log(project: Path, capsys):
    """debug: true в alexi.yaml включает отладочный вывод, как --verbose."""
    config = project / "alexi.yaml"
    write(config, config.read_text(encoding="utf-8") + "debug: true\n")

    rc = _run(project, "render", "base.html")

    assert rc == 0
    captured = capsys.readouterr()
    assert captured.out == "<main></main>"
    assert "[DEBUG] Rendering template 'base.html'" in captured.err


def test_no_debug_log_by_default(project: Path, capsys, monkeypatch):
    monkeypatch.delenv("ALEXI_DEBUG", raising=False)

    rc = _run(project, "render", "base.html")

    assert rc == 0
    assert "[DEBUG]" not in capsys.readouterr().err
