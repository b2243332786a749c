import logging
import textwrap
from pathlib import Path

import pytest

from alexi.template.loaders import MemoryTemplateLoader, reset_template_registry
from alexi.urls import clear_registry_cache

# Импорт из унифицированной инфраструктуры
from tests.infrastructure.file_utils import write


@pytest.fixture(autouse=True)
def _isolate_process_state():
    """Реестр шаблонов, кэш реестров маршрутов и обработчики логов CLI не переживают тест."""
    yield
    reset_template_registry()
    clear_registry_cache()
    log = logging.getLogger("alexi")
    for h in list(log.handlers):
        log.removeHandler(h)
    log.setLevel(logging.NOTSET)


@pytest.fixture
def memory_loader() -> MemoryTemplateLoader:
    """Загрузчик в памяти с базовым шаблоном и частичным шаблоном."""
    return MemoryTemplateLoader({
        "base": "before{% block content %}default{% endblock %}after",
        "partial": "[{{ name }}]",
    })


@pytest.fixture
def tmpproj(tmp_path: Path) -> Path:
    """Минимальный проект: alexi.yaml, шаблоны и модуль маршрутов."""
    root = tmp_path
    write(
        root / "alexi.yaml",
        textwrap.dedent("""
        templates:
          dirs: [templates]
          cache: false
        urls:
          module: project_urls
        """).strip() + "\n",
    )
    write(root / "templates" / "base.html", "<main>{% block content %}{% endblock %}</main>")
    write(
        root / "templates" / "notes" / "note_list.html",
        '{% extends "base.html" %}{% block content %}{% for n in notes %}{{ n }};{% endfor %}{% endblock %}',
    )
    write(
        root / "project_urls.py",
        textwrap.dedent("""
        from alexi.urls import include, path


        def home(request, params):
            return "home"


        def note_detail(request, params):
            return params["id"]


        def note_add(request, params):
            return "add"


        urlpatterns = [
            path("", home, name="home"),
            path("notes/", include([
                path("add/", note_add, name="note-add"),
                path(":id/", note_detail, name="note-detail"),
            ])),
        ]
        """).lstrip(),
    )
    return root
