from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .config import build_template_loader, load_settings, load_urlpatterns
from .errors import AlexiUserError
from .report_schema import ResolveReport, RouteInfo, RouteMatch, RoutesList, TemplatesList
from .template.loaders import CachedTemplateLoader, FilesystemTemplateLoader
from .template.renderer import TemplateRenderer
from .urls import iter_named_routes, resolve, reverse
from .version import tool_version

_yaml = YAML(typ="safe")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose or os.environ.get("ALEXI_DEBUG") else logging.WARNING
    log = logging.getLogger("alexi")
    log.setLevel(level)
    # main() может вызываться повторно (тесты): старый обработчик держит прежний stderr
    for old in [h for h in log.handlers if getattr(h, "_alexi_cli", False)]:
        log.removeHandler(old)
    h = logging.StreamHandler(sys.stderr)
    h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    h._alexi_cli = True  # type: ignore[attr-defined]
    log.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="alexi",
        description="Alexi: Django-style templates and URL routing",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("--verbose", action="store_true", help="отладочный вывод (также ALEXI_DEBUG=1)")
    p.add_argument(
        "--root",
        type=Path,
        default=None,
        help="корень проекта с alexi.yaml (по умолчанию текущая директория)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_render = sub.add_parser("render", help="Отрендерить шаблон (текст, не JSON)")
    sp_render.add_argument("template", help="имя шаблона, например notes/note_list.html")
    sp_render.add_argument(
        "--context",
        metavar="FILE",
        help="YAML/JSON файл с контекстом шаблона",
    )
    sp_render.add_argument(
        "--var",
        action="append",
        metavar="KEY=VALUE",
        help="переменная контекста (можно указать несколько, перекрывает --context)",
    )

    sp_resolve = sub.add_parser("resolve", help="Найти маршрут для пути (JSON)")
    sp_resolve.add_argument("path", help="путь, например /assets/42/")

    sp_reverse = sub.add_parser("reverse", help="Построить путь по имени маршрута")
    sp_reverse.add_argument("name", help="имя маршрута")
    sp_reverse.add_argument(
        "--param",
        action="append",
        metavar="KEY=VALUE",
        help="параметр маршрута (можно указать несколько)",
    )

    sp_list = sub.add_parser("list", help="Списки сущностей (JSON)")
    sp_list.add_argument("what", choices=["templates", "routes"], help="что вывести")

    return p


def _parse_pairs(items: Optional[List[str]], *, what: str) -> Dict[str, str]:
    """Парсит список 'key=value' в словарь."""
    result: Dict[str, str] = {}
    for item in items or []:
        if "=" not in item:
            raise ValueError(f"Invalid {what} format '{item}'. Expected 'key=value'")
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError(f"Invalid {what} format '{item}'. Empty key")
        result[key] = value
    return result


def _read_context_file(path_arg: Optional[str]) -> Dict[str, Any]:
    """Читает контекст из YAML/JSON файла (JSON — подмножество YAML)."""
    if not path_arg:
        return {}
    path = Path(path_arg)
    if not path.is_file():
        raise ValueError(f"Context file not found: {path}")
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ValueError(f"Failed to parse context file {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"Context file must contain a mapping: {path}")
    return raw


def _view_name(view: Any) -> str:
    module = getattr(view, "__module__", None)
    qualname = getattr(view, "__qualname__", None) or type(view).__qualname__
    return f"{module}.{qualname}" if module else qualname


def _dumps(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"


def _list_templates(loader: Any) -> List[str]:
    inner = loader.inner if isinstance(loader, CachedTemplateLoader) else loader
    if isinstance(inner, FilesystemTemplateLoader):
        return inner.list_templates()
    return []


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(bool(ns.verbose))
    root = (ns.root or Path.cwd()).resolve()

    try:
        settings = load_settings(root)
        if settings.debug:
            logging.getLogger("alexi").setLevel(logging.DEBUG)

        if ns.cmd == "render":
            context = _read_context_file(ns.context)
            context.update(_parse_pairs(ns.var, what="variable"))
            renderer = TemplateRenderer(
                build_template_loader(settings, root),
                max_depth=settings.templates.max_depth,
            )
            sys.stdout.write(asyncio.run(renderer.render(ns.template, context)))
            return 0

        if ns.cmd == "resolve":
            result = resolve(ns.path, load_urlpatterns(settings, root))
            report = ResolveReport(path=ns.path)
            if result is not None:
                report.match = RouteMatch(
                    name=result.name,
                    view=_view_name(result.view),
                    params=result.params,
                )
            sys.stdout.write(_dumps(report.model_dump(mode="json")))
            return 0

        if ns.cmd == "reverse":
            url = reverse(ns.name, _parse_pairs(ns.param, what="parameter"), load_urlpatterns(settings, root))
            sys.stdout.write(url + "\n")
            return 0

        if ns.cmd == "list":
            if ns.what == "templates":
                data = TemplatesList(templates=_list_templates(build_template_loader(settings, root)))
            elif ns.what == "routes":
                data = RoutesList(routes=[
                    RouteInfo(name=r.name, pattern=r.pattern, params=r.param_names)
                    for r in iter_named_routes(load_urlpatterns(settings, root))
                ])
            else:
                raise ValueError(f"Unknown list target: {ns.what}")
            sys.stdout.write(_dumps(data.model_dump(mode="json")))
            return 0

    except AlexiUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
