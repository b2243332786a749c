"""
View для рендеринга шаблона.

template_view() возвращает асинхронный view, который рендерит шаблон
с контекстом и параметрами маршрута. Любая ошибка шаблонизатора
превращается в ответ 500, а не в исключение наружу.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from ..template.errors import TemplateError
from ..template.loaders import get_template_registry
from ..template.protocols import TemplateLoader
from ..template.renderer import DEFAULT_MAX_DEPTH, TemplateRenderer

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


@dataclass(frozen=True)
class HttpResponse:
    """Минимальный ответ: тело, статус и заголовки."""
    body: str
    status: int = 200
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def template_view(
    template_name: str,
    context: Optional[Mapping[str, Any]] = None,
    loader: Optional[TemplateLoader] = None,
    *,
    content_type: str = HTML_CONTENT_TYPE,
    cache_control: str = "no-cache",
    debug: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Callable[[Any, Dict[str, str]], Awaitable[HttpResponse]]:
    """
    Создаёт view, рендерящий шаблон.

    Args:
        template_name: Имя шаблона для загрузчика
        context: Статический контекст шаблона
        loader: Загрузчик; по умолчанию — процессный реестр шаблонов
        content_type: Значение Content-Type успешного ответа
        cache_control: Значение Cache-Control успешного ответа
        debug: Показывать текст ошибки в ответе 500
        max_depth: Ограничение вложенности extends/include

    Параметры маршрута доступны в шаблоне как {{ params.<имя> }}.
    """
    static_context: Dict[str, Any] = dict(context) if context else {}

    async def view(request: Any, params: Dict[str, str]) -> HttpResponse:
        # Реестр берётся при каждом вызове, чтобы видеть его переинициализацию
        active_loader = loader if loader is not None else get_template_registry()
        renderer = TemplateRenderer(active_loader, max_depth=max_depth)
        try:
            body = await renderer.render(template_name, {**static_context, "params": dict(params)})
        except TemplateError as e:
            logger.error("Failed to render template %r: %s", template_name, e)
            message = f"Template error: {template_name}\n{e}" if debug else "Internal Server Error"
            return HttpResponse(
                body=message,
                status=500,
                headers={"Content-Type": TEXT_CONTENT_TYPE},
            )
        return HttpResponse(
            body=body,
            status=200,
            headers={"Content-Type": content_type, "Cache-Control": cache_control},
        )

    return view


__all__ = ["HttpResponse", "template_view", "HTML_CONTENT_TYPE", "TEXT_CONTENT_TYPE"]
