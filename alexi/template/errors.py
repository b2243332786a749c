"""
Иерархия ошибок шаблонизатора.

Все ошибки наследуются от AlexiUserError: это проблемы в шаблонах
или их расположении, которые пользователь может исправить сам.
"""

from __future__ import annotations

from typing import Optional, Sequence, TYPE_CHECKING

from ..errors import AlexiUserError

if TYPE_CHECKING:
    from .tokens import Token


class TemplateError(AlexiUserError):
    """Базовая ошибка шаблонизатора."""
    pass


class TemplateParseError(TemplateError):
    """
    Ошибка синтаксического анализа шаблона.

    Если известен токен, на котором произошла ошибка, его позиция
    добавляется в сообщение для точной диагностики.
    """

    def __init__(self, message: str, token: Optional[Token] = None):
        if token is not None:
            message = f"{message} at {token.line}:{token.column}"
        super().__init__(message)
        self.token = token
        self.line = token.line if token is not None else None
        self.column = token.column if token is not None else None


class TemplateRenderError(TemplateError):
    """Ошибка рендеринга (неверное размещение extends, слишком глубокая вложенность)."""

    def __init__(self, message: str, template_name: str = ""):
        if template_name:
            message = f"{message} (template: {template_name!r})"
        super().__init__(message)
        self.template_name = template_name


class TemplateNotFoundError(TemplateError):
    """
    Шаблон не найден ни одним загрузчиком.

    Для файловых загрузчиков в сообщение попадает список
    просмотренных директорий.
    """

    def __init__(self, name: str, dirs: Optional[Sequence[str]] = None):
        extra = f" (searched: {', '.join(dirs)})" if dirs else ""
        super().__init__(f'Template not found: "{name}"{extra}')
        self.name = name
        self.dirs = list(dirs) if dirs else []


__all__ = [
    "TemplateError",
    "TemplateParseError",
    "TemplateRenderError",
    "TemplateNotFoundError",
]
