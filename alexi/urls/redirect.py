"""
Маркеры перенаправления.

View может вернуть redirect(...) вместо ответа; маршрутизатор на стороне
клиента или сервера распознаёт его через is_redirect_response().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RedirectResponse:
    """Запрос на переход к другому пути."""
    path: str
    permanent: bool = False

    @property
    def status(self) -> int:
        """HTTP-статус, соответствующий перенаправлению."""
        return 301 if self.permanent else 302


def redirect(path: str, permanent: bool = False) -> RedirectResponse:
    return RedirectResponse(path=path, permanent=permanent)


def is_redirect_response(value: Any) -> bool:
    return isinstance(value, RedirectResponse)


__all__ = ["RedirectResponse", "redirect", "is_redirect_response"]
