"""
Общий предок ожидаемых ошибок Alexi.

CLI печатает такие ошибки одной строкой в stderr и завершается с кодом 2.
Шаблонизатор, маршрутизатор и загрузка alexi.yaml выводят свои ошибки
от AlexiUserError; всё остальное считается дефектом кода и
поднимается с полным трейсбеком.
"""

from __future__ import annotations


class AlexiUserError(Exception):
    """
    Ошибка, которую исправляет автор проекта, а не код Alexi.

    Примеры: синтаксис шаблона, отсутствующий шаблон, неизвестное
    имя маршрута, недостающий параметр reverse, неверный alexi.yaml.
    """


__all__ = ["AlexiUserError"]
