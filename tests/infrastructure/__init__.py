"""
Общая тестовая инфраструктура.

Модули:
- file_utils: создание файлов и директорий
- cli_utils: запуск CLI в подпроцессе и разбор JSON-вывода
"""

from .file_utils import write
from .cli_utils import run_cli, jload

__all__ = ["write", "run_cli", "jload"]
