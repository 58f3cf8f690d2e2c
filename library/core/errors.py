"""Доменные ошибки приложения.

Сервисы переводят ошибки хранилищ в три вида, которые видят
транспортные адаптеры: ``ValidationError``, ``NotFound`` и
``ConflictOrUnavailable``.
"""
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional


@dataclass(frozen=True)
class FieldError:
    """Ошибка конкретного поля"""
    field: str
    message: str


class LibraryError(Exception):
    """Базовая ошибка приложения"""


class ValidationError(LibraryError):
    """Некорректные или отсутствующие входные данные"""

    def __init__(self, errors: Iterable[FieldError], record: Optional[Any] = None):
        self.errors: List[FieldError] = list(errors)
        # Исходная запись (до слияния) при неудачном обновлении
        self.record = record
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return ", ".join(error.message for error in self.errors)

    @classmethod
    def from_mapping(cls, errors: Mapping[str, str], record: Optional[Any] = None) -> "ValidationError":
        return cls([FieldError(field, message) for field, message in errors.items()], record=record)


class NotFound(LibraryError):
    """Сущность не существует (включая синтаксически неверные идентификаторы)"""


class ConflictOrUnavailable(LibraryError):
    """Хранилище или транспорт не смогли выполнить операцию"""
