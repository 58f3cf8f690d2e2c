"""Ошибки уровня хранилищ.

Не покидают сервисный слой: сервисы переводят их в ``library.core.errors``.
"""
from typing import Mapping


class StoreError(Exception):
    """Базовая ошибка хранилища"""


class RecordNotFound(StoreError):
    """Запись не найдена (или идентификатор имеет неверный формат)"""


class SchemaViolation(StoreError):
    """Запись нарушает схему хранилища"""

    def __init__(self, errors: Mapping[str, str]):
        self.errors = dict(errors)
        super().__init__(", ".join(self.errors.values()))


class DuplicateRecord(StoreError):
    """Нарушено ограничение уникальности"""


class StorageUnavailable(StoreError):
    """Хранилище не смогло выполнить операцию"""
