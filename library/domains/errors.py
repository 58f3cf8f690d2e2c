from contextlib import contextmanager
from typing import Any, Iterator, Optional

from library.core.errors import ConflictOrUnavailable, NotFound, ValidationError
from library.db.exceptions import RecordNotFound, SchemaViolation, StorageUnavailable


@contextmanager
def translate_store_errors(not_found: str = "Not found", record: Optional[Any] = None) -> Iterator[None]:
    """Перевод ошибок хранилища в доменные ошибки"""
    try:
        yield
    except RecordNotFound as e:
        raise NotFound(not_found) from e
    except SchemaViolation as e:
        raise ValidationError.from_mapping(e.errors, record=record) from e
    except StorageUnavailable as e:
        raise ConflictOrUnavailable(str(e)) from e
