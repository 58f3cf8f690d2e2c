from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Mapping, Optional, Sequence

from library.core.errors import FieldError

# Поля книги в порядке объявления; в этом порядке выводятся ошибки
BOOK_TEXT_FIELDS = ("title", "description", "authors")
BOOK_MUTABLE_FIELDS = (
    "title", "description", "authors", "favorite",
    "file_cover", "file_name", "file_book",
)

# Варианты проверки: API требует только название, веб-форма требует все поля
API_REQUIRED_FIELDS = ("title",)
FORM_REQUIRED_FIELDS = BOOK_TEXT_FIELDS


@dataclass
class Book:
    """Сущность книги"""
    id: str
    title: str
    description: Optional[str] = None
    authors: Optional[str] = None
    favorite: bool = False
    view_count: int = 0
    file_cover: Optional[str] = None
    file_name: Optional[str] = None
    file_book: Optional[str] = None

    def fields(self) -> Dict[str, Any]:
        """Изменяемые поля книги"""
        data = asdict(self)
        return {name: data[name] for name in BOOK_MUTABLE_FIELDS}

    def merged(self, changes: Mapping[str, Any]) -> Dict[str, Any]:
        """Результат слияния текущих полей с частичным обновлением"""
        return {**self.fields(), **changes}


def validate_book_fields(values: Mapping[str, Any], required: Sequence[str] = API_REQUIRED_FIELDS) -> List[FieldError]:
    """Проверка обязательных полей книги"""
    errors = []
    for field in BOOK_TEXT_FIELDS:
        if field not in required:
            continue
        value = values.get(field)
        if value is None or not str(value).strip():
            errors.append(FieldError(field, f"{field.capitalize()} is required"))
    return errors
