from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from library.core.errors import FieldError


@dataclass(frozen=True)
class Comment:
    """Сущность комментария к книге"""
    id: str
    book_id: str
    text: str
    username: str
    timestamp: datetime


def validate_comment(book_id: Optional[str], text: Optional[str], username: Optional[str]) -> List[FieldError]:
    """Проверка полей комментария (текст проверяется после обрезки пробелов)"""
    errors = []
    if not isinstance(book_id, str) or not book_id:
        errors.append(FieldError("book_id", "Book id is required"))
    if not isinstance(text, str) or not text.strip():
        errors.append(FieldError("text", "Text is required"))
    if not isinstance(username, str) or not username:
        errors.append(FieldError("username", "Username is required"))
    return errors
