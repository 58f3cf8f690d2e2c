"""Контракты хранилищ и общая часть SQL-реализаций.

Сервисы зависят только от абстрактных классов; конкретная реализация
(SQLAlchemy или in-memory) выбирается контейнером приложения.
"""
import logging
import uuid
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from library.db.exceptions import RecordNotFound, SchemaViolation, StorageUnavailable, StoreError
from library.domains.books.entities import BOOK_MUTABLE_FIELDS, Book
from library.domains.comments.entities import Comment, validate_comment
from library.domains.identity.entities import User

logger = logging.getLogger(__name__)


def parse_id(value: Any) -> uuid.UUID:
    """Разбор идентификатора; неверный формат считается отсутствующей записью"""
    try:
        return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        raise RecordNotFound(f"Malformed identifier: {value!r}")


def check_book_schema(values: Mapping[str, Any], partial: bool = False) -> None:
    """Проверка записи книги по схеме хранилища (partial - только переданные поля)"""
    errors = {}
    unknown = [name for name in values if name not in BOOK_MUTABLE_FIELDS]
    title = values.get("title")
    if (not partial or "title" in values) and (title is None or not str(title).strip()):
        errors["title"] = "Title is required"
    if "favorite" in values and not isinstance(values["favorite"], bool):
        errors["favorite"] = "Favorite must be true or false"
    for name in unknown:
        errors[name] = f"Unknown field: {name}"
    if errors:
        raise SchemaViolation(errors)


def check_comment_schema(book_id: Optional[str], text: Optional[str], username: Optional[str]) -> None:
    """Проверка записи комментария по схеме хранилища"""
    errors = validate_comment(book_id, text, username)
    if errors:
        raise SchemaViolation({error.field: error.message for error in errors})


class BookStore(ABC):
    """Хранилище книг"""

    @abstractmethod
    async def create(self, data: Mapping[str, Any]) -> Book: ...

    @abstractmethod
    async def get_by_id(self, book_id: str) -> Book: ...

    @abstractmethod
    async def list(self) -> List[Book]: ...

    @abstractmethod
    async def update(self, book_id: str, changes: Mapping[str, Any]) -> Book: ...

    @abstractmethod
    async def delete(self, book_id: str) -> bool: ...

    @abstractmethod
    async def increment_view_count(self, book_id: str, delta: int = 1) -> int:
        """Атомарное увеличение счётчика просмотров; возвращает новое значение"""


class CommentStore(ABC):
    """Хранилище комментариев"""

    @abstractmethod
    async def add(self, book_id: str, text: str, username: str) -> Comment: ...

    @abstractmethod
    async def list_by_book(self, book_id: str) -> List[Comment]:
        """Комментарии книги по возрастанию времени"""


class UserStore(ABC):
    """Хранилище пользователей"""

    @abstractmethod
    async def create(self, user: User) -> User: ...

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]: ...


class SqlRepository:
    """Общая часть репозиториев SQLAlchemy: одна сессия на вызов"""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            try:
                yield session
            except StoreError:
                await session.rollback()
                raise
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Storage error in {type(self).__name__}: {e}")
                raise StorageUnavailable(str(e)) from e
