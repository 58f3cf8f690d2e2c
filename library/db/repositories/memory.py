"""In-memory хранилища с тем же контрактом, что и у репозиториев SQLAlchemy.

Используются бэкендом ``memory`` и тестами. Между чтением и записью нет
точек ожидания, поэтому операции атомарны в пределах цикла событий.
"""
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from library.db.exceptions import DuplicateRecord, RecordNotFound
from library.db.repositories.base import (
    BookStore, CommentStore, UserStore, check_book_schema, check_comment_schema, parse_id
)
from library.domains.books.entities import Book
from library.domains.comments.entities import Comment
from library.domains.identity.entities import User


class InMemoryBookStore(BookStore):

    def __init__(self) -> None:
        self._books: Dict[str, Book] = {}

    def _key(self, book_id: str) -> str:
        key = str(parse_id(book_id))
        if key not in self._books:
            raise RecordNotFound(f"Book {book_id} not found")
        return key

    async def create(self, data: Mapping[str, Any]) -> Book:
        check_book_schema(data)
        book = Book(id=str(uuid.uuid4()), **data)
        self._books[book.id] = book
        return replace(book)

    async def get_by_id(self, book_id: str) -> Book:
        return replace(self._books[self._key(book_id)])

    async def list(self) -> List[Book]:
        return [replace(book) for book in self._books.values()]

    async def update(self, book_id: str, changes: Mapping[str, Any]) -> Book:
        key = self._key(book_id)
        check_book_schema(changes, partial=True)
        self._books[key] = replace(self._books[key], **changes)
        return replace(self._books[key])

    async def delete(self, book_id: str) -> bool:
        del self._books[self._key(book_id)]
        return True

    async def increment_view_count(self, book_id: str, delta: int = 1) -> int:
        book = self._books[self._key(book_id)]
        book.view_count += delta
        return book.view_count


class InMemoryCommentStore(CommentStore):

    def __init__(self) -> None:
        self._comments: Dict[str, List[Comment]] = {}

    async def add(self, book_id: str, text: str, username: str) -> Comment:
        check_comment_schema(book_id, text, username)
        key = str(parse_id(book_id))
        comments = self._comments.setdefault(key, [])
        timestamp = datetime.now(timezone.utc)
        # время не убывает даже при грубом разрешении часов
        if comments and comments[-1].timestamp > timestamp:
            timestamp = comments[-1].timestamp
        comment = Comment(
            id=str(uuid.uuid4()),
            book_id=key,
            text=text.strip(),
            username=username,
            timestamp=timestamp
        )
        comments.append(comment)
        return comment

    async def list_by_book(self, book_id: str) -> List[Comment]:
        try:
            key = str(parse_id(book_id))
        except RecordNotFound:
            return []
        return sorted(self._comments.get(key, []), key=lambda comment: comment.timestamp)


class InMemoryUserStore(UserStore):

    def __init__(self) -> None:
        self._users: Dict[str, User] = {}

    async def create(self, user: User) -> User:
        if await self.get_by_username(user.username) is not None:
            raise DuplicateRecord("User with this username already exists")
        self._users[user.id] = user
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    async def get_by_username(self, username: str) -> Optional[User]:
        return next((user for user in self._users.values() if user.username == username), None)
