"""Канал рассылки комментариев в реальном времени.

Каждая книга - отдельная "комната" подписчиков. Новый комментарий
сначала сохраняется, затем рассылается всем подписчикам книги.
"""
import logging
import uuid
from typing import Dict, List, Optional, Protocol, Set

from library.core.errors import LibraryError, ValidationError
from library.db.repositories.base import BookStore, CommentStore
from library.domains.comments.entities import Comment, validate_comment
from library.domains.comments.schemas import CommentResponse
from library.domains.errors import translate_store_errors

logger = logging.getLogger(__name__)

HISTORY_LOADED = "history loaded"
COMMENT_RECEIVED = "comment received"
COMMENT_ERROR = "comment error"


class HandleClosed(Exception):
    """Подписчик уже отключён"""


class Handle(Protocol):
    """Подключённый клиент.

    ``deliver`` не должен ждать отправки: события ставятся в очередь
    клиента, иначе порядок рассылки между комментариями нарушится.
    """

    def deliver(self, event: str, data) -> None: ...


def room_key(book_id) -> str:
    """Ключ комнаты: канонический UUID, если идентификатор разбирается"""
    try:
        return str(uuid.UUID(str(book_id)))
    except ValueError:
        return str(book_id)


class BroadcastChannel:
    """Комнаты подписчиков по книгам и рассылка комментариев"""

    def __init__(self, comment_store: CommentStore, book_store: Optional[BookStore] = None):
        self.comment_store = comment_store
        self.book_store = book_store
        # {book_id: {handle}}
        self._rooms: Dict[str, Set[Handle]] = {}
        # {handle: {book_id}} - для отключения одним вызовом
        self._memberships: Dict[Handle, Set[str]] = {}

    def subscribers(self, book_id: str) -> Set[Handle]:
        """Снимок текущих подписчиков книги"""
        return set(self._rooms.get(room_key(book_id), ()))

    def rooms_of(self, handle: Handle) -> Set[str]:
        return set(self._memberships.get(handle, ()))

    async def join(self, handle: Handle, book_id: str) -> List[Comment]:
        """Подписка на комментарии книги; повторная подписка ничего не меняет.

        Возвращает историю комментариев и отправляет её только этому клиенту.
        """
        if not book_id:
            raise ValidationError.from_mapping({"book_id": "Book id is required"})

        key = room_key(book_id)
        already_joined = key in self.rooms_of(handle)
        self._rooms.setdefault(key, set()).add(handle)
        self._memberships.setdefault(handle, set()).add(key)

        try:
            history = await self.history(key)
        except LibraryError:
            if not already_joined:
                self.leave(handle, key)
            raise

        logger.info(f"Handle {id(handle):x} joined room {key}")
        self._send(handle, HISTORY_LOADED, [CommentResponse.model_validate(c).payload() for c in history])
        return history

    async def history(self, book_id: str) -> List[Comment]:
        """Сохранённые комментарии книги по возрастанию времени"""
        with translate_store_errors("Book not found"):
            return await self.comment_store.list_by_book(book_id)

    def leave(self, handle: Handle, book_id: str) -> None:
        """Отписка от комментариев книги"""
        book_id = room_key(book_id)
        room = self._rooms.get(book_id)
        if room is not None:
            room.discard(handle)
            if not room:
                del self._rooms[book_id]

        books = self._memberships.get(handle)
        if books is not None:
            books.discard(book_id)
            if not books:
                del self._memberships[handle]

    def disconnect(self, handle: Handle) -> None:
        """Отключение клиента: снимаются все его подписки"""
        for book_id in self.rooms_of(handle):
            self.leave(handle, book_id)
        logger.info(f"Handle {id(handle):x} disconnected")

    async def post(self, book_id: str, text: str, username: str) -> Comment:
        """Сохранение комментария и рассылка всем подписчикам книги"""
        errors = validate_comment(book_id, text, username)
        if errors:
            raise ValidationError(errors)

        if self.book_store is not None:
            with translate_store_errors("Book not found"):
                await self.book_store.get_by_id(book_id)

        with translate_store_errors("Book not found"):
            comment = await self.comment_store.add(book_id, text, username)

        # Рассылка без точек ожидания: порядок совпадает с порядком сохранения
        payload = CommentResponse.model_validate(comment).payload()
        handles = self.subscribers(comment.book_id)
        for handle in handles:
            self._send(handle, COMMENT_RECEIVED, payload)

        logger.info(f"Comment {comment.id} by {username} broadcast to {len(handles)} subscriber(s) of {book_id}")
        return comment

    def _send(self, handle: Handle, event: str, data) -> None:
        try:
            handle.deliver(event, data)
        except HandleClosed:
            logger.debug(f"Dropping delivery to closed handle {id(handle):x}")
            self.disconnect(handle)
