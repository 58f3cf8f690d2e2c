"""Контейнер зависимостей приложения.

Собирает хранилища, сервисы и канал комментариев по настройкам и
хранится в ``app.state.container``.
"""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from library.core.config import Settings
from library.core.db import build_engine, build_session_factory, create_tables
from library.db.repositories import (
    BookRepository, BookStore, CommentRepository, CommentStore, InMemoryBookStore,
    InMemoryCommentStore, InMemoryUserStore, UserRepository, UserStore
)
from library.domains.books.services import BookService
from library.domains.comments.channel import BroadcastChannel
from library.domains.identity.services import IdentityService

logger = logging.getLogger(__name__)


class Container:

    def __init__(
        self,
        book_store: BookStore,
        comment_store: CommentStore,
        user_store: UserStore,
        upload_dir: str = "uploads",
        max_upload_size: int = 50 * 1024 * 1024,
        engine: Optional[AsyncEngine] = None
    ):
        self.book_store = book_store
        self.comment_store = comment_store
        self.user_store = user_store
        self.engine = engine

        self.book_service = BookService(book_store, upload_dir=upload_dir, max_upload_size=max_upload_size)
        self.identity_service = IdentityService(user_store)
        self.channel = BroadcastChannel(comment_store, book_store)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Container":
        """Сборка контейнера для выбранного бэкенда хранения"""
        if settings.storage_backend == "memory":
            logger.info("Using in-memory storage")
            return cls(
                InMemoryBookStore(),
                InMemoryCommentStore(),
                InMemoryUserStore(),
                upload_dir=settings.upload_dir,
                max_upload_size=settings.max_upload_size
            )

        engine = build_engine(settings.database_url, echo=settings.echo_sql)
        session_factory = build_session_factory(engine)
        return cls(
            BookRepository(session_factory),
            CommentRepository(session_factory),
            UserRepository(session_factory),
            upload_dir=settings.upload_dir,
            max_upload_size=settings.max_upload_size,
            engine=engine
        )

    async def startup(self) -> None:
        if self.engine is not None:
            await create_tables(self.engine)
            logger.info("Database tables are ready")

    async def shutdown(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
