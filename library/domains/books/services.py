import asyncio
import logging
import uuid
from pathlib import Path
from typing import List, Tuple

from library.core.errors import NotFound, ValidationError
from library.db.exceptions import StoreError
from library.db.repositories.base import BookStore
from library.domains.books.entities import (
    API_REQUIRED_FIELDS, FORM_REQUIRED_FIELDS, Book, validate_book_fields
)
from library.domains.books.schemas import BookCreate, BookPatch
from library.domains.errors import translate_store_errors

logger = logging.getLogger(__name__)

BOOK_NOT_FOUND = "Book not found"
ALLOWED_BOOK_EXTENSIONS = (".pdf", ".epub", ".mobi", ".txt", ".fb2")


class BookService:
    """Сервис для работы с книгами

    Единственное место, где проверяются доменные правила и ошибки
    хранилища переводятся в ``ValidationError`` / ``NotFound`` /
    ``ConflictOrUnavailable``.
    """

    def __init__(
        self,
        book_store: BookStore,
        upload_dir: str = "uploads",
        max_upload_size: int = 50 * 1024 * 1024
    ):
        self.book_store = book_store
        self.upload_dir = Path(upload_dir)
        self.max_upload_size = max_upload_size

    @staticmethod
    def _required(strict: bool) -> Tuple[str, ...]:
        return FORM_REQUIRED_FIELDS if strict else API_REQUIRED_FIELDS

    async def list_books(self) -> List[Book]:
        """Получение списка книг"""
        with translate_store_errors(BOOK_NOT_FOUND):
            return await self.book_store.list()

    async def create_book(self, data: BookCreate, strict: bool = False) -> Book:
        """Создание новой книги

        strict=True - вариант веб-формы: обязательны название, описание и авторы.
        """
        values = data.model_dump()
        errors = validate_book_fields(values, self._required(strict))
        if errors:
            raise ValidationError(errors)

        with translate_store_errors(BOOK_NOT_FOUND):
            book = await self.book_store.create(values)

        logger.info(f"Book {book.id} created: {book.title!r}")
        return book

    async def get_book(self, book_id: str) -> Book:
        """Получение книги по ID без побочных эффектов"""
        with translate_store_errors(BOOK_NOT_FOUND):
            return await self.book_store.get_by_id(book_id)

    async def view_book(self, book_id: str) -> Book:
        """Просмотр книги: получение и увеличение счётчика просмотров на 1"""
        book = await self.get_book(book_id)

        try:
            book.view_count = await self.book_store.increment_view_count(book.id)
        except StoreError as e:
            # Ошибка счётчика не мешает отдать книгу
            logger.warning(f"Failed to increment view count of book {book.id}: {e}")

        return book

    async def update_book(self, book_id: str, patch: BookPatch, strict: bool = False) -> Book:
        """Частичное обновление книги

        При ошибке проверки ValidationError содержит исходную запись
        (``error.record``), чтобы показать её рядом с отклонёнными правками.
        """
        existing = await self.get_book(book_id)
        changes = patch.changes()

        errors = validate_book_fields(existing.merged(changes), self._required(strict))
        if errors:
            raise ValidationError(errors, record=existing)

        with translate_store_errors(BOOK_NOT_FOUND, record=existing):
            book = await self.book_store.update(book_id, changes)

        logger.info(f"Book {book.id} updated: {sorted(changes)}")
        return book

    async def delete_book(self, book_id: str) -> None:
        """Удаление книги (комментарии книги не удаляются)"""
        with translate_store_errors(BOOK_NOT_FOUND):
            await self.book_store.delete(book_id)
        logger.info(f"Book {book_id} deleted")

    async def attach_file(self, book_id: str, filename: str, content: bytes) -> Book:
        """Сохранение файла книги в каталоге загрузок"""
        await self.get_book(book_id)

        extension = Path(filename or "").suffix.lower()
        if extension not in ALLOWED_BOOK_EXTENSIONS:
            raise ValidationError.from_mapping({
                "file": f"Only {', '.join(ALLOWED_BOOK_EXTENSIONS)} files allowed"
            })
        if len(content) > self.max_upload_size:
            raise ValidationError.from_mapping({
                "file": f"File is larger than {self.max_upload_size} bytes"
            })

        stored_name = f"book-{uuid.uuid4().hex}{extension}"
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread((self.upload_dir / stored_name).write_bytes, content)

        with translate_store_errors(BOOK_NOT_FOUND):
            book = await self.book_store.update(book_id, {
                "file_book": stored_name,
                "file_name": Path(filename).name
            })

        logger.info(f"File {stored_name} attached to book {book.id}")
        return book

    async def get_file(self, book_id: str) -> Tuple[Path, str]:
        """Путь к файлу книги и имя для скачивания"""
        book = await self.get_book(book_id)
        if not book.file_book:
            raise NotFound("Book file not found")

        path = self.upload_dir / book.file_book
        if not path.exists():
            raise NotFound("File not found on server")

        return path, book.file_name or book.file_book
