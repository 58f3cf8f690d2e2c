from typing import Any, List, Mapping

from sqlalchemy import select, update, delete

from library.db.exceptions import RecordNotFound
from library.db.models.book import Book as BookModel
from library.db.repositories.base import BookStore, SqlRepository, check_book_schema, parse_id
from library.domains.books.entities import Book


class BookRepository(SqlRepository, BookStore):
    """Репозиторий для работы с книгами"""

    async def create(self, data: Mapping[str, Any]) -> Book:
        """Создание новой книги"""
        check_book_schema(data)
        db_book = BookModel(**data)

        async with self.session() as session:
            session.add(db_book)
            await session.commit()
            await session.refresh(db_book)
            return self._to_domain(db_book)

    async def get_by_id(self, book_id: str) -> Book:
        """Получение книги по ID"""
        key = parse_id(book_id)
        async with self.session() as session:
            db_book = await session.get(BookModel, key)
            if db_book is None:
                raise RecordNotFound(f"Book {book_id} not found")
            return self._to_domain(db_book)

    async def list(self) -> List[Book]:
        """Получение списка книг"""
        async with self.session() as session:
            result = await session.execute(select(BookModel).order_by(BookModel.created_at))
            return [self._to_domain(book) for book in result.scalars().all()]

    async def update(self, book_id: str, changes: Mapping[str, Any]) -> Book:
        """Частичное обновление книги: меняются только переданные поля"""
        key = parse_id(book_id)
        check_book_schema(changes, partial=True)

        async with self.session() as session:
            if changes:
                result = await session.execute(
                    update(BookModel).where(BookModel.id == key).values(**changes)
                )
                if result.rowcount == 0:
                    raise RecordNotFound(f"Book {book_id} not found")
                await session.commit()

            db_book = await session.get(BookModel, key, populate_existing=True)
            if db_book is None:
                raise RecordNotFound(f"Book {book_id} not found")
            return self._to_domain(db_book)

    async def delete(self, book_id: str) -> bool:
        """Удаление книги"""
        key = parse_id(book_id)
        async with self.session() as session:
            result = await session.execute(delete(BookModel).where(BookModel.id == key))
            await session.commit()
            if result.rowcount == 0:
                raise RecordNotFound(f"Book {book_id} not found")
            return True

    async def increment_view_count(self, book_id: str, delta: int = 1) -> int:
        """Атомарное увеличение счётчика просмотров на стороне базы"""
        key = parse_id(book_id)
        async with self.session() as session:
            result = await session.execute(
                update(BookModel)
                .where(BookModel.id == key)
                .values(view_count=BookModel.view_count + delta)
            )
            if result.rowcount == 0:
                await session.rollback()
                raise RecordNotFound(f"Book {book_id} not found")
            count = await session.scalar(select(BookModel.view_count).where(BookModel.id == key))
            await session.commit()
            return count

    def _to_domain(self, db_book: BookModel) -> Book:
        """Преобразование модели БД в доменную сущность"""
        return Book(
            id=str(db_book.id),
            title=db_book.title,
            description=db_book.description,
            authors=db_book.authors,
            favorite=bool(db_book.favorite),
            view_count=db_book.view_count or 0,
            file_cover=db_book.file_cover,
            file_name=db_book.file_name,
            file_book=db_book.file_book
        )
