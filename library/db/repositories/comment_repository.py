from datetime import datetime, timezone
from typing import List

from sqlalchemy import select

from library.db.exceptions import RecordNotFound
from library.db.models.comment import Comment as CommentModel
from library.db.repositories.base import CommentStore, SqlRepository, check_comment_schema, parse_id
from library.domains.comments.entities import Comment


class CommentRepository(SqlRepository, CommentStore):
    """Репозиторий для работы с комментариями"""

    async def add(self, book_id: str, text: str, username: str) -> Comment:
        """Сохранение нового комментария"""
        check_comment_schema(book_id, text, username)
        db_comment = CommentModel(
            book_id=parse_id(book_id),
            text=text.strip(),
            username=username,
            timestamp=datetime.now(timezone.utc)
        )

        async with self.session() as session:
            session.add(db_comment)
            await session.commit()
            await session.refresh(db_comment)
            return self._to_domain(db_comment)

    async def list_by_book(self, book_id: str) -> List[Comment]:
        """Получение комментариев книги по возрастанию времени"""
        try:
            key = parse_id(book_id)
        except RecordNotFound:
            return []

        async with self.session() as session:
            result = await session.execute(
                select(CommentModel)
                .where(CommentModel.book_id == key)
                .order_by(CommentModel.timestamp.asc())
            )
            return [self._to_domain(comment) for comment in result.scalars().all()]

    def _to_domain(self, db_comment: CommentModel) -> Comment:
        """Преобразование модели БД в доменную сущность"""
        timestamp = db_comment.timestamp
        # SQLite не хранит часовой пояс
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return Comment(
            id=str(db_comment.id),
            book_id=str(db_comment.book_id),
            text=db_comment.text,
            username=db_comment.username,
            timestamp=timestamp
        )
