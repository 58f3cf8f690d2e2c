from sqlalchemy import Column, String, Text, DateTime, Uuid

from library.db.base import BaseModel


class Comment(BaseModel):
    __tablename__ = "comments"

    # Без внешнего ключа: комментарии удалённой книги остаются в базе
    book_id = Column(Uuid(as_uuid=True), index=True, nullable=False)
    text = Column(Text, nullable=False)
    username = Column(String(100), nullable=False)
    timestamp = Column(DateTime(timezone=True), index=True, nullable=False)
