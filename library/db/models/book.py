from sqlalchemy import Column, String, Text, Integer, Boolean

from library.db.base import BaseModel


class Book(BaseModel):
    __tablename__ = "books"

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    authors = Column(String(255), nullable=True)
    favorite = Column(Boolean, nullable=False, default=False)
    view_count = Column(Integer, nullable=False, default=0)
    file_cover = Column(String(512), nullable=True)
    file_name = Column(String(512), nullable=True)
    file_book = Column(String(512), nullable=True)
