from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class BookBase(BaseModel):
    """Базовая схема книги"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class BookCreate(BookBase):
    """Схема для создания книги

    Обязательность полей проверяет сервис, чтобы собрать все ошибки сразу.
    """
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    authors: Optional[str] = None
    favorite: bool = False
    file_cover: Optional[str] = None
    file_name: Optional[str] = None


class BookPatch(BookBase):
    """Схема частичного обновления: только перечисленные поля, неизвестные отклоняются"""
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    authors: Optional[str] = None
    favorite: Optional[bool] = None
    file_cover: Optional[str] = None
    file_name: Optional[str] = None
    file_book: Optional[str] = None

    @field_validator("favorite")
    @classmethod
    def validate_favorite(cls, v):
        if v is None:
            raise ValueError("Favorite must be true or false")
        return v

    def changes(self) -> dict:
        """Только явно переданные поля"""
        return self.model_dump(exclude_unset=True)


class BookResponse(BookBase):
    """Схема для ответа с данными книги"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    authors: Optional[str] = None
    favorite: bool = False
    view_count: int = 0
    file_cover: Optional[str] = None
    file_name: Optional[str] = None
    file_book: Optional[str] = None
