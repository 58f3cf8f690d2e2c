from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CommentResponse(BaseModel):
    """Схема комментария для ответа и рассылки"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    book_id: str
    text: str
    username: str
    timestamp: datetime

    def payload(self) -> dict:
        """JSON-совместимое представление для отправки клиентам"""
        return self.model_dump(mode="json", by_alias=True)


class NewComment(BaseModel):
    """Данные события "new comment" от клиента"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    book_id: Optional[str] = None
    text: Optional[str] = None
    username: Optional[str] = None
