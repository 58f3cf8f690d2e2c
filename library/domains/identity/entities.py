import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from library.core.security import get_password_hash, verify_password

ANONYMOUS_USERNAME = "Anonymous"


class User:
    """Сущность пользователя домена Identity"""

    def __init__(
        self,
        id: str,
        username: str,
        password_hash: str,
        email: Optional[str] = None,
        created_at: Optional[datetime] = None
    ):
        self.id = id
        self.username = username
        self.password_hash = password_hash
        self.email = email
        self.created_at = created_at or datetime.now(timezone.utc)

    def authenticate(self, password: str) -> bool:
        """Проверка пароля пользователя"""
        return verify_password(password, self.password_hash)

    @classmethod
    def create_user(cls, username: str, password: str, email: Optional[str] = None) -> "User":
        """Создание нового пользователя с хешированием пароля"""
        return cls(
            id=str(uuid.uuid4()),
            username=username,
            password_hash=get_password_hash(password),
            email=email
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"User(id={self.id}, username={self.username})"


@dataclass(frozen=True)
class Identity:
    """Явный контекст пользователя, передаваемый в вызовы сервисов"""
    username: str
    user_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @classmethod
    def anonymous(cls) -> "Identity":
        return cls(username=ANONYMOUS_USERNAME)

    @classmethod
    def for_user(cls, user: User) -> "Identity":
        return cls(username=user.username, user_id=user.id)
