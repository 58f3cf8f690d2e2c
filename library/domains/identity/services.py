import logging
from typing import Optional

from library.core.errors import ConflictOrUnavailable, ValidationError
from library.core.security import create_access_token, verify_token
from library.db.exceptions import DuplicateRecord, StoreError
from library.db.repositories.base import UserStore
from library.domains.identity.entities import Identity, User
from library.domains.identity.schemas import UserCreate, UserLogin

logger = logging.getLogger(__name__)


class IdentityService:
    """Сервис для регистрации, входа и определения пользователя по токену"""

    def __init__(self, user_store: UserStore):
        self.user_store = user_store

    async def register_user(self, user_data: UserCreate) -> User:
        """Регистрация нового пользователя"""
        try:
            if await self.user_store.get_by_username(user_data.username):
                raise ValidationError.from_mapping({"username": "Username already taken"})

            user = User.create_user(
                username=user_data.username,
                password=user_data.password,
                email=user_data.email
            )
            created = await self.user_store.create(user)
        except DuplicateRecord:
            raise ValidationError.from_mapping({"username": "Username already taken"})
        except StoreError as e:
            raise ConflictOrUnavailable(str(e)) from e

        logger.info(f"User {created.username} registered")
        return created

    async def authenticate_user(self, login_data: UserLogin) -> Optional[User]:
        """Аутентификация пользователя: None при неверном имени или пароле"""
        try:
            user = await self.user_store.get_by_username(login_data.username)
        except StoreError as e:
            raise ConflictOrUnavailable(str(e)) from e

        if not user or not user.authenticate(login_data.password):
            logger.info(f"Failed login attempt for {login_data.username}")
            return None

        return user

    async def login_user(self, login_data: UserLogin) -> Optional[str]:
        """Вход пользователя и создание JWT токена"""
        user = await self.authenticate_user(login_data)

        if not user:
            return None

        return create_access_token(data={"sub": user.id, "username": user.username})

    async def get_user_from_token(self, token: Optional[str]) -> Optional[User]:
        """Получение пользователя из JWT токена"""
        if not token:
            return None

        payload = verify_token(token)
        if not payload or not payload.get("sub"):
            return None

        return await self.get_user(payload["sub"])

    async def get_user(self, user_id: str) -> Optional[User]:
        """Получение пользователя по ID"""
        try:
            return await self.user_store.get_by_id(user_id)
        except StoreError as e:
            raise ConflictOrUnavailable(str(e)) from e

    async def resolve_identity(self, token: Optional[str]) -> Identity:
        """Контекст пользователя по токену; без действующего токена - анонимный"""
        user = await self.get_user_from_token(token)
        return Identity.for_user(user) if user else Identity.anonymous()
