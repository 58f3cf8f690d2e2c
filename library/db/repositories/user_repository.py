from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from library.db.exceptions import DuplicateRecord, RecordNotFound
from library.db.models.user import User as UserModel
from library.db.repositories.base import SqlRepository, UserStore, parse_id
from library.domains.identity.entities import User


class UserRepository(SqlRepository, UserStore):
    """Репозиторий для работы с пользователями"""

    async def create(self, user: User) -> User:
        """Создание нового пользователя"""
        db_user = UserModel(
            id=parse_id(user.id),
            username=user.username,
            email=user.email,
            password_hash=user.password_hash
        )

        async with self.session() as session:
            session.add(db_user)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise DuplicateRecord("User with this username already exists")
            await session.refresh(db_user)
            return self._to_domain(db_user)

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Получение пользователя по ID"""
        try:
            key = parse_id(user_id)
        except RecordNotFound:
            return None
        async with self.session() as session:
            db_user = await session.get(UserModel, key)
            return self._to_domain(db_user) if db_user else None

    async def get_by_username(self, username: str) -> Optional[User]:
        """Получение пользователя по username"""
        async with self.session() as session:
            result = await session.execute(
                select(UserModel).where(UserModel.username == username)
            )
            db_user = result.scalar_one_or_none()
            return self._to_domain(db_user) if db_user else None

    def _to_domain(self, db_user: UserModel) -> User:
        """Преобразование модели БД в доменную сущность"""
        return User(
            id=str(db_user.id),
            username=db_user.username,
            email=db_user.email,
            password_hash=db_user.password_hash,
            created_at=db_user.created_at
        )
