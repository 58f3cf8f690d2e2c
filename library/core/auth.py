from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from library.api.deps import get_identity_service
from library.domains.identity.entities import Identity
from library.domains.identity.services import IdentityService

security = HTTPBearer(auto_error=False)


async def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    identity_service: IdentityService = Depends(get_identity_service)
) -> Identity:
    """Контекст пользователя; без токена - анонимный"""
    token = credentials.credentials if credentials else None
    return await identity_service.resolve_identity(token)


async def get_current_identity(identity: Identity = Depends(get_optional_identity)) -> Identity:
    """Зависимость для операций, требующих входа"""
    if not identity.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity
