from fastapi import APIRouter, Depends, HTTPException, status

from library.api.deps import get_identity_service
from library.core.auth import get_current_identity
from library.domains.identity.entities import Identity
from library.domains.identity.schemas import Token, UserCreate, UserLogin, UserResponse
from library.domains.identity.services import IdentityService

router = APIRouter(prefix="/api/user", tags=["users"])


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserCreate,
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Регистрация нового пользователя"""
    return await identity_service.register_user(user_data)


@router.post("/login", response_model=Token)
async def login(
    login_data: UserLogin,
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Вход пользователя"""
    token = await identity_service.login_user(login_data)

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {"access_token": token, "token_type": "bearer"}


@router.get("/me", response_model=UserResponse)
async def me(
    identity: Identity = Depends(get_current_identity),
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Профиль текущего пользователя"""
    user = await identity_service.get_user(identity.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user
