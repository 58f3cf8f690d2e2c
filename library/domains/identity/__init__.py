from library.domains.identity.entities import User, Identity, ANONYMOUS_USERNAME
from library.domains.identity.schemas import UserCreate, UserLogin, UserResponse, Token

__all__ = [
    "User", "Identity", "ANONYMOUS_USERNAME",
    "UserCreate", "UserLogin", "UserResponse", "Token"
]
