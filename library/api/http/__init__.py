from library.api.http.health import router as health_router
from library.api.http.users import router as users_router
from library.api.http.books import router as books_router

__all__ = [
    "health_router",
    "users_router",
    "books_router"
]
