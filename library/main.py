import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from library.api.http import books_router, health_router, users_router
from library.api.http.errors import register_exception_handlers
from library.api.ws.comments import router as websocket_router
from library.container import Container
from library.core.config import Settings, get_settings


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    container = Container.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await container.startup()
        try:
            yield
        finally:
            await container.shutdown()

    app = FastAPI(
        title=settings.app_name,
        description="Библиотека книг с комментариями в реальном времени",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Подключаем роутеры
    app.include_router(health_router)
    app.include_router(users_router)
    app.include_router(books_router)
    app.include_router(websocket_router)

    @app.get("/")
    async def root():
        """Корневой эндпоинт"""
        return {
            "message": f"{settings.app_name} API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health"
        }

    return app


app = create_app()
