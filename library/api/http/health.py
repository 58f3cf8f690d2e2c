from fastapi import APIRouter

from library.core.config import get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    """Проверка работоспособности"""
    settings = get_settings()
    return {"status": "healthy", "service": settings.app_name, "storage": settings.storage_backend}
