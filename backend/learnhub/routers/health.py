"""
Health check router for LearnHub.
"""

from typing import Any, Dict
from fastapi import APIRouter, Depends

from learnhub.core.config import settings
from learnhub.core.database import check_database_connection
from learnhub.storage import DatabaseStorage, Storage, get_storage


router = APIRouter()


@router.get("/health")
async def health(storage: Storage = Depends(get_storage)) -> Dict[str, Any]:
    """
    Report service status and which storage adapter is serving requests.
    """
    data = {
        "status": "healthy",
        "app_name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "storage": "database" if isinstance(storage, DatabaseStorage) else "memory",
    }
    if isinstance(storage, DatabaseStorage):
        if not check_database_connection():
            data["status"] = "degraded"
    return data
