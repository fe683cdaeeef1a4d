"""
Health Check Router
Liveness and storage connectivity endpoints
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from spendwise.core.config import settings
from spendwise.db.store import KeyValueStore, get_store

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check():
    """
    Health check endpoint.
    Returns API status.
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/status")
def services_status(store: KeyValueStore = Depends(get_store)):
    """
    Check connectivity of the storage backend and whether chat is configured.
    """
    status = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {}
    }

    storage_status = {
        "connected": False,
        "backend": store.name,
        "error": None
    }
    try:
        storage_status["connected"] = store.ping()
        if not storage_status["connected"]:
            storage_status["error"] = "Storage backend did not respond"
    except Exception as e:
        storage_status["error"] = str(e)
        logger.error(f"Storage check failed: {str(e)}")
    if store.name == "dynamo":
        storage_status["table"] = settings.DYNAMO_TABLE
        storage_status["region"] = settings.DYNAMO_REGION

    status["services"]["storage"] = storage_status
    status["services"]["chat"] = {
        "configured": bool(settings.OPENAI_API_KEY),
        "model": settings.OPENAI_MODEL,
    }

    status["overall_status"] = "healthy" if storage_status["connected"] else "degraded"
    return status
