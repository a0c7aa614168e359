from fastapi import APIRouter

from chat_proxy.config import settings


router = APIRouter()


@router.get("/health")
async def health():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "configured": settings.is_configured(),
        "model": settings.openai_model,
    }
