from fastapi import APIRouter

from audionotes.core.config.settings import settings

router = APIRouter()


@router.get("/health")
async def health():
    return {"status": "ok", "version": settings.API_VERSION}
