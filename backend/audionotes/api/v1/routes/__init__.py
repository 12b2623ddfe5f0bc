from fastapi import APIRouter

from audionotes.api.v1.routes import health, recordings


router = APIRouter()

router.include_router(health.router, tags=["Health"])
router.include_router(recordings.router, tags=["Recordings"])
