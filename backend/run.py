"""
Entry point for running the API with uvicorn.
"""

import os
import logging
import uvicorn

from audionotes import create_app
from audionotes.core.config.settings import settings
from migrations import run_migrations  # Import after logging is set up


logger = logging.getLogger(__name__)

# Create the FastAPI app (after logging is ready)
app = create_app()

if __name__ == "__main__":
    os.environ.setdefault("ALEMBIC_SKIP_FILECONFIG", "1")
    run_migrations(settings.DATABASE_URL_SYNC)

    port = settings.FASTAPI_RUN_PORT
    reload = os.environ.get("RELOAD", "False").lower() == "true"

    uvicorn.run(
        "run:app",
        host="0.0.0.0",
        port=port,
        reload=reload,
        reload_dirs=["./audionotes"],
        log_level=settings.LOG_LEVEL.lower(),
        log_config=None,  # loguru owns logging
        workers=int(os.environ.get("WORKERS", 1)),
        access_log=os.environ.get("ACCESS_LOG", "False").lower() == "true",
        proxy_headers=os.environ.get("PROXY_HEADERS", "False").lower() == "true",
    )
