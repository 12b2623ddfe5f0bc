from fastapi import FastAPI

from audionotes.api.v1.routes import router as api_router


def register_routers(app: FastAPI) -> None:
    app.include_router(api_router, prefix="/api")
