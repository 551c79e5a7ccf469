from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import catalog, grounding
from app.config import settings
from app.core.logging import RequestLoggingMiddleware, setup_logging


def create_app() -> FastAPI:
    setup_logging(json_format=settings.log_json, level=settings.log_level.upper())

    application = FastAPI(
        title=settings.app_name,
        version="0.1.0",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(RequestLoggingMiddleware)

    application.include_router(grounding.router, prefix="/api/v1/grounding", tags=["grounding"])
    application.include_router(catalog.router, prefix="/api/v1/catalog", tags=["catalog"])

    @application.get("/health")
    async def health_check() -> dict:
        return {"status": "ok", "environment": settings.environment}

    return application


app = create_app()
