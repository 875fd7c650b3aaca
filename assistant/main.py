"""ASGI entry point: `uvicorn assistant.main:app`.

create_app() only wires things together. The cache and services are built
in assistant.core.lifespan; error mapping lives in
assistant.core.exception_handlers.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from assistant.api.v1 import api_router
from assistant.core.config import get_settings
from assistant.core.exception_handlers import register_exception_handlers
from assistant.core.lifespan import create_lifespan


def create_app() -> FastAPI:
    """Build the application; settings are read here rather than at import."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    register_exception_handlers(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
