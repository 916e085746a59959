from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eduregistry.app import App
from eduregistry.config import Config
from eduregistry.errors import CounterError, UserError
from eduregistry.web.error_handlers import counter_error_handler, general_exception_handler, user_error_handler
from eduregistry.web.openapi import set_custom_openapi
from eduregistry.web.routers import (
    admin_router,
    auth_router,
    countries_router,
    individuals_router,
    parents_router,
    schools_router,
    students_router,
)


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        # Store app instance and config in app state
        app.state.app = app_instance
        app.state.config = config
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="EduRegistry API",
        lifespan=lifespan,
        openapi_tags=[],  # Tags will be added by custom OpenAPI function
    )

    # Add CORS middleware for frontend development
    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Health check endpoint (at root level, not versioned)
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    # API v1 routes
    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(countries_router, prefix="/api/v1")
    app.include_router(schools_router, prefix="/api/v1")
    app.include_router(students_router, prefix="/api/v1")
    app.include_router(individuals_router, prefix="/api/v1")
    app.include_router(parents_router, prefix="/api/v1")
    app.include_router(admin_router, prefix="/api/v1")

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(CounterError, counter_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
