"""
API Application Entry Point

Defines the main FastAPI application with middleware, route
configuration, and lifecycle management.

Design Considerations:
- CORS with credentials so the session cookie reaches the API
- Engine errors mapped to HTTP statuses by registered handlers
- Structured route organization
"""

import logging
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware

from api.config import APISettings, get_settings, EnvironmentType
from api.services.mailbox_service import MailboxService, get_engine, get_mailbox_service
from api.utils.error_handlers import add_exception_handlers
from api.routes import auth, emails, prompts, chat


def configure_logging(settings: APISettings) -> None:
    """Configure root logging at the level named by ``settings.LOG_LEVEL``."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# Configure logging
configure_logging(get_settings())
logger = logging.getLogger("api")


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application instance.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.API_VERSION,
        docs_url="/docs" if settings.ENVIRONMENT != EnvironmentType.PRODUCTION else None,
        redoc_url="/redoc" if settings.ENVIRONMENT != EnvironmentType.PRODUCTION else None,
        debug=settings.DEBUG
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=settings.CORS_METHODS,
        allow_headers=["*"],
    )

    # Add exception handlers
    add_exception_handlers(app)

    # Include routers
    app.include_router(auth.router)
    app.include_router(emails.router)
    app.include_router(prompts.router)
    app.include_router(chat.router)

    @app.on_event("startup")
    async def startup_event():
        """Load the dataset and build the engine before serving requests."""
        engine = get_engine()
        logger.info(f"API service starting up with {len(engine.dataset.emails)} emails loaded")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Perform cleanup tasks on application shutdown."""
        logger.info("API service shutting down")

    logger.info(f"Application initialized in {settings.ENVIRONMENT.value} environment")
    return app


# Create application instance
app = create_application()


@app.get("/api/", tags=["Monitoring"])
async def root():
    """API banner."""
    return {"message": "Email Brain API - FastAPI + Groq"}


@app.get("/health", tags=["Monitoring"])
async def health_check(mailbox: MailboxService = Depends(get_mailbox_service)):
    """API health check endpoint with text-generation metrics."""
    return {"status": "healthy", "model_metrics": mailbox.model_metrics()}
