# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Cadastro API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.auth import routes as auth_routes
from app.config import settings
from app.exceptions import (
    CadastroException,
    cadastro_exception_handler,
    validation_exception_handler,
)
from app.routers import clients, contacts, health, reports
from app.routers.health import API_VERSION
from core.services.storage_service import ASSETS_DIR
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)



@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the configuration the app starts with."""
    logger.info(f"Starting Cadastro API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(f"Client photos bucket: {settings.CLIENTS_BUCKET}")

    yield

    logger.info("Shutting down Cadastro API")


# Create FastAPI application
app = FastAPI(
    title="Cadastro API",
    description="""
## Clients and Contacts Registry

Each user keeps their own clients (with photo) and the contacts of each client.

### How It Works

1. **Sign in** - `POST /api/v1/auth/login` returns a bearer token
2. **Register clients** - multipart `POST /api/v1/clients` with an optional photo
3. **Add contacts** - `POST /api/v1/contacts` for one of your clients
4. **Report** - `GET /api/v1/reports/print` or `/reports/export.pdf`

Mutating endpoints take a `confirm` flag (the answer to the confirmation
prompt) and return the prompts that were shown.
""",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Sign in, sign up and token checks",
        },
        {
            "name": "Clients",
            "description": "Client list, forms, avatars and PDF export",
        },
        {
            "name": "Contacts",
            "description": "Contacts grouped by client, forms and PDF export",
        },
        {
            "name": "Reports",
            "description": "Clients and contacts report",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(CadastroException)
async def handle_cadastro_exception(request: Request, exc: CadastroException):
    """Handle custom Cadastro exceptions."""
    return await cadastro_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError):
    return await validation_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_supabase_error(request: Request, exc: SupabaseClientError):
    """Database/storage failures that no service translated."""
    logger.error(f"Supabase error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=502,
        content={
            "detail": exc.message,
            "code": exc.code,
            "suggestion": exc.suggestion,
        }
    )


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Static Assets
# =============================================================================

# Placeholder avatar, referenced as /assets/avatar.svg
app.mount("/assets", StaticFiles(directory=str(ASSETS_DIR)), name="assets")


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Client endpoints
app.include_router(
    clients.router,
    prefix="/api/v1/clients",
    tags=["Clients"]
)

# Contact endpoints
app.include_router(
    contacts.router,
    prefix="/api/v1/contacts",
    tags=["Contacts"]
)

# Report endpoints
app.include_router(
    reports.router,
    prefix="/api/v1/reports",
    tags=["Reports"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Cadastro API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/api/v1/health",
    }


# =============================================================================
# Runner
# =============================================================================

def run() -> None:
    """Serve the app with uvicorn on API_HOST:API_PORT (reload when DEBUG)."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
