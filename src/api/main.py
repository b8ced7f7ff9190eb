"""FastAPI application entry point."""

import warnings
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import (
    clients_router,
    entries_router,
    health_router,
    visits_router,
    workload_router,
)
from core import config


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup: mappings and request logs need the database
    if not config.DB_PATH.exists():
        warnings.warn(f"Database not found at {config.DB_PATH}; run src/scripts/init_db.py")

    yield


app = FastAPI(
    title="Pet Sitting Schedule API",
    description="Classifies calendar entries, measures workload, generates multi-visit bookings and suggests clients",
    version=config.API_VERSION,
    debug=config.API_DEBUG,
    lifespan=lifespan,
)

# CORS middleware (for development)
if config.API_DEBUG:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# Global exception handler for unexpected errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with standard error format."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code=ErrorCodes.INTERNAL_ERROR,
            details=[],
        ).model_dump(),
    )


# Include routers
app.include_router(health_router)
app.include_router(entries_router)
app.include_router(workload_router)
app.include_router(visits_router)
app.include_router(clients_router)


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        reload=config.API_DEBUG,
    )
