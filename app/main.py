#!/usr/bin/env python

import logging
from contextlib import asynccontextmanager
import httpx
from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.openapi.utils import get_openapi
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

# Configuration
from app.core.config import settings, check_configuration

# Services and Utilities
from app.api.dependencies import app_state
from app.services.search.image_search_service import ImageSearchService
from app.services.search.pexels_client import PexelsClient
from app.utils.error_handling import (
    MisconfigurationError,
    MissingParameterError,
    error_payload,
)
from app.api.v1.models.models import HealthResponse
from app.api.v1.endpoints import images as images_router_module
from app.api import pages as pages_router_module

# Configure logging (move comprehensive config elsewhere if needed)
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)

# --- Lifespan Manager --- #
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events: create the upstream client on startup."""
    logger.info("Application startup: Loading resources...")
    try:
        # A missing key is reported per request, not fatal at startup
        check_configuration(settings)

        http_client = httpx.AsyncClient(timeout=settings.PEXELS_TIMEOUT_SECONDS)
        app_state["http_client"] = http_client

        pexels_client = PexelsClient(settings, http_client)
        app_state["image_search_service"] = ImageSearchService(settings, pexels_client)
        logger.info("Image search service initialized.")

    except Exception as e:
        logger.exception("Fatal error during application resource initialization.")
        raise RuntimeError("Application startup failed.") from e

    yield # Application runs here

    logger.info("Application shutdown: Cleaning up resources...")
    http_client = app_state.get("http_client")
    if http_client is not None:
        await http_client.aclose()
    app_state.clear()

# Create FastAPI app with lifespan manager
app = FastAPI(
    title="Pexels Image Search",
    description="Search royalty-free images from Pexels",
    version="1.0.0",
    lifespan=lifespan
)

# --- Custom OpenAPI Schema to Remove 422 Responses --- #
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )

    # Validation errors are answered with 400, never 422
    for path in openapi_schema["paths"]:
        for method in openapi_schema["paths"][path]:
            if "responses" in openapi_schema["paths"][path][method]:
                responses = openapi_schema["paths"][path][method]["responses"]
                if "422" in responses:
                    if "400" not in responses:
                        responses["400"] = responses["422"]
                        responses["400"]["description"] = "Bad Request - Invalid input parameters"
                    del responses["422"]

    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi

# --- Exception Handlers --- #

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,  # Changed from 422 to 400
        content=error_payload("Invalid parameters", detail=jsonable_encoder(exc.errors())),
    )

@app.exception_handler(MissingParameterError)
async def missing_parameter_exception_handler(request: Request, exc: MissingParameterError):
    logger.info(f"Rejected request to {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=400,
        content=error_payload(exc.message),
    )

@app.exception_handler(MisconfigurationError)
async def misconfiguration_exception_handler(request: Request, exc: MisconfigurationError):
    logger.error(f"Misconfiguration: {exc.message}")
    return JSONResponse(
        status_code=500,
        content=error_payload(exc.message),
    )

# Registered on the Starlette base class so routing 404s and 405s share the body
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )

# Generic handler for unexpected errors
@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500, # Internal Server Error
        content=error_payload("An unexpected internal server error occurred."),
    )

# --- Middleware --- #

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# --- Static Files --- #

app.mount("/static", StaticFiles(directory=settings.STATIC_DIR), name="static")

# --- Routers --- #

app.include_router(
    images_router_module.router,
    prefix="/api",
    tags=["images"],
)
app.include_router(pages_router_module.router)

# --- Health Check --- #
@app.get("/health",
    response_model=HealthResponse,
    description="Health check endpoint to verify the search service is initialized."
)
async def health_check():
    if "image_search_service" in app_state:
        return HealthResponse(status="ok", credential_configured=settings.credential_configured)
    raise HTTPException(status_code=503, detail="Service not ready. Missing: ['image_search_service']")

# --- Main Execution --- #

if __name__ == "__main__":
    logger.info(f"Starting server on {settings.API_HOST}:{settings.API_PORT}")
    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=False,
        log_level=logging.INFO
    )
