import logging
from typing import Optional

from fastapi import APIRouter, Query, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.core.config import settings
from app.api.dependencies import get_image_search_service
from app.api.v1.models.models import ErrorResponse, SearchQuery, SearchResultPage
from app.services.search.image_search_service import ImageSearchService
from app.utils.error_handling import MissingParameterError

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get(
    "/images",
    response_model=SearchResultPage,
    responses={
        200: {
            "description": "Search results, or placeholder results with a warning when Pexels is unavailable"
        },
        400: {
            "model": ErrorResponse,
            "description": "Bad Request - Missing or invalid parameters",
            "content": {"application/json": {"example": {"error": "Missing required parameters"}}},
        },
        500: {
            "model": ErrorResponse,
            "description": "Server misconfiguration (API key not set)",
        },
    },
    openapi_extra={"x-no-422": True}  # Custom hint to remove 422 from schema
)
async def search_images(
    query: Optional[str] = Query(default=None, description="Search keywords"),
    orientation: Optional[str] = Query(default=None, description="Comma-separated orientations; only the first is sent upstream"),
    color: Optional[str] = Query(default=None, description="Color filter, 'none' for any"),
    size: Optional[str] = Query(default=None, description="Size filter, 'all' for any"),
    # Paging is validated in the body, after the credential check
    page: Optional[str] = Query(default=None, description="Page number, at least 1"),
    per_page: Optional[str] = Query(default=None,
                                    alias="perPage",
                                    description=f"Results per page, 1 to {settings.MAX_PER_PAGE}"),
    service: ImageSearchService = Depends(get_image_search_service),
) -> JSONResponse:
    """Search Pexels for images and return them in the canonical shape."""
    service.ensure_configured()
    if not query or not query.strip():
        raise MissingParameterError()

    try:
        search_query = SearchQuery.model_validate(
            {
                "query": query,
                "orientation": orientation,
                "color": color,
                "size": size,
                "page": page or 1,
                "per_page": per_page or settings.DEFAULT_PER_PAGE,
            },
            context={"max_per_page": settings.MAX_PER_PAGE},
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))
    logger.info(f"Processing image search: '{search_query.query}' page={search_query.page} perPage={search_query.per_page}")
    result = await service.search(search_query)
    return JSONResponse(content=result.to_response())
