import httpx
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

from app.core.config import Settings
from app.api.v1.models.models import (
    ImageResult,
    LICENSE_REQUIREMENTS,
    PexelsPhoto,
    PexelsSearchResponse,
)
from app.utils.error_handling import handle_upstream_errors

logger = logging.getLogger(__name__)


def describe_photo(photo: PexelsPhoto) -> Optional[str]:
    """Caption for a photo: its alt text, else the last segment of its page URL."""
    if photo.alt:
        return photo.alt
    path = urlsplit(photo.url).path
    segments = [s for s in path.split("/") if s]
    return segments[-1] if segments else None


def map_pexels_photo(photo: PexelsPhoto) -> ImageResult:
    """Map a validated Pexels photo onto the canonical ImageResult."""
    return ImageResult(
        id=f"pexels-{photo.id}",
        description=describe_photo(photo),
        thumbnail_url=photo.src.medium,
        small_url=photo.src.small,
        large_url=photo.src.large,
        original_url=photo.src.original,
        source_url=photo.url,
        author=photo.photographer,
        author_url=photo.photographer_url,
        source="pexels",
        license_requirements=list(LICENSE_REQUIREMENTS),
        width=photo.width,
        height=photo.height,
        color=photo.avg_color,
    )


class PexelsClient:
    """
    Thin client for the Pexels search endpoint.

    The HTTP client is owned by the caller (created in the app lifespan) so tests
    can hand in one backed by httpx.MockTransport.
    """

    def __init__(self, config: Settings, http_client: httpx.AsyncClient):
        self.config = config
        self.http_client = http_client
        self.base_url = config.PEXELS_API_URL.rstrip("/")
        self.timeout = httpx.Timeout(config.PEXELS_TIMEOUT_SECONDS)

    @handle_upstream_errors("Pexels API request failed")
    async def search(self, params: Dict[str, Any]) -> PexelsSearchResponse:
        """Run one search call. Raises UpstreamFailure on any failure."""
        url = f"{self.base_url}/search"
        logger.info(f"Pexels API request options: {params}")

        response = await self.http_client.get(
            url,
            params=params,
            headers={"Authorization": self.config.PEXELS_API_KEY or ""},
            timeout=self.timeout,
        )
        logger.debug(f"Pexels response status: {response.status_code}")
        response.raise_for_status()

        # Strict JSON validation: a mistyped field is a malformed response
        parsed = PexelsSearchResponse.model_validate_json(response.content)
        logger.info(f"Successfully fetched {len(parsed.photos)} photos from Pexels API")
        return parsed
