import logging
from typing import List

from app.core.config import Settings
from app.api.v1.models.models import ImageResult, SearchQuery, SearchResultPage
from app.services.search.fallback import fallback_page
from app.services.search.pexels_client import PexelsClient, map_pexels_photo
from app.utils.error_handling import (
    MisconfigurationError,
    MissingParameterError,
    UpstreamFailure,
)

logger = logging.getLogger(__name__)


class ImageSearchService:
    """Search proxy: validates a query, calls Pexels and normalizes the result."""

    def __init__(self, config: Settings, pexels_client: PexelsClient):
        self.config = config
        self.pexels_client = pexels_client

    def ensure_configured(self) -> None:
        if not self.config.credential_configured:
            logger.error("PEXELS_API_KEY environment variable is not set")
            raise MisconfigurationError()

    async def search(self, query: SearchQuery) -> SearchResultPage:
        """
        Run a search against the upstream provider.

        Misconfiguration and a blank query raise. Upstream failures never do:
        they yield the fallback page carrying a warning and the degradation reason.
        """
        self.ensure_configured()
        if not query.query or not query.query.strip():
            logger.info("Missing required query parameter")
            raise MissingParameterError()

        try:
            upstream = await self.pexels_client.search(query.upstream_params())
        except UpstreamFailure as e:
            logger.warning(f"Using mock data due to upstream failure ({e.reason.value})")
            return fallback_page(e.reason)

        images = self._unique_images([map_pexels_photo(photo) for photo in upstream.photos])
        if len(images) > query.per_page:
            logger.warning(f"Upstream returned {len(images)} photos for per_page={query.per_page}; truncating")
            images = images[:query.per_page]

        return SearchResultPage(
            images=images,
            total_results=upstream.total_results,
            next_page=query.page + 1 if upstream.next_page else None,
            prev_page=query.page - 1 if query.page > 1 else None,
            page=query.page,
            per_page=query.per_page,
        )

    @staticmethod
    def _unique_images(images: List[ImageResult]) -> List[ImageResult]:
        seen = set()
        unique = []
        for image in images:
            if image.id in seen:
                logger.warning(f"Dropping duplicate image id {image.id} from upstream page")
                continue
            seen.add(image.id)
            unique.append(image)
        return unique
