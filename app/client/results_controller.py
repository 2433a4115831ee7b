"""Paginated fetch state for one search session against the image search proxy."""

import enum
import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from app.api.v1.models.models import ImageResult, SearchResultPage
from app.client.search_form import SearchCriteria
from app.utils.error_handling import ClientFetchError

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 15
FETCH_FAILED_MESSAGE = "Failed to fetch images. Please try again."


class Phase(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    LOADING_MORE = "loading_more"
    ERRORED = "errored"


class ResultsController:
    """
    Drives GET /api/images for the active criteria.

    Every fetch records the generation it was issued under; a response arriving
    after the criteria changed (or a retry was issued) is dropped.
    """

    def __init__(self, client: httpx.AsyncClient, per_page: int = DEFAULT_PER_PAGE,
                 endpoint: str = "/api/images"):
        self.client = client
        self.per_page = per_page
        self.endpoint = endpoint

        self.criteria: Optional[SearchCriteria] = None
        self.phase = Phase.IDLE
        self.results: List[ImageResult] = []
        self.total_results = 0
        self.next_page: Optional[int] = None
        self.error: Optional[str] = None
        self.warning: Optional[str] = None
        self.selected_image: Optional[ImageResult] = None
        self.retry_nonce = 0
        self.generation = 0

    @property
    def loading_initial(self) -> bool:
        return self.phase is Phase.LOADING

    @property
    def loading_more(self) -> bool:
        return self.phase is Phase.LOADING_MORE

    @property
    def can_load_more(self) -> bool:
        return self.phase is Phase.LOADED and self.next_page is not None

    async def set_criteria(self, criteria: Optional[SearchCriteria]) -> None:
        """Follow the criteria derived from the URL; a change restarts at page 1."""
        if criteria is None:
            self.generation += 1
            self.criteria = None
            self._clear()
            self.phase = Phase.IDLE
            return
        if criteria == self.criteria and self.phase is not Phase.IDLE:
            return
        self.criteria = criteria
        await self._load_first_page()

    async def retry(self) -> None:
        """Re-fetch page 1 of the current criteria."""
        if self.criteria is None:
            return
        self.retry_nonce += 1
        logger.info(f"Retrying search '{self.criteria.query}' (attempt {self.retry_nonce})")
        await self._load_first_page()

    async def load_more(self) -> None:
        """Fetch the next page and append it. A failure keeps what is rendered."""
        if not self.can_load_more:
            return
        generation = self.generation
        page = self.next_page
        self.phase = Phase.LOADING_MORE
        try:
            result = await self._fetch(self.criteria, page)
        except ClientFetchError as e:
            if generation != self.generation:
                logger.debug(f"Discarding stale load-more error for page {page}")
                return
            logger.error(f"Error fetching more images: {e.message}")
            self.error = e.message
            self.phase = Phase.LOADED
            return

        if generation != self.generation:
            logger.debug(f"Discarding stale load-more response for page {page}")
            return
        if result.warning and not self.warning:
            self.warning = result.warning
        # Upstream pages can repeat photos; keep the first occurrence of each id
        loaded = {image.id for image in self.results}
        self.results = self.results + [image for image in result.images if image.id not in loaded]
        self.next_page = result.next_page
        self.phase = Phase.LOADED

    def select_image(self, image: ImageResult) -> None:
        self.selected_image = image

    def select_image_by_id(self, image_id: str) -> Optional[ImageResult]:
        for image in self.results:
            if image.id == image_id:
                self.selected_image = image
                return image
        return None

    def close_detail(self) -> None:
        self.selected_image = None

    # --- internals --- #

    def _clear(self) -> None:
        self.results = []
        self.total_results = 0
        self.next_page = None
        self.error = None
        self.warning = None
        self.selected_image = None

    async def _load_first_page(self) -> None:
        self.generation += 1
        generation = self.generation
        criteria = self.criteria
        self._clear()
        self.phase = Phase.LOADING
        try:
            result = await self._fetch(criteria, 1)
        except ClientFetchError as e:
            if generation != self.generation:
                logger.debug(f"Discarding stale error for '{criteria.query}'")
                return
            logger.error(f"Error fetching images: {e.message}")
            self.error = e.message
            self.phase = Phase.ERRORED
            return

        if generation != self.generation:
            logger.debug(f"Discarding stale response for '{criteria.query}'")
            return
        self.warning = result.warning
        self.results = list(result.images)
        self.total_results = result.total_results
        self.next_page = result.next_page
        self.phase = Phase.LOADED

    async def _fetch(self, criteria: SearchCriteria, page: int) -> SearchResultPage:
        params = criteria.to_params(page=page, per_page=self.per_page)
        try:
            response = await self.client.get(self.endpoint, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Request to image search proxy failed: {e}")
            raise ClientFetchError(FETCH_FAILED_MESSAGE) from e

        if response.is_error:
            raise ClientFetchError(self._error_message(response), status_code=response.status_code)

        try:
            return SearchResultPage.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Unexpected response from image search proxy: {e}")
            raise ClientFetchError(FETCH_FAILED_MESSAGE, status_code=response.status_code) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"]:
            return body["error"]
        return f"API error: {response.status_code}"
