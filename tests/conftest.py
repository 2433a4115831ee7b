"""Shared fixtures: fake Pexels payloads, mock transports and an app client."""

import httpx
import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_image_search_service
from app.core.config import Settings
from app.main import app
from app.services.search.image_search_service import ImageSearchService
from app.services.search.pexels_client import PexelsClient


def make_photo(photo_id: int, **overrides) -> dict:
    photo = {
        "id": photo_id,
        "width": 4000,
        "height": 3000,
        "url": f"https://www.pexels.com/photo/green-mountain-{photo_id}/",
        "photographer": f"Photographer {photo_id}",
        "photographer_url": f"https://www.pexels.com/@photographer{photo_id}",
        "photographer_id": 1000 + photo_id,
        "avg_color": "#7A8B6C",
        "src": {
            "original": f"https://images.pexels.com/photos/{photo_id}/original.jpeg",
            "large2x": f"https://images.pexels.com/photos/{photo_id}/large2x.jpeg",
            "large": f"https://images.pexels.com/photos/{photo_id}/large.jpeg",
            "medium": f"https://images.pexels.com/photos/{photo_id}/medium.jpeg",
            "small": f"https://images.pexels.com/photos/{photo_id}/small.jpeg",
            "portrait": f"https://images.pexels.com/photos/{photo_id}/portrait.jpeg",
            "landscape": f"https://images.pexels.com/photos/{photo_id}/landscape.jpeg",
            "tiny": f"https://images.pexels.com/photos/{photo_id}/tiny.jpeg",
        },
        "liked": False,
        "alt": f"Mountain view {photo_id}",
    }
    photo.update(overrides)
    return photo


def make_search_payload(page: int = 1, per_page: int = 15, total: int = 200, count=None) -> dict:
    """A Pexels search response for one page; photo ids are unique across pages."""
    remaining = max(total - (page - 1) * per_page, 0)
    count = min(per_page, remaining) if count is None else count
    payload = {
        "total_results": total,
        "page": page,
        "per_page": per_page,
        "photos": [make_photo(page * 1000 + i) for i in range(count)],
    }
    if page * per_page < total:
        payload["next_page"] = f"https://api.pexels.com/v1/search/?page={page + 1}&per_page={per_page}"
    return payload


def paging_pexels_handler(total: int = 200, requests=None):
    """Mock transport handler that pages through `total` fake photos."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        page = int(request.url.params.get("page", "1"))
        per_page = int(request.url.params.get("per_page", "15"))
        return httpx.Response(200, json=make_search_payload(page=page, per_page=per_page, total=total))

    return handler


@pytest.fixture
def test_settings() -> Settings:
    return Settings(PEXELS_API_KEY="test-key", _env_file=None)


@pytest.fixture
def build_service(test_settings):
    """Return a factory building an ImageSearchService over a mock upstream."""

    def factory(handler, config: Settings = None) -> ImageSearchService:
        config = config or test_settings
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return ImageSearchService(config, PexelsClient(config, http_client))

    return factory


@pytest.fixture
def api_client(build_service):
    """Return a factory for a TestClient whose search service uses the given handler."""

    def factory(handler, config: Settings = None) -> TestClient:
        service = build_service(handler, config)
        app.dependency_overrides[get_image_search_service] = lambda: service
        return TestClient(app)

    yield factory
    app.dependency_overrides.clear()


@pytest.fixture
def photo_factory():
    return make_photo


@pytest.fixture
def payload_factory():
    return make_search_payload


@pytest.fixture
def pexels_pager():
    return paging_pexels_handler
