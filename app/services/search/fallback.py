"""Placeholder results served when the Pexels API cannot be used."""

from typing import List

from app.api.v1.models.models import ImageResult, SearchResultPage
from app.utils.error_handling import DegradationReason

TIMEOUT_WARNING = "Using mock data because the Pexels API request timed out."
API_ISSUES_WARNING = "Using mock data due to API issues. Please check your API key."

FALLBACK_TOTAL_RESULTS = 100
FALLBACK_PER_PAGE = 15

_MOCK_PHOTOS = (
    # (slug, description, author handle, author, width, height, color, thumbnail size)
    ("mountain-landscape-1", "Mountain landscape at sunset", "johndoe", "John Doe", 1920, 1080, "#4C6A92", "height=300&width=400"),
    ("beach-palm-trees-2", "Beach with palm trees", "janesmith", "Jane Smith", 1600, 900, "#82C4D3", "height=300&width=400"),
    ("city-skyline-3", "City skyline at night", "alexjohnson", "Alex Johnson", 800, 1200, "#1A2B3C", "height=400&width=300"),
)


def mock_images() -> List[ImageResult]:
    images = []
    for index, (slug, description, handle, author, width, height, color, thumb) in enumerate(_MOCK_PHOTOS, start=1):
        page_url = f"https://www.pexels.com/photo/{slug}/"
        images.append(ImageResult(
            id=f"pexels-{index}",
            description=description,
            thumbnail_url=f"/static/placeholder.svg?{thumb}",
            source_url=page_url,
            author=author,
            author_url=f"https://www.pexels.com/@{handle}",
            width=width,
            height=height,
            color=color,
            original_url=f"{page_url}original",
            large_url=f"{page_url}large",
            small_url=f"{page_url}small",
        ))
    return images


def fallback_page(reason: DegradationReason) -> SearchResultPage:
    warning = TIMEOUT_WARNING if reason is DegradationReason.TIMEOUT else API_ISSUES_WARNING
    return SearchResultPage(
        images=mock_images(),
        total_results=FALLBACK_TOTAL_RESULTS,
        next_page=None,
        prev_page=None,
        page=1,
        per_page=FALLBACK_PER_PAGE,
        warning=warning,
        degradation=reason,
    )
