"""What the results area shows, derived from ResultsController state."""

import enum
from dataclasses import dataclass, field
from typing import List, Optional

from app.api.v1.models.models import ImageResult
from app.client.results_controller import Phase, ResultsController

SKELETON_COUNT = 6
PROMPT_MESSAGE = "Enter a search term to find images"
ERROR_HINT = (
    "If this error persists, the Pexels API might be temporarily unavailable "
    "or your API key might be incorrect."
)


class ViewKind(str, enum.Enum):
    PROMPT = "prompt"
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    GRID = "grid"


@dataclass
class ResultsView:
    kind: ViewKind
    query: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None
    warning: Optional[str] = None
    images: List[ImageResult] = field(default_factory=list)
    total_results: int = 0
    orientation_display: Optional[str] = None
    show_load_more: bool = False
    load_more_disabled: bool = False
    next_page: Optional[int] = None
    skeletons: int = 0
    selected_image: Optional[ImageResult] = None

    @property
    def heading(self) -> str:
        return f'Search Results for "{self.query}"'

    @property
    def count_label(self) -> str:
        return f"({len(self.images)} of {self.total_results:,} images)"

    @property
    def load_more_label(self) -> str:
        return "Loading more..." if self.load_more_disabled else "Load More Images"


def orientation_display(orientations) -> str:
    if not orientations:
        return "Any"
    return ", ".join(o.capitalize() for o in orientations)


def build_results_view(controller: ResultsController) -> ResultsView:
    criteria = controller.criteria
    if criteria is None:
        return ResultsView(kind=ViewKind.PROMPT, message=PROMPT_MESSAGE)

    if controller.phase in (Phase.IDLE, Phase.LOADING):
        return ResultsView(kind=ViewKind.LOADING, query=criteria.query, skeletons=SKELETON_COUNT)

    if controller.phase is Phase.ERRORED:
        return ResultsView(
            kind=ViewKind.ERROR,
            query=criteria.query,
            error=controller.error,
            message=ERROR_HINT,
        )

    if not controller.results:
        return ResultsView(
            kind=ViewKind.EMPTY,
            query=criteria.query,
            message=f'No images found for "{criteria.query}". Try a different search term.',
        )

    # A failed load-more keeps the grid and carries its error alongside
    return ResultsView(
        kind=ViewKind.GRID,
        query=criteria.query,
        error=controller.error,
        warning=controller.warning,
        images=list(controller.results),
        total_results=controller.total_results,
        orientation_display=orientation_display(criteria.orientations) if criteria.orientations else None,
        show_load_more=controller.next_page is not None,
        load_more_disabled=controller.loading_more,
        next_page=controller.next_page,
        selected_image=controller.selected_image,
    )
