import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from app.core.config import settings
from app.api.dependencies import templates
from app.client.results_controller import ResultsController
from app.client.search_form import (
    COLOR_OPTIONS,
    ORIENTATION_OPTIONS,
    SIZE_OPTIONS,
    SearchCriteria,
    SearchForm,
    parse_search_params,
)
from app.client.views import build_results_view
from app.utils.error_handling import MissingParameterError

logger = logging.getLogger(__name__)

router = APIRouter()

# Upper bound for pages accumulated through the load-more link
MAX_THROUGH_PAGE = 20


def page_url(criteria: Optional[SearchCriteria], **extra) -> str:
    if criteria is None:
        return "/"
    return f"/?{criteria.to_query_string(**extra)}"


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index(
    request: Request,
    through: int = Query(default=1, ge=1, le=MAX_THROUGH_PAGE),
    selected: Optional[str] = Query(default=None),
    retry: int = Query(default=0, ge=0),
    submit: Optional[str] = Query(default=None),
):
    """Render the search page: sidebar form, result grid and detail dialog."""
    params = parse_search_params(request.query_params.multi_items())
    form = SearchForm.from_params(params)
    form_error = None

    if submit is not None:
        # Form posts carry every field; navigate to the canonical URL instead
        try:
            return RedirectResponse(form.submit(), status_code=303)
        except MissingParameterError:
            form_error = "Please enter a search term."

    criteria = SearchCriteria.from_params(params)

    # Talk to our own /api/images over the same HTTP contract a browser would use
    transport = httpx.ASGITransport(app=request.app)
    async with httpx.AsyncClient(transport=transport, base_url="http://search-proxy") as client:
        controller = ResultsController(client, per_page=settings.DEFAULT_PER_PAGE)
        controller.retry_nonce = retry
        await controller.set_criteria(criteria)
        while controller.can_load_more and controller.next_page <= through and not controller.error:
            await controller.load_more()

    if selected and controller.select_image_by_id(selected) is None:
        logger.info(f"Selected image {selected} is not in the current results")

    view = build_results_view(controller)
    loaded_through = controller.next_page - 1 if controller.next_page else through
    keep_through = loaded_through if loaded_through > 1 else None

    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "form": form,
            "form_error": form_error,
            "view": view,
            "color_options": COLOR_OPTIONS,
            "size_options": SIZE_OPTIONS,
            "orientation_options": ORIENTATION_OPTIONS,
            "load_more_url": page_url(criteria, through=view.next_page) + "#load-more",
            "retry_url": page_url(criteria, retry=retry + 1),
            "close_url": page_url(criteria, through=keep_through),
            "select_url": lambda image_id: page_url(criteria, through=keep_through, selected=image_id),
        },
        status_code=400 if form_error else 200,
    )
