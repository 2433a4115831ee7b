from fastapi import HTTPException
from fastapi.templating import Jinja2Templates

from app.core.config import settings
from app.services.search.image_search_service import ImageSearchService

# --- Shared application state, filled by the lifespan manager --- #
app_state = {}

templates = Jinja2Templates(directory=str(settings.TEMPLATES_DIR))

def get_image_search_service() -> ImageSearchService:
    service = app_state.get("image_search_service")
    if not service:
        raise HTTPException(status_code=503, detail="Image search service not available.")
    return service
