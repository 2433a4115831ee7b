from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError
from typing import List, Literal, Optional, Tuple

from app.utils.error_handling import DegradationReason

ORIENTATIONS: Tuple[str, ...] = ("square", "landscape", "portrait")
COLORS: Tuple[str, ...] = (
    "red", "orange", "yellow", "green", "turquoise", "blue",
    "violet", "pink", "brown", "black", "gray", "white",
)
SIZES: Tuple[str, ...] = ("large", "medium", "small")

# Sentinels meaning "no filter"
COLOR_UNSET = "none"
SIZE_UNSET = "all"

LICENSE_REQUIREMENTS: Tuple[str, ...] = (
    "Free to use",
    "Attribution not required",
    "Cannot be resold without modification",
)


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchQuery(CamelModel):
    """Search request accepted by the proxy."""
    query: str = Field(..., min_length=1)
    orientation: Tuple[str, ...] = ()
    color: Optional[str] = None
    size: Optional[str] = None
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=15, ge=1)

    @field_validator("per_page")
    @classmethod
    def cap_per_page(cls, value: int, info: ValidationInfo) -> int:
        limit = (info.context or {}).get("max_per_page")
        if limit is not None and value > limit:
            raise PydanticCustomError(
                "less_than_equal", "Input should be less than or equal to {le}", {"le": limit}
            )
        return value

    @field_validator("orientation", mode="before")
    @classmethod
    def split_orientation(cls, value):
        if value is None:
            return ()
        if isinstance(value, str):
            value = value.split(",")
        return tuple(o.strip() for o in value if o and o.strip() in ORIENTATIONS)

    @field_validator("color", mode="before")
    @classmethod
    def drop_color_sentinel(cls, value):
        return None if not value or value == COLOR_UNSET else value

    @field_validator("size", mode="before")
    @classmethod
    def drop_size_sentinel(cls, value):
        return None if not value or value == SIZE_UNSET else value

    def upstream_params(self) -> dict:
        """Query parameters for the Pexels search endpoint."""
        params = {"query": self.query, "page": self.page, "per_page": self.per_page}
        # Pexels accepts a single orientation per call
        if self.orientation:
            params["orientation"] = self.orientation[0]
        if self.color:
            params["color"] = self.color
        if self.size:
            params["size"] = self.size
        return params


class ImageResult(CamelModel):
    """Normalized image record, the only shape the client consumes."""
    id: str
    description: Optional[str] = None
    thumbnail_url: str
    small_url: str
    large_url: str
    original_url: str
    source_url: str
    author: str
    author_url: str
    source: Literal["pexels"] = "pexels"
    license_requirements: List[str] = Field(default_factory=lambda: list(LICENSE_REQUIREMENTS))
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    color: Optional[str] = None


class SearchResultPage(CamelModel):
    """Response envelope of GET /api/images."""
    images: List[ImageResult]
    total_results: int
    next_page: Optional[int] = None
    prev_page: Optional[int] = None
    page: int = 1
    per_page: int = 15
    warning: Optional[str] = None
    degradation: Optional[DegradationReason] = None

    def to_response(self) -> dict:
        """JSON body; warning and degradation only appear on fallback pages."""
        data = self.model_dump(by_alias=True, mode="json")
        for key in ("warning", "degradation"):
            if data.get(key) is None:
                data.pop(key, None)
        return data


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(CamelModel):
    status: str
    credential_configured: bool


# --- Upstream (Pexels) schema, validated strictly --- #

class PexelsPhotoSource(BaseModel):
    model_config = ConfigDict(extra="ignore", strict=True)

    original: str
    large: str
    medium: str
    small: str
    large2x: Optional[str] = None
    portrait: Optional[str] = None
    landscape: Optional[str] = None
    tiny: Optional[str] = None


class PexelsPhoto(BaseModel):
    model_config = ConfigDict(extra="ignore", strict=True)

    id: int
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    url: str
    photographer: str
    photographer_url: str
    photographer_id: Optional[int] = None
    avg_color: Optional[str] = None
    src: PexelsPhotoSource
    liked: Optional[bool] = None
    alt: Optional[str] = None


class PexelsSearchResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", strict=True)

    total_results: int
    page: int
    per_page: int
    photos: List[PexelsPhoto]
    next_page: Optional[str] = None
    prev_page: Optional[str] = None
