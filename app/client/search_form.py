"""Search criteria and the form that edits them."""

import logging
from typing import Dict, List, Mapping, Optional, Tuple
from urllib.parse import parse_qsl, urlencode

from pydantic import BaseModel, ConfigDict

from app.api.v1.models.models import (
    COLOR_UNSET,
    COLORS,
    ORIENTATIONS,
    SIZE_UNSET,
    SIZES,
)
from app.utils.error_handling import MissingParameterError

logger = logging.getLogger(__name__)

COLOR_OPTIONS: List[Tuple[str, str]] = [(COLOR_UNSET, "Any Color")] + [(c, c.capitalize()) for c in COLORS]
SIZE_OPTIONS: List[Tuple[str, str]] = [
    (SIZE_UNSET, "Any Size"),
    ("large", "Large (24MP)"),
    ("medium", "Medium (12MP)"),
    ("small", "Small (4MP)"),
]
ORIENTATION_OPTIONS: List[Tuple[str, str]] = [(o, o.capitalize()) for o in ORIENTATIONS]


def parse_search_params(pairs) -> Dict[str, str]:
    """
    Flatten URL parameters into a dict. Repeated orientation values, as sent by
    checkboxes, are joined into one comma-separated value.
    """
    if isinstance(pairs, str):
        pairs = parse_qsl(pairs.lstrip("?"))
    params: Dict[str, str] = {}
    orientations: List[str] = []
    for key, value in pairs:
        if key == "orientation":
            orientations.extend(v for v in value.split(",") if v)
        else:
            params[key] = value
    if orientations:
        params["orientation"] = ",".join(orientations)
    return params


def _split_orientations(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return ()
    values = []
    for value in raw.split(","):
        value = value.strip()
        if value in ORIENTATIONS and value not in values:
            values.append(value)
    return tuple(values)


class SearchCriteria(BaseModel):
    """Search term plus filters; identifies a result set independent of paging."""
    model_config = ConfigDict(frozen=True)

    query: str
    orientations: Tuple[str, ...] = ()
    color: Optional[str] = None
    size: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> Optional["SearchCriteria"]:
        """Criteria from URL parameters, or None when no query is present."""
        query = (params.get("query") or "").strip()
        if not query:
            return None
        color = params.get("color")
        size = params.get("size")
        return cls(
            query=query,
            orientations=_split_orientations(params.get("orientation")),
            color=color if color in COLORS else None,
            size=size if size in SIZES else None,
        )

    @classmethod
    def from_query_string(cls, query_string: str) -> Optional["SearchCriteria"]:
        return cls.from_params(parse_search_params(query_string))

    def url_params(self) -> Dict[str, str]:
        """Non-default criteria as URL parameters."""
        params = {"query": self.query}
        if self.orientations:
            params["orientation"] = ",".join(self.orientations)
        if self.color:
            params["color"] = self.color
        if self.size:
            params["size"] = self.size
        return params

    def to_params(self, page: int, per_page: int) -> Dict[str, str]:
        """Parameters for one GET /api/images call."""
        params = self.url_params()
        params["page"] = str(page)
        params["perPage"] = str(per_page)
        return params

    def to_query_string(self, **extra) -> str:
        params = self.url_params()
        params.update({k: str(v) for k, v in extra.items() if v is not None})
        # Keep commas readable in the orientation list
        return urlencode(params, safe=",")


class SearchForm:
    """
    Draft criteria edited independently of the active search.

    Nothing is fetched from here: submit() only produces the URL to navigate to.
    """

    def __init__(self, query: str = "", color: str = COLOR_UNSET, size: str = SIZE_UNSET,
                 orientations: Optional[List[str]] = None):
        self.query = query
        self.color = color
        self.size = size
        self.orientations: List[str] = []
        for orientation in orientations or []:
            self.toggle_orientation(orientation, True)

    @classmethod
    def from_query_string(cls, query_string: str) -> "SearchForm":
        return cls.from_params(parse_search_params(query_string))

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "SearchForm":
        form = cls(query=params.get("query", ""))
        if params.get("color") in COLORS:
            form.color = params["color"]
        if params.get("size") in SIZES:
            form.size = params["size"]
        for orientation in _split_orientations(params.get("orientation")):
            form.toggle_orientation(orientation, True)
        return form

    def set_query(self, value: str) -> None:
        self.query = value

    def set_color(self, value: str) -> None:
        if value != COLOR_UNSET and value not in COLORS:
            raise ValueError(f"Unknown color: {value}")
        self.color = value

    def set_size(self, value: str) -> None:
        if value != SIZE_UNSET and value not in SIZES:
            raise ValueError(f"Unknown size: {value}")
        self.size = value

    def toggle_orientation(self, orientation: str, checked: bool) -> None:
        if orientation not in ORIENTATIONS:
            raise ValueError(f"Unknown orientation: {orientation}")
        if checked and orientation not in self.orientations:
            self.orientations.append(orientation)
        elif not checked and orientation in self.orientations:
            self.orientations.remove(orientation)

    def criteria(self) -> SearchCriteria:
        if not self.query.strip():
            raise MissingParameterError()
        return SearchCriteria(
            query=self.query.strip(),
            orientations=tuple(self.orientations),
            color=None if self.color == COLOR_UNSET else self.color,
            size=None if self.size == SIZE_UNSET else self.size,
        )

    def submit(self) -> str:
        """Validate the draft and return the page URL to navigate to."""
        criteria = self.criteria()
        url = f"/?{criteria.to_query_string()}"
        logger.debug(f"Search form submitted: {url}")
        return url
