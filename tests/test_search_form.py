"""Tests for the criteria editor and URL encoding of search criteria."""

import pytest

from app.client.search_form import SearchCriteria, SearchForm, parse_search_params
from app.utils.error_handling import MissingParameterError


class TestSearchForm:
    """Test draft criteria editing and submission."""

    def test_submit_omits_defaults(self):
        form = SearchForm(query="cat")
        assert form.submit() == "/?query=cat"

    def test_orientations_serialize_comma_joined(self):
        form = SearchForm(query="cat")
        form.toggle_orientation("landscape", True)
        form.toggle_orientation("portrait", True)

        assert form.submit() == "/?query=cat&orientation=landscape,portrait"

    def test_unchecking_orientation(self):
        form = SearchForm(query="cat", orientations=["square", "portrait"])
        form.toggle_orientation("square", False)
        form.toggle_orientation("portrait", True)

        assert form.orientations == ["portrait"]

    def test_color_and_size(self):
        form = SearchForm(query="sea view")
        form.set_color("blue")
        form.set_size("large")

        assert form.submit() == "/?query=sea+view&color=blue&size=large"

    def test_sentinels_are_not_serialized(self):
        form = SearchForm(query="cat", color="none", size="all")
        assert form.submit() == "/?query=cat"

    def test_blank_query_is_guarded(self):
        form = SearchForm(query="   ")
        with pytest.raises(MissingParameterError):
            form.submit()

    @pytest.mark.parametrize("setter, value", [("set_color", "purple"), ("set_size", "huge"),
                                               ("toggle_orientation", "wide")])
    def test_unknown_values_rejected(self, setter, value):
        form = SearchForm(query="cat")
        with pytest.raises(ValueError):
            if setter == "toggle_orientation":
                form.toggle_orientation(value, True)
            else:
                getattr(form, setter)(value)

    def test_prefilled_from_url(self):
        form = SearchForm.from_query_string("?query=cat&orientation=landscape,portrait&color=blue&size=small")

        assert form.query == "cat"
        assert form.orientations == ["landscape", "portrait"]
        assert form.color == "blue"
        assert form.size == "small"


class TestSearchCriteria:
    """Test criteria parsing from and to URL parameters."""

    def test_round_trip_through_url(self):
        criteria = SearchCriteria.from_query_string("query=cat&orientation=landscape,portrait&color=blue")

        assert criteria.orientations == ("landscape", "portrait")
        assert criteria.to_query_string() == "query=cat&orientation=landscape,portrait&color=blue"

    def test_no_query_means_no_criteria(self):
        assert SearchCriteria.from_query_string("color=blue") is None
        assert SearchCriteria.from_query_string("query=") is None

    def test_sentinels_and_unknown_values_dropped(self):
        criteria = SearchCriteria.from_params({"query": "cat", "color": "none", "size": "huge",
                                               "orientation": "wide,square"})

        assert criteria.color is None
        assert criteria.size is None
        assert criteria.orientations == ("square",)

    def test_proxy_params(self):
        criteria = SearchCriteria(query="cat", orientations=("landscape", "portrait"), size="medium")

        assert criteria.to_params(page=2, per_page=15) == {
            "query": "cat",
            "orientation": "landscape,portrait",
            "size": "medium",
            "page": "2",
            "perPage": "15",
        }

    def test_repeated_checkbox_values_are_joined(self):
        params = parse_search_params([("query", "cat"), ("orientation", "landscape"), ("orientation", "portrait")])

        assert params == {"query": "cat", "orientation": "landscape,portrait"}
