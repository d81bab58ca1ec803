"""Tests for path template parsing and action URL substitution."""

import pytest

from formwright.exceptions import InvalidPathParameter, MissingPathParameter
from formwright.paths import PathParam, build_action_url, parse_path_pattern, to_litestar_path


class TestParsePathPattern:
    def test_no_params(self):
        assert parse_path_pattern("/contact") == ()

    def test_plain_param(self):
        assert parse_path_pattern("/users/:id") == (PathParam("id"),)

    def test_constrained_param(self):
        assert parse_path_pattern(r"/users/:id{\d+}/edit") == (PathParam("id", r"\d+"),)

    def test_params_in_order(self):
        params = parse_path_pattern("/orgs/:org/repos/:repo_name{[a-z-]+}")
        assert [p.name for p in params] == ["org", "repo_name"]
        assert params[1].pattern == "[a-z-]+"

    def test_duplicates_are_preserved(self):
        params = parse_path_pattern("/:id/compare/:id")
        assert params == (PathParam("id"), PathParam("id"))


class TestBuildActionUrl:
    def _build(self, template, url_params):
        return build_action_url(template, parse_path_pattern(template), url_params)

    def test_template_without_params(self):
        assert self._build("/contact", None) == "/contact"

    def test_substitutes_value(self):
        assert self._build("/users/:id/profile", {"id": "123"}) == "/users/123/profile"

    def test_substitutes_constrained_token(self):
        assert self._build(r"/users/:id{\d+}", {"id": "123"}) == "/users/123"

    def test_non_string_values_are_stringified(self):
        assert self._build("/users/:id", {"id": 7}) == "/users/7"

    def test_values_are_percent_encoded(self):
        assert self._build("/search/:term", {"term": "a b/c?"}) == "/search/a%20b%2Fc%3F"

    def test_uri_component_safe_characters_kept(self):
        assert self._build("/t/:v", {"v": "a-b_c.d!e~f*g'(h)"}) == "/t/a-b_c.d!e~f*g'(h)"

    def test_repeated_names_all_substituted(self):
        assert self._build("/:id/compare/:id", {"id": "9"}) == "/9/compare/9"

    def test_similar_names_do_not_collide(self):
        url = self._build("/:id/:identifier", {"id": "1", "identifier": "two"})
        assert url == "/1/two"

    def test_missing_params_named_together(self):
        with pytest.raises(MissingPathParameter) as exc_info:
            self._build("/orgs/:org/repos/:repo", {})
        assert exc_info.value.names == ("org", "repo")
        assert "org, repo" in str(exc_info.value)

    def test_empty_string_counts_as_missing(self):
        with pytest.raises(MissingPathParameter):
            self._build("/users/:id", {"id": ""})

    def test_constraint_mismatch(self):
        with pytest.raises(InvalidPathParameter) as exc_info:
            self._build(r"/users/:id{\d+}", {"id": "abc"})
        assert exc_info.value.names == ("id",)

    def test_constraint_is_full_match(self):
        with pytest.raises(InvalidPathParameter):
            self._build(r"/users/:id{\d+}", {"id": "12a"})

    def test_all_invalid_params_named(self):
        template = r"/:year{\d+}/:slug{[a-z]+}"
        with pytest.raises(InvalidPathParameter) as exc_info:
            self._build(template, {"year": "y2k", "slug": "Hello"})
        assert exc_info.value.names == ("year", "slug")

    def test_missing_reported_before_invalid(self):
        with pytest.raises(MissingPathParameter) as exc_info:
            self._build(r"/:a{\d+}/:b", {"a": "x"})
        assert exc_info.value.names == ("b",)

    def test_repeated_missing_name_reported_once(self):
        with pytest.raises(MissingPathParameter) as exc_info:
            self._build("/:id/compare/:id", {})
        assert exc_info.value.names == ("id",)


def test_to_litestar_path():
    assert to_litestar_path(r"/users/:id{\d+}/posts/:slug") == "/users/{id:str}/posts/{slug:str}"


def test_to_litestar_path_without_params():
    assert to_litestar_path("/contact") == "/contact"
