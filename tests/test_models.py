"""Tests for endpoint options and cache entries."""

import pytest
from pydantic import ValidationError

from fieldsuggest.core.exceptions import TemplateError
from fieldsuggest.models.candidates import CacheEntry, field_text
from fieldsuggest.models.options import DependentField, EndpointOptions, placeholder_name


class TestPlaceholder:
    def test_extracts_name(self):
        assert placeholder_name("https://api.example/search/${city}") == "city"

    def test_strips_whitespace(self):
        assert placeholder_name("https://x/${ city }?n=1") == "city"

    def test_missing_placeholder(self):
        with pytest.raises(TemplateError, match="exactly one"):
            placeholder_name("https://api.example/search/")

    def test_two_placeholders(self):
        with pytest.raises(TemplateError):
            placeholder_name("https://x/${a}/${b}")

    def test_empty_placeholder(self):
        with pytest.raises(TemplateError, match="empty"):
            placeholder_name("https://x/${}")


class TestEndpointOptions:
    def test_defaults(self):
        opts = EndpointOptions(api="https://api.example/search/${query}")
        assert opts.min_query_length == 1
        assert opts.max_candidates == 20
        assert opts.debounce_delay == 0.5
        assert opts.valid is None
        assert opts.fields == []

    def test_display_key_defaults_to_placeholder(self):
        opts = EndpointOptions(api="https://api.example/search/${city}")
        assert opts.query_name == "city"
        assert opts.display_key == "city"

    def test_display_field_overrides(self):
        opts = EndpointOptions(api="https://x/${q}", display_field="name")
        assert opts.display_key == "name"

    def test_invalid_template_rejected(self):
        with pytest.raises(ValidationError):
            EndpointOptions(api="https://api.example/search")

    def test_limits_validated(self):
        with pytest.raises(ValidationError):
            EndpointOptions(api="https://x/${q}", max_candidates=0)
        with pytest.raises(ValidationError):
            EndpointOptions(api="https://x/${q}", min_query_length=-1)

    def test_build_url_quotes_query(self):
        opts = EndpointOptions(api="https://api.example/search/${query}?limit=5")
        assert opts.build_url("São Paulo") == "https://api.example/search/S%C3%A3o%20Paulo?limit=5"
        assert opts.build_url("a/b") == "https://api.example/search/a%2Fb?limit=5"

    def test_fields_from_mapping(self):
        opts = EndpointOptions(api="https://x/${q}", fields={"country": "country_name", "code": ""})
        assert [(f.name, f.source) for f in opts.fields] == [("country", "country_name"), ("code", "code")]

    def test_to_config_keeps_only_set_values(self):
        opts = EndpointOptions(api="https://x/${q}", display_field="name", fields=[{"name": "zip"}])
        assert opts.to_config() == {"api": "https://x/${q}", "display_field": "name", "fields": {"zip": "zip"}}


class TestDependentField:
    def test_source_defaults_to_name(self):
        assert DependentField(name="country").source == "country"

    def test_explicit_source(self):
        assert DependentField(name="country", source="cc").source == "cc"


class TestCacheEntry:
    def test_field_text(self):
        assert field_text({"name": "London"}, "name") == "London"
        assert field_text({"id": 7}, "id") == "7"
        assert field_text({"name": None}, "name") == ""
        assert field_text({}, "name") == ""
        assert field_text("London", "name") == ""

    def test_find_exact_only(self):
        entry = CacheEntry(query="Lo", data=[{"name": "London"}, {"name": "Lodi"}])
        assert entry.find("Lodi", "name") == {"name": "Lodi"}
        assert entry.find("Lod", "name") is None
        assert entry.find("london", "name") is None
        assert entry.find("", "name") is None

    def test_covers_only_when_complete(self):
        complete = CacheEntry(query="Lo", complete=True)
        assert complete.covers("Lon")
        assert complete.covers("LONDON")
        assert not complete.covers("Par")

        truncated = CacheEntry(query="Lo", complete=False)
        assert not truncated.covers("Lon")
