"""Tests for the legacy URI join algorithm."""
import pytest

from rdfxml_starbase.exceptions import InvalidBaseError
from rdfxml_starbase.uris import RDF_NS, join_uri, rdf


BASE = "http://a/b/c"


class TestAbsoluteReferences:
    @pytest.mark.parametrize("reference", [
        "http://other/x",
        "mailto:someone@example.org",
        "urn:isbn:0451450523",
    ])
    @pytest.mark.parametrize("base", [BASE, "", "nobase", "file:/tmp/doc"])
    def test_absolute_reference_overrides_base(self, reference, base):
        assert join_uri(reference, base) == reference


class TestEmptyAndFragment:
    def test_empty_reference_returns_base(self):
        assert join_uri("", BASE) == "http://a/b/c"

    def test_empty_reference_strips_base_fragment(self):
        assert join_uri("", "http://a/b/c#frag") == "http://a/b/c"

    def test_fragment_reference(self):
        assert join_uri("#frag", BASE) == "http://a/b/c#frag"

    def test_fragment_replaces_base_fragment(self):
        assert join_uri("#new", "http://a/b/c#old") == "http://a/b/c#new"

    def test_fragment_at_start_of_base_is_kept(self):
        assert join_uri("", "#x") == "#x"


class TestRelativeReferences:
    def test_relative_path_drops_filename(self):
        assert join_uri("d/e", BASE) == "http://a/b/d/e"

    def test_absolute_path(self):
        assert join_uri("/x", BASE) == "http://a/x"

    def test_network_path(self):
        assert join_uri("//other/p", BASE) == "http://other/p"

    def test_base_ending_in_slash_keeps_path(self):
        assert join_uri("d", "http://a/b/") == "http://a/b/d"

    def test_parent_segment_collapsed(self):
        assert join_uri("../d", "http://a/b/c/e") == "http://a/b/d"

    def test_dot_segment_removed(self):
        assert join_uri("./d", BASE) == "http://a/b/d"

    def test_trailing_dot_normalized(self):
        assert join_uri(".", BASE) == "http://a/b/"

    def test_leading_parent_segments_keep_legacy_result(self):
        # No segment precedes the second "..", so it is only partly removed
        assert join_uri("../../x", "http://a/b") == "http://a.x"


class TestBasesWithoutPath:
    def test_host_only_base(self):
        assert join_uri("x", "http://a") == "http://a/x"

    def test_empty_authority(self):
        assert join_uri("x", "http://") == "http:x"

    def test_opaque_base(self):
        assert join_uri("x", "urn:isbn") == "urn:isbn/x"

    def test_path_without_authority(self):
        assert join_uri("c", "file:/a/b") == "file:/a/c"


class TestInvalidBase:
    def test_empty_base_returns_reference(self):
        assert join_uri("d/e", "") == "d/e"

    def test_base_without_scheme_raises(self):
        with pytest.raises(InvalidBaseError) as exc_info:
            join_uri("d/e", "nobase")
        assert exc_info.value.base == "nobase"


def test_rdf_helper():
    assert rdf("type") == RDF_NS + "type"
