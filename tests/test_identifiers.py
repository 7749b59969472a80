"""Tests for canonical identifier extraction."""

import pytest

from ror_importer.identifiers import extract_id_from, has_expected_shape


class TestExtractIdFrom:
    def test_ror_uri(self):
        assert extract_id_from("https://ror.org/05dxps055") == "05dxps055"

    def test_other_host(self):
        assert extract_id_from("https://registry.example/0abc123xy") == "0abc123xy"

    def test_trailing_slash(self):
        assert extract_id_from("https://ror.org/05dxps055/") == "05dxps055"

    def test_surrounding_whitespace(self):
        assert extract_id_from("  https://ror.org/05dxps055 \n") == "05dxps055"

    def test_bare_identifier_is_returned_unchanged(self):
        assert extract_id_from("05dxps055") == "05dxps055"

    def test_host_only_uri_falls_back_to_last_segment(self):
        assert extract_id_from("https://ror.org/") == "ror.org"

    def test_slashes_only_never_yields_empty(self):
        assert extract_id_from("///") != ""

    @pytest.mark.parametrize(
        "full_id",
        [
            "https://ror.org/05dxps055",
            "https://ror.org/05dxps055/",
            "ror.org/abc",
            "plain",
            "///",
            "http://x/y/z",
        ],
    )
    def test_idempotent(self, full_id):
        once = extract_id_from(full_id)
        assert extract_id_from(full_id) == once
        assert extract_id_from(once) == once


class TestHasExpectedShape:
    @pytest.mark.parametrize(
        "full_id",
        ["https://ror.org/05dxps055", "http://registry.example/0abc123xy"],
    )
    def test_uri_forms(self, full_id):
        assert has_expected_shape(full_id)

    @pytest.mark.parametrize(
        "full_id",
        ["05dxps055", "https://ror.org/", "https://ror.org/a/b", "ftp://ror.org/abc", ""],
    )
    def test_unexpected_forms(self, full_id):
        assert not has_expected_shape(full_id)
