"""Tests for resource URI parsing."""

import pytest

from storylens.core.errors import ErrorCode, ResourceUriError
from storylens.mcp.uri import ParsedUri, ResourceType, SubResource, parse_resource_uri


class TestParseResourceUri:
    @pytest.mark.parametrize(
        ("uri", "expected"),
        [
            ("storyteller://characters", ParsedUri(ResourceType.CHARACTERS)),
            ("storyteller://character/hero", ParsedUri(ResourceType.CHARACTER, "hero")),
            ("storyteller://project/structure", ParsedUri(ResourceType.PROJECT, "structure")),
            (
                "storyteller://character/hero/phases",
                ParsedUri(ResourceType.CHARACTER, "hero", SubResource.PHASES),
            ),
            (
                "storyteller://character/hero/phase/awakening",
                ParsedUri(ResourceType.CHARACTER, "hero", SubResource.PHASE, "awakening"),
            ),
            (
                "storyteller://character/hero/snapshot/awakening",
                ParsedUri(ResourceType.CHARACTER, "hero", SubResource.SNAPSHOT, "awakening"),
            ),
        ],
    )
    def test_valid(self, uri: str, expected: ParsedUri) -> None:
        assert parse_resource_uri(uri) == expected

    def test_percent_encoded_id(self) -> None:
        parsed = parse_resource_uri("storyteller://character/%E7%8E%8B%E5%AD%90")
        assert parsed.id == "王子"

    def test_unknown_sub_resource_ignored(self) -> None:
        parsed = parse_resource_uri("storyteller://character/hero/friends/x")
        assert parsed == ParsedUri(ResourceType.CHARACTER, "hero")

    def test_trailing_slash(self) -> None:
        assert parse_resource_uri("storyteller://settings/") == ParsedUri(ResourceType.SETTINGS)

    @pytest.mark.parametrize("uri", ["characters", "://characters", "storyteller:///characters", ""])
    def test_invalid(self, uri: str) -> None:
        with pytest.raises(ResourceUriError) as exc_info:
            parse_resource_uri(uri)
        assert exc_info.value.code == ErrorCode.RESOURCE_INVALID_URI

    def test_unsupported_scheme(self) -> None:
        with pytest.raises(ResourceUriError) as exc_info:
            parse_resource_uri("http://characters")
        assert exc_info.value.code == ErrorCode.RESOURCE_UNSUPPORTED_SCHEME
        assert exc_info.value.details["scheme"] == "http"

    def test_unsupported_type(self) -> None:
        with pytest.raises(ResourceUriError) as exc_info:
            parse_resource_uri("storyteller://villains")
        assert exc_info.value.code == ErrorCode.RESOURCE_UNSUPPORTED_TYPE
        assert exc_info.value.details["type"] == "villains"

    def test_error_codes_distinct(self) -> None:
        codes = set()
        for uri in ("nope", "http://x", "storyteller://x"):
            with pytest.raises(ResourceUriError) as exc_info:
                parse_resource_uri(uri)
            codes.add(exc_info.value.code)
        assert len(codes) == 3
