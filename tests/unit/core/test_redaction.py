"""Unit tests for log redaction of launch identifiers."""

import pytest
from starlette.requests import Request

from app.core.logging.middleware import redact_query
from app.core.utils.text import mask_identifier


pytestmark = pytest.mark.unit


def _request(query: bytes) -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "scheme": "http",
            "server": ("test", 80),
            "path": "/api/v1/prompts",
            "query_string": query,
            "headers": [],
        }
    )


class TestMaskIdentifier:
    def test_keeps_short_prefix(self):
        assert mask_identifier("BFSHDH1284FHT") == "BFSH***"

    def test_short_values_are_fully_masked(self):
        assert mask_identifier("AB") == "***"

    def test_nothing_to_mask(self):
        assert mask_identifier(None) is None
        assert mask_identifier("") is None


class TestRedactQuery:
    def test_masks_identifiers_and_drops_token(self):
        request = _request(
            b"location=BFSHDH1284FHT&user=ZXCV98765&token=eyJhbGciOi&purpose=x"
        )

        assert redact_query(request) == {
            "location": "BFSH***",
            "user": "ZXCV***",
            "purpose": "x",
        }

    def test_no_query(self):
        assert redact_query(_request(b"")) is None
