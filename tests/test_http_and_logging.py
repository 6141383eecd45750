"""Tests for the shared HTTP helpers and structured logging utilities."""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest
import requests

from common.http_client import get_json, safe_get, stream_to_file
from common.logging_utils import JsonFormatter, Timer, extra_context, safe_url
from constants import Constants


def _response(status=200, text="", chunks=()):
    res = MagicMock()
    res.status_code = status
    res.ok = 200 <= status < 300
    res.text = text
    res.iter_content.return_value = iter(chunks)
    return res


class TestSafeGet:
    """Single outbound request with consistent defaults."""

    @patch('common.http_client.requests.get')
    def test_defaults(self, mock_get):
        mock_get.return_value = _response()

        safe_get("https://api.example.test/x", context="core")

        _, kwargs = mock_get.call_args
        assert kwargs["timeout"] == Constants.REQUEST_TIMEOUT
        assert kwargs["headers"]["User-Agent"] == Constants.USER_AGENT
        assert mock_get.call_count == 1

    @patch('common.http_client.requests.get')
    def test_transport_error_reraised(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(requests.ConnectionError):
            safe_get("https://api.example.test/x", context="plugin")
        assert mock_get.call_count == 1


class TestGetJson:
    """Status and body decoding."""

    @patch('common.http_client.requests.get')
    def test_decodes_body(self, mock_get):
        mock_get.return_value = _response(text='{"offers": []}')
        assert get_json("https://api.example.test/x", context="core") == (200, {"offers": []})

    @patch('common.http_client.requests.get')
    def test_literal_false(self, mock_get):
        mock_get.return_value = _response(text="false")
        assert get_json("https://api.example.test/x", context="theme") == (200, False)

    @patch('common.http_client.requests.get')
    def test_non_2xx_has_no_body(self, mock_get):
        mock_get.return_value = _response(status=503, text="oops")
        assert get_json("https://api.example.test/x", context="core") == (503, None)

    @patch('common.http_client.requests.get')
    def test_undecodable_body(self, mock_get):
        mock_get.return_value = _response(text="<html>")
        with pytest.raises(ValueError):
            get_json("https://api.example.test/x", context="core")

    @patch('common.http_client.requests.get')
    def test_literal_null(self, mock_get):
        mock_get.return_value = _response(text="null")
        assert get_json("https://api.example.test/x", context="plugin") == (200, None)


class TestStreamToFile:
    """Archive streaming."""

    @patch('common.http_client.requests.get')
    def test_writes_chunks(self, mock_get, tmp_path):
        res = _response(chunks=[b"PK", b"", b"data"])
        mock_get.return_value = res
        target = tmp_path / "a.zip"

        assert stream_to_file("https://dl.example.test/a.zip", str(target), context="download") == 200

        assert target.read_bytes() == b"PKdata"
        res.close.assert_called_once()

    @patch('common.http_client.requests.get')
    def test_error_status_writes_nothing(self, mock_get, tmp_path):
        mock_get.return_value = _response(status=404)
        target = tmp_path / "a.zip"

        assert stream_to_file("https://dl.example.test/a.zip", str(target), context="download") == 404
        assert not target.exists()


class TestLoggingUtils:
    """Structured context helpers."""

    def test_extra_context_drops_none(self):
        assert extra_context(event="x", target=None) == {"wpscaffold_context": {"event": "x"}}

    def test_json_formatter_merges_context(self):
        record = logging.LogRecord("wpscaffold.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        record.wpscaffold_context = {"event": "resolve", "slug": "akismet"}

        payload = json.loads(JsonFormatter().format(record))

        assert payload["message"] == "hello world"
        assert payload["severity"] == "info"
        assert payload["slug"] == "akismet"

    @pytest.mark.parametrize("url,expected", [
        ("https://user:pw@example.test/a?x=1", "https://example.test/a?x=1"),
        ("https://example.test/a?api_key=abc&x=1", "https://example.test/a?api_key=%5BREDACTED%5D&x=1"),
        ("https://example.test/plain", "https://example.test/plain"),
    ])
    def test_safe_url(self, url, expected):
        assert safe_url(url) == expected

    def test_timer(self):
        with Timer() as t:
            pass
        assert t.duration_ms() >= 0
