"""Shared HTTP helpers used by the registry client and the archive downloader.

Encapsulates the request/timeout handling and DEBUG traces so that callers
only translate failures into their own error kinds. There is no
retry or response cache here: each call is exactly one outbound request.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

_DEFAULT_HEADERS = {"User-Agent": Constants.USER_AGENT}


def safe_get(url: str, *, context: str, **kwargs: Any) -> requests.Response:
    """Perform a GET request with consistent error logging and DEBUG traces.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "core", "plugin").
        **kwargs: Passed through to requests.get.

    Returns:
        requests.Response: The HTTP response object, whatever its status.

    Raises:
        requests.RequestException: On timeouts and connection errors.
    """
    safe_target = safe_url(url)
    headers = dict(_DEFAULT_HEADERS)
    headers.update(kwargs.pop("headers", None) or {})
    timeout = kwargs.pop("timeout", Constants.REQUEST_TIMEOUT)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context
                )
            )
        try:
            res = requests.get(url, timeout=timeout, headers=headers, **kwargs)
        except requests.Timeout:
            logger.error(
                "%s request timed out after %s seconds",
                context,
                timeout,
            )
            raise
        except requests.RequestException as exc:  # includes ConnectionError
            logger.error("%s connection error: %s", context, exc)
            raise
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success" if res.ok else "non_2xx",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context
                )
            )
        return res


def get_json(
    url: str,
    *,
    context: str,
    params: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Optional[Any]]:
    """Perform GET request and parse a JSON body.

    Args:
        url: Target URL
        context: Source tag for logs
        params: Optional query parameters
        **kwargs: Additional requests.get parameters

    Returns:
        Tuple of (status_code, parsed_json_or_none). Non-2xx responses carry
        ``None``; a 2xx body of literal ``false`` or ``null`` is returned as is.

    Raises:
        requests.RequestException: On timeouts and connection errors.
        ValueError: When a 2xx body is not valid JSON.
    """
    res = safe_get(url, context=context, params=params, **kwargs)
    if not 200 <= res.status_code < 300:
        return res.status_code, None
    try:
        parsed = json.loads(res.text)
    except (TypeError, ValueError) as exc:
        if is_debug_enabled(logger):
            logger.debug(
                "JSON decode error",
                extra=extra_context(
                    event="parse",
                    component="http_client",
                    action="get_json",
                    outcome="json_decode_error",
                    status_code=res.status_code,
                    target=safe_url(url)
                )
            )
        raise ValueError(f"Response from {safe_url(url)} is not valid JSON") from exc
    return res.status_code, parsed


def stream_to_file(url: str, dest_path: str, *, context: str) -> int:
    """Stream a response body into ``dest_path``.

    Returns:
        The HTTP status code. The file is only written for 2xx responses.

    Raises:
        requests.RequestException: On timeouts and connection errors.
        OSError: When the destination file cannot be written.
    """
    res = safe_get(url, context=context, stream=True)
    try:
        if not 200 <= res.status_code < 300:
            return res.status_code
        with open(dest_path, "wb") as fh:
            for chunk in res.iter_content(chunk_size=Constants.DOWNLOAD_CHUNK_SIZE):
                if chunk:
                    fh.write(chunk)
        return res.status_code
    finally:
        res.close()
