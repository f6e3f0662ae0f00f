# coding: utf-8
"""
Classification of transport failures into retryable and fatal ones.
"""

import asyncio
import time
from typing import Dict, Optional

import httpx
import requests

from fsops.exceptions import TransportError

RETRY_STATUS_CODES = {408, 429, 500, 502, 503, 504}


class RetryableRequestException(Exception):
    """Raised when a failed request may succeed on another attempt."""


def _status_code(response) -> Optional[int]:
    if response is None:
        return None
    return getattr(response, "status_code", None)


def _is_retryable_requests(exc: Exception, response) -> bool:
    if isinstance(exc, (requests.exceptions.ConnectionError, requests.exceptions.Timeout)):
        return True
    if isinstance(exc, requests.exceptions.HTTPError):
        return _status_code(response) in RETRY_STATUS_CODES
    return False


def _is_retryable_httpx(exc: Exception, response) -> bool:
    if isinstance(exc, (httpx.TransportError, httpx.TimeoutException)):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return _status_code(response) in RETRY_STATUS_CODES
    return False


def _retry_suffix(retry_info: Optional[Dict]) -> str:
    if not retry_info:
        return ""
    return " (retry {}/{})".format(retry_info["retry_idx"], retry_info["retry_limit"])


def _handle(
    external_logger,
    exc: Exception,
    api_method_name: str,
    url: str,
    retryable: bool,
    verbose: bool,
    swallow_exc: bool,
    response,
    retry_info: Optional[Dict],
):
    if retryable:
        if verbose:
            external_logger.warning(
                "Retrying %s %s after error: %s%s",
                api_method_name,
                url,
                exc,
                _retry_suffix(retry_info),
            )
        if not swallow_exc:
            raise RetryableRequestException(str(exc)) from exc
        return

    external_logger.error("Request %s %s failed: %s", api_method_name, url, exc)
    raise TransportError(str(exc), status_code=_status_code(response)) from exc


def process_requests_exception(
    external_logger,
    exc: Exception,
    api_method_name: str,
    url: str,
    verbose: bool = True,
    swallow_exc: bool = False,
    sleep_sec: Optional[float] = None,
    response: Optional[requests.Response] = None,
    retry_info: Optional[Dict] = None,
):
    """
    Log a failed `requests` call and decide whether the caller may retry.

    Retryable failures (connection errors, timeouts, 408/429/5xx) sleep for
    ``sleep_sec`` and return, or raise :class:`RetryableRequestException` when
    ``swallow_exc`` is False. Anything else raises :class:`TransportError`.
    """
    retryable = _is_retryable_requests(exc, response)
    _handle(
        external_logger,
        exc,
        api_method_name,
        url,
        retryable,
        verbose,
        swallow_exc,
        response,
        retry_info,
    )
    if sleep_sec:
        time.sleep(sleep_sec)


async def process_requests_exception_async(
    external_logger,
    exc: Exception,
    api_method_name: str,
    url: str,
    verbose: bool = True,
    swallow_exc: bool = False,
    sleep_sec: Optional[float] = None,
    response: Optional[httpx.Response] = None,
    retry_info: Optional[Dict] = None,
):
    """Same as :func:`process_requests_exception` for `httpx` failures."""
    retryable = _is_retryable_httpx(exc, response)
    _handle(
        external_logger,
        exc,
        api_method_name,
        url,
        retryable,
        verbose,
        swallow_exc,
        response,
        retry_info,
    )
    if sleep_sec:
        await asyncio.sleep(sleep_sec)


def process_unhandled_request(external_logger, exc: Exception):
    """Log an unexpected failure and surface it as a transport error."""
    external_logger.exception("Unexpected error during request: %s", exc)
    raise TransportError(f"{type(exc).__name__}: {exc}") from exc
