# coding: utf-8
"""HTTP connection to the filesystem service."""

from __future__ import annotations

import logging
import os
from typing import Dict, Optional

import httpx
import requests

from fsops.exceptions import TransportError
from fsops.io.network_exceptions import (
    process_requests_exception,
    process_requests_exception_async,
    process_unhandled_request,
)

API_VERSION = None  # "v1"

logger = logging.getLogger(__name__)


class _Api:
    """
    Connection to the filesystem service which allows the client to query it.
    """

    def __init__(
        self,
        server_address: Optional[str] = None,
        token: Optional[str] = None,
        retry_count: Optional[int] = 10,
        retry_sleep_sec: Optional[float] = None,
        external_client: Optional[bool] = True,  # False when talking to the service directly
    ):
        if not server_address:
            raise ValueError("server_address is required")

        # authorization
        self._token = token
        self._server_address = server_address.rstrip("/")
        self._headers = {"Authorization": f"Bearer {self._token}"} if self._token else {}
        self._additional_headers = {}
        self._external_client = external_client

        # logger
        self.logger = logger

        # retry settings
        self._retry_count = retry_count
        if self._retry_count is None:
            self._retry_count = int(os.getenv("FSOPS_RETRY_COUNT", 10))
        self._retry_sleep_sec = retry_sleep_sec
        if self._retry_sleep_sec is None:
            self._retry_sleep_sec = float(os.getenv("FSOPS_RETRY_SLEEP_SEC", 1))

        # httpx client
        self._async_httpx_client: Optional[httpx.AsyncClient] = None

    def get(
        self,
        method: str,
        params: Optional[Dict] = None,
        retries: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """
        Performs GET request to server with given parameters.

        :param method: Method name, relative to the API root.
        :type method: str
        :param params: Query parameters.
        :type params: dict, optional
        :param retries: The number of attempts to connect to the server.
        :type retries: int, optional
        :param headers: Custom headers to include in the request.
        :type headers: dict, optional
        :return: Response object
        :rtype: :class:`Response<Response>`
        :raises TransportError: if the server is unreachable or answers with an error.
        """
        if retries is None:
            retries = self._retry_count

        url = self._prepare_url(method)
        self.logger.info(f"GET {url}")
        headers = self._merge_headers(headers)

        for retry_idx in range(retries):
            response = None
            try:
                response = requests.get(url, params=params, headers=headers)
                if response.status_code != requests.codes.ok:  # pylint: disable=no-member
                    _Api._raise_for_status(response)
                return response
            except requests.RequestException as exc:
                if (
                    isinstance(exc, requests.exceptions.HTTPError)
                    and response.status_code == 401
                    and self._token is None
                ):
                    self.logger.info("API_TOKEN env variable is undefined.")
                process_requests_exception(
                    self.logger,
                    exc,
                    method,
                    url,
                    verbose=True,
                    swallow_exc=True,
                    sleep_sec=self._backoff(retry_idx, retries),
                    response=response,
                    retry_info={"retry_idx": retry_idx + 1, "retry_limit": retries},
                )
            except Exception as exc:
                process_unhandled_request(self.logger, exc)
        raise TransportError("Retry limit exceeded ({!r})".format(url))

    async def get_async(
        self,
        method: str,
        params: Optional[Dict] = None,
        retries: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: httpx._types.TimeoutTypes = 60,
    ) -> httpx.Response:
        """
        Performs GET request to server with given parameters using httpx.

        :param method: Method name, relative to the API root.
        :type method: str
        :param params: Query parameters.
        :type params: dict, optional
        :param retries: The number of attempts to connect to the server.
        :type retries: int, optional
        :param headers: Custom headers to include in the request.
        :type headers: dict, optional
        :param timeout: Overall timeout for the request.
        :type timeout: float, optional
        :return: Response object
        :rtype: :class:`httpx.Response`
        :raises TransportError: if the server is unreachable or answers with an error.
        """
        self._set_async_client()

        if retries is None:
            retries = self._retry_count

        url = self._prepare_url(method)
        self.logger.info(f"GET {url}")
        headers = self._merge_headers(headers)

        for retry_idx in range(retries):
            response = None
            try:
                response = await self._async_httpx_client.get(
                    url, params=params, headers=headers, timeout=timeout
                )
                if response.status_code != httpx.codes.OK:
                    _Api._raise_for_status_httpx(response)
                return response
            except httpx.HTTPError as exc:
                await process_requests_exception_async(
                    self.logger,
                    exc,
                    method,
                    url,
                    verbose=True,
                    swallow_exc=True,
                    sleep_sec=self._backoff(retry_idx, retries),
                    response=response,
                    retry_info={"retry_idx": retry_idx + 1, "retry_limit": retries},
                )
            except Exception as exc:
                process_unhandled_request(self.logger, exc)
        raise TransportError("Retry limit exceeded ({!r})".format(url))

    async def aclose(self) -> None:
        """Close the httpx client opened by :meth:`get_async`, if any."""
        if self._async_httpx_client is not None:
            await self._async_httpx_client.aclose()
            self._async_httpx_client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    def _backoff(self, retry_idx: int, retries: int) -> float:
        # no sleep after the last attempt
        if retry_idx + 1 >= retries:
            return 0
        return min(self._retry_sleep_sec * (2**retry_idx), 60)

    def _merge_headers(self, headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        if headers is not None:
            return {**self._headers, **self._additional_headers, **headers}
        return {**self._headers, **self._additional_headers}

    def _set_async_client(self):
        if self._async_httpx_client is None:
            self._async_httpx_client = httpx.AsyncClient()

    def _prepare_url(self, method: str) -> str:
        """
        Prepares the API endpoint URL.
        """
        url = self.api_server_address
        if API_VERSION:
            url = f"{url}/{API_VERSION}"
        return f"{url}/{method.lstrip('/')}"

    @staticmethod
    def _raise_for_status(response: requests.Response):
        """
        Raise error and show message with error code if given response is not successful.
        :param response: Request class object
        """
        http_error_msg = ""
        if isinstance(response.reason, bytes):
            try:
                reason = response.reason.decode("utf-8")
            except UnicodeDecodeError:
                reason = response.reason.decode("iso-8859-1")
        else:
            reason = response.reason

        if 400 <= response.status_code < 500:
            http_error_msg = "%s Client Error: %s for url: %s (%s)" % (
                response.status_code,
                reason,
                response.url,
                response.content.decode("utf-8", errors="replace"),
            )

        elif 500 <= response.status_code < 600:
            http_error_msg = "%s Server Error: %s for url: %s (%s)" % (
                response.status_code,
                reason,
                response.url,
                response.content.decode("utf-8", errors="replace"),
            )

        if http_error_msg:
            raise requests.exceptions.HTTPError(http_error_msg, response=response)

    @staticmethod
    def _raise_for_status_httpx(response: httpx.Response):
        """
        Raise error and show message with error code if given response is not successful.
        :param response: Response class object
        """
        http_error_msg = ""

        if hasattr(response, "reason_phrase"):
            reason = response.reason_phrase
        else:
            reason = "Can't get reason"

        def decode_response_content(response: httpx.Response):
            try:
                return response.content.decode("utf-8")
            except Exception as e:
                return f"Can't decode response content: {e}"

        if 400 <= response.status_code < 500:
            http_error_msg = "%s Client Error: %s for url: %s (%s)" % (
                response.status_code,
                reason,
                response.url,
                decode_response_content(response),
            )

        elif 500 <= response.status_code < 600:
            http_error_msg = "%s Server Error: %s for url: %s (%s)" % (
                response.status_code,
                reason,
                response.url,
                decode_response_content(response),
            )

        if http_error_msg:
            raise httpx.HTTPStatusError(
                message=http_error_msg, response=response, request=response.request
            )

    @property
    def api_server_address(self) -> str:
        """
        Get API server address.

        :return: API server address.
        :rtype: :class:`str`
        :Usage example:

         .. code-block:: python

            import fsops

            api = fsops.Api(server_address='https://fs.example.com', token='4r47N...xaTatb')
            print(api.api_server_address)
            # Output:
            # 'https://fs.example.com/api'
        """
        if not self._external_client:
            return self._server_address
        return f"{self._server_address}/api"
