"""
HTTP client module for the metadata extractor.

This module loads page HTML over HTTP, both blocking and async, using httpx.
Timeouts are applied per request; failures are logged and re-raised to the
caller unchanged. No retries are attempted.
"""
import threading
import time
from typing import Dict, Optional, Union

import httpx
import structlog

# Set up structured logger
logger = structlog.get_logger()

# Constants
DEFAULT_USER_AGENT = "Metaextractor/0.1.0 (+https://github.com/metaextractor/metaextractor)"
DEFAULT_TIMEOUT = 10.0  # seconds


class PageContentLoader:
    """
    Loads the HTML body of a page.

    By default every call opens and closes its own client. With
    ``use_single_http_client`` one client per flavour (sync/async) is created
    on first use and reused until ``close()``/``aclose()``.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        use_single_http_client: bool = False,
        user_agent: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the loader.

        Args:
            timeout: Request timeout in seconds
            use_single_http_client: Reuse one client across requests
            user_agent: User agent string to use for requests
            headers: Default headers to include in all requests
            transport: Optional httpx transport for the blocking client
            async_transport: Optional httpx transport for the async client
        """
        self.timeout = timeout
        self.use_single_http_client = use_single_http_client
        self.user_agent = user_agent or DEFAULT_USER_AGENT

        # Set up default headers
        self.default_headers = dict(headers or {})
        if "User-Agent" not in self.default_headers:
            self.default_headers["User-Agent"] = self.user_agent

        self._transport = transport
        self._async_transport = async_transport
        self._client: Optional[httpx.Client] = None
        self._async_client: Optional[httpx.AsyncClient] = None
        self._client_lock = threading.Lock()

    def _new_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.timeout,
            follow_redirects=True,
            headers=self.default_headers,
            transport=self._transport,
        )

    def _new_async_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers=self.default_headers,
            transport=self._async_transport,
        )

    def _shared_client(self) -> httpx.Client:
        # Blocking callers may share the loader across threads
        with self._client_lock:
            if self._client is None or self._client.is_closed:
                self._client = self._new_client()
            return self._client

    def _shared_async_client(self) -> httpx.AsyncClient:
        if self._async_client is None or self._async_client.is_closed:
            self._async_client = self._new_async_client()
        return self._async_client

    def load_page_content(self, url: Union[str, httpx.URL]) -> str:
        """
        Fetch a page and return its decoded body.

        Args:
            url: URL to fetch

        Returns:
            str: Response text

        Raises:
            httpx.HTTPError: If the HTTP request fails
        """
        if self.use_single_http_client:
            return self._get(self._shared_client(), url)

        with self._new_client() as client:
            return self._get(client, url)

    async def load_page_content_async(self, url: Union[str, httpx.URL]) -> str:
        """
        Fetch a page asynchronously and return its decoded body.

        Args:
            url: URL to fetch

        Returns:
            str: Response text

        Raises:
            httpx.HTTPError: If the HTTP request fails
        """
        if self.use_single_http_client:
            return await self._get_async(self._shared_async_client(), url)

        async with self._new_async_client() as client:
            return await self._get_async(client, url)

    def _get(self, client: httpx.Client, url: Union[str, httpx.URL]) -> str:
        start_time = time.time()
        try:
            response = client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("HTTP request failed", url=str(url), error=str(e))
            raise

        self._log_success(url, response, start_time)
        return response.text

    async def _get_async(self, client: httpx.AsyncClient, url: Union[str, httpx.URL]) -> str:
        start_time = time.time()
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("HTTP request failed", url=str(url), error=str(e))
            raise

        self._log_success(url, response, start_time)
        return response.text

    @staticmethod
    def _log_success(url: Union[str, httpx.URL], response: httpx.Response, start_time: float) -> None:
        logger.debug(
            "HTTP request successful",
            url=str(url),
            status_code=response.status_code,
            elapsed_seconds=time.time() - start_time,
        )

    def close(self) -> None:
        """Close the shared blocking client."""
        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    async def aclose(self) -> None:
        """Close both shared clients."""
        self.close()
        if self._async_client is not None:
            await self._async_client.aclose()
            self._async_client = None
