"""HTTP client with explicit session cookies and error mapping."""
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from jsbin_export.errors import NetworkError
from jsbin_export.fetch.endpoints import item_url, list_url
from jsbin_export.parse.models import ListItem
from jsbin_export.parse.page import flatten_list

logger = logging.getLogger(__name__)

MAX_REDIRECTS = 20


class FetchClient:
    """Async HTTP client for the JS Bin endpoints.

    No retries: every transport error or non-2xx status is raised as a
    NetworkError. The session cookie is passed by the caller on each
    request and re-attached on every same-host redirect; the client's own
    cookie jar is emptied after every response.
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=False,  # Followed in request() with the session cookie
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        cookie: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
        data: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        """Send a request and return the response once its status is checked."""
        request_headers = dict(headers or {})
        if cookie:
            request_headers["Cookie"] = cookie
        logger.debug(f"{method} {url}")
        try:
            response = await self.client.request(
                method, url, headers=request_headers, data=data
            )
            hops = 0
            while response.next_request is not None:
                if hops >= MAX_REDIRECTS:
                    raise httpx.TooManyRedirects(
                        f"Exceeded {MAX_REDIRECTS} redirects", request=response.request
                    )
                hops += 1
                response = await self.client.send(
                    self._redirect_request(response, cookie)
                )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NetworkError(
                f"{method} {url} returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise NetworkError(f"{method} {url} failed: {e!r}") from e
        finally:
            self.client.cookies.clear()
        return response

    def _redirect_request(self, response: httpx.Response, cookie: Optional[str]) -> httpx.Request:
        """Next hop of a redirect, carrying the session cookie only to the same host."""
        next_request = response.next_request
        # httpx fills Cookie from its own jar on redirects
        next_request.headers.pop("Cookie", None)
        if cookie and next_request.url.host == response.request.url.host:
            next_request.headers["Cookie"] = cookie
        logger.debug(f"Redirected to {next_request.url}")
        return next_request

    async def get(self, url: str, cookie: Optional[str] = None, headers: Optional[dict[str, str]] = None) -> httpx.Response:
        return await self.request("GET", url, cookie=cookie, headers=headers)

    async def post(
        self,
        url: str,
        data: dict[str, str],
        cookie: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        return await self.request("POST", url, cookie=cookie, headers=headers, data=data)

    async def fetch_list(self, cookie: str) -> list[ListItem]:
        """Fetch the user's saved bins as a single ordered list."""
        url = list_url(self.base_url)
        response = await self.get(url, cookie=cookie)
        try:
            entries = flatten_list(response.json())
            return [ListItem.model_validate(entry) for entry in entries]
        except (ValueError, ValidationError) as e:
            raise NetworkError(f"Unexpected list payload from {url}: {e}") from e

    async def fetch_item(self, item: ListItem, cookie: str) -> str:
        """Fetch the quiet view of a bin."""
        response = await self.get(item_url(self.base_url, item.url), cookie=cookie)
        return response.text
