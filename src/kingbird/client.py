"""JSON-over-HTTP transport used by queries."""

from typing import Any

import httpx
from loguru import logger

from .config import ClientConfig


class Client:
    """
    Sends one JSON request per call to the configured backend.

    Each call opens a short-lived `httpx.AsyncClient`, so nothing is pooled
    or shared between requests. A custom `httpx` transport can be injected,
    e.g. `httpx.MockTransport` in tests.

    Parameters
    ----------
    config : ClientConfig, optional
        Backend settings. Read from the environment when omitted.
    transport : httpx.AsyncBaseTransport, optional
        Transport handed to every `httpx.AsyncClient` this client opens.

    Examples
    --------
        >>> client = Client(ClientConfig(url="http://localhost:8888"))
        >>> status, body = await client.send("GET", "/users/42")
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or ClientConfig()
        self.transport = transport

    @property
    def url(self) -> str:
        return self.config.url

    def build_url(self, path: str) -> str:
        """Join a route path onto the base url."""
        return f"{self.config.url}/{path.lstrip('/')}"

    async def send(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> tuple[int, Any]:
        """
        Perform one request and decode its JSON body.

        Returns
        -------
        tuple[int, Any]
            The status code and the decoded body (None when empty). A
            non-JSON body on an error status is returned as text.

        Raises
        ------
        httpx.HTTPError
            On transport failures; passed through unchanged.
        ValueError
            If a 200 response carries a body that is not valid JSON.
        """
        url = self.build_url(path)
        logger.debug(f"{method} {url}")

        async with httpx.AsyncClient(
            transport=self.transport,
            headers=self.config.headers,
            timeout=self.config.timeout,
        ) as client:
            response = await client.request(method, url, json=body, params=params)

        return response.status_code, _decode(response)


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        if response.status_code == 200:
            raise
        return response.text
