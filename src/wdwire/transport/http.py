"""HTTP transport implementation for the WebDriver wire protocol."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from wdwire.config import SessionParams
from wdwire.lib import oj
from wdwire.transport.base import (
    Transport,
    TransportError,
    ConnectionError,
    TimeoutError,
    SessionError,
    Reply,
)
from wdwire.transport.types import (
    TransportConfig,
    TransportEvent,
    TransportEventType,
)

logger = logging.getLogger(__name__)


def _refused_code(error: BaseException) -> str | None:
    """Return "ECONNREFUSED" if the error chain contains a refused socket."""
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, ConnectionRefusedError):
            return "ECONNREFUSED"
        if "connection refused" in str(current).lower():
            return "ECONNREFUSED"
        current = current.__cause__ or current.__context__
    return None


class HTTPTransport(Transport):
    """
    JSON over HTTP transport.

    The request URL is derived from the live SessionParams on every call,
    so a direct-connect rewrite of the connection fields applies to all
    requests that follow it.
    """

    def __init__(
        self,
        params: SessionParams,
        config: TransportConfig | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the transport.

        Args:
            params: Session parameters holding the connection fields.
            config: HTTP settings (derived from params if omitted).
            http_transport: Optional httpx transport, mainly for tests.
        """
        super().__init__(config or TransportConfig.from_params(params))
        self.params = params
        self._http_transport = http_transport
        self._client: httpx.AsyncClient | None = None
        self._connected: bool = False

    def url_for(self, path: str, use_base_path: bool = True) -> str:
        """Build the absolute URL of an endpoint."""
        p = self.params
        root = f"{p.protocol}://{p.hostname}:{p.port}"
        if not use_base_path:
            return root + path
        base = (p.path or "").rstrip("/")
        if base and not base.startswith("/"):
            base = "/" + base
        return root + base + path

    async def connect(self) -> None:
        """Initialize the HTTP client."""
        if self._connected:
            return

        self._emit_event(
            TransportEvent(
                type=TransportEventType.CONNECTING,
                timestamp=time.time(),
                data={"url": self.params.base_url},
            )
        )

        try:
            timeout = httpx.Timeout(
                connect=self.config.connect_timeout,
                read=self.config.timeout,
                write=self.config.timeout,
                pool=self.config.timeout,
            )
            self._client = httpx.AsyncClient(
                timeout=timeout,
                headers=self.config.headers,
                verify=self.config.verify_ssl,
                transport=self._http_transport,
            )
            self._connected = True
        except Exception as e:
            raise ConnectionError(f"Failed to initialize HTTP client: {e}", cause=e)

        self._emit_event(
            TransportEvent(
                type=TransportEventType.CONNECTED,
                timestamp=time.time(),
            )
        )

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if not self._connected and self._client is None:
            return

        self._emit_event(
            TransportEvent(
                type=TransportEventType.DISCONNECTING,
                timestamp=time.time(),
            )
        )

        if self._client:
            await self._client.aclose()
            self._client = None

        self._connected = False

        self._emit_event(
            TransportEvent(
                type=TransportEventType.DISCONNECTED,
                timestamp=time.time(),
            )
        )

    async def send(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        *,
        use_base_path: bool = True,
    ) -> Reply:
        """
        Send one request and decode the reply.

        HTTP error statuses are returned, not raised, so the caller can
        classify the WebDriver error body.
        """
        if not self._client or not self._connected:
            raise SessionError("Transport not connected")

        url = self.url_for(path, use_base_path)
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json; charset=utf-8",
        }
        content = oj.dumps(body) if body is not None else None

        logger.debug(f"[{method}] {url}")
        if content is not None:
            logger.debug(f"DATA {content}")

        self._emit_event(
            TransportEvent(
                type=TransportEventType.REQUEST_SENT,
                timestamp=time.time(),
                data={"method": method, "url": url},
            )
        )

        try:
            response = await self._client.request(
                method,
                url,
                content=content,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            self._emit_error(e)
            raise TimeoutError(f"Request timed out: {e}", cause=e)
        except httpx.ConnectError as e:
            self._emit_error(e)
            code = _refused_code(e)
            prefix = f"connect {code} " if code else ""
            raise ConnectionError(f"{prefix}{url}: {e}", cause=e, code=code)
        except httpx.HTTPError as e:
            self._emit_error(e)
            raise TransportError(f"HTTP error: {e}", cause=e)

        decoded = self._decode(response)

        self._emit_event(
            TransportEvent(
                type=TransportEventType.RESPONSE_RECEIVED,
                timestamp=time.time(),
                data={"status": response.status_code, "url": url},
            )
        )
        logger.debug(f"RESULT {response.status_code} {decoded!r}")

        return response.status_code, decoded

    def _decode(self, response: httpx.Response) -> Any:
        """Decode JSON if possible, else return the text (None when empty)."""
        if not response.content:
            return None
        try:
            return oj.loads(response.content)
        except ValueError:
            return response.text

    def _emit_error(self, error: Exception) -> None:
        self._emit_event(
            TransportEvent(
                type=TransportEventType.ERROR,
                timestamp=time.time(),
                error=error,
            )
        )

    def is_connected(self) -> bool:
        """Check if transport is connected."""
        return self._connected
