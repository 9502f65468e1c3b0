"""Transporte HTTP sobre httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y verificación TLS.
- Traduce cualquier fallo de httpx (red, timeout, status, URL inválida) a
  `TransportError`. Un 3xx también falla: un redirect convertiría el POST en GET.
- Facilita testeo: el `httpx.Client` se puede construir con un `MockTransport`.
"""

from __future__ import annotations

import logging

import httpx

from rtorrent_rpc.core.config import AppSettings
from rtorrent_rpc.core.errors import TransportError

logger = logging.getLogger(__name__)

XML_CONTENT_TYPE = "text/xml"


def build_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` con los defaults de la aplicación."""

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Content-Type": XML_CONTENT_TYPE,
        "Accept": XML_CONTENT_TYPE,
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=False,
        verify=settings.verify_tls,
        headers=headers,
        transport=transport,
    )


class HttpTransport:
    """Implementación de `Transport` con POST XML-RPC."""

    def __init__(self, client: httpx.Client | None = None, settings: AppSettings | None = None) -> None:
        self._client = client or build_client(settings)

    def send(self, endpoint: str, body: bytes) -> bytes:
        try:
            response = self._client.post(endpoint, content=body)
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as exc:
            logger.debug("transport failure against %s: %s", endpoint, exc)
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc

        if not response.is_success:
            logger.warning("daemon answered HTTP %s at %s", response.status_code, endpoint)
            raise TransportError(f"HTTP {response.status_code} from {endpoint}")
        return response.content

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
