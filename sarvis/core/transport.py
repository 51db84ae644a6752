# sarvis/core/transport.py

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import httpx
import requests

from .logger import get_logger, mask_headers

logger = get_logger(__name__)

# Clés d'options transmises telles quelles au client HTTP sous-jacent
PASSTHROUGH_OPTIONS = ("params", "timeout", "follow_redirects", "cookies")


class FetchResponse:
    """
    Réponse uniforme renvoyée par les transports : `ok` + `json()`.
    La réponse native (httpx ou requests) reste accessible via `raw`.
    """

    def __init__(self, raw: Any):
        self.raw = raw

    @property
    def status_code(self) -> int:
        return self.raw.status_code

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def headers(self):
        return self.raw.headers

    @property
    def text(self) -> str:
        return self.raw.text

    @property
    def url(self) -> str:
        return str(self.raw.url)

    def json(self) -> Any:
        return self.raw.json()

    def __repr__(self) -> str:
        return f"<FetchResponse [{self.status_code}] {self.url}>"


def _encode_body(body: Any) -> Any:
    """str -> bytes utf-8 ; objet Python (dict, list...) -> JSON compact ; bytes et None inchangés."""
    if body is None or isinstance(body, (bytes, bytearray)):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body, separators=(",", ":")).encode("utf-8")


def _log_response(response) -> None:
    # Le body n'est décodé que si le niveau DEBUG est actif
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"⬅️ Response {response.status_code}: {response.text[:300]}")


class HttpxTransport:
    """Transport asynchrone basé sur httpx.AsyncClient."""

    def __init__(self, timeout: float = 10.0, client: Optional[httpx.AsyncClient] = None):
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        # Instancié à la première requête pour rester dans la boucle asyncio courante
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def __call__(self, url: str, options: Dict[str, Any]) -> FetchResponse:
        method = options.get("method") or "GET"
        extra = {key: options[key] for key in PASSTHROUGH_OPTIONS if key in options}
        logger.debug(f"➡️ {method} {url} | headers={mask_headers(options.get('headers'))}")

        response = await self.client.request(
            method,
            url,
            headers=options.get("headers"),
            content=_encode_body(options.get("body")),
            **extra,
        )

        _log_response(response)
        return FetchResponse(response)

    async def aclose(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


class RequestsTransport:
    """
    Transport basé sur requests.Session.
    L'appel bloquant est exécuté dans un thread pour ne pas bloquer la boucle asyncio.
    """

    def __init__(self, timeout: float = 10, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    async def __call__(self, url: str, options: Dict[str, Any]) -> FetchResponse:
        method = options.get("method") or "GET"
        logger.debug(f"➡️ {method} {url} | headers={mask_headers(options.get('headers'))}")

        response = await asyncio.to_thread(
            self.session.request,
            method,
            url,
            headers=options.get("headers"),
            data=_encode_body(options.get("body")),
            params=options.get("params"),
            cookies=options.get("cookies"),
            timeout=options.get("timeout", self.timeout),
            allow_redirects=options.get("follow_redirects", True),
        )

        _log_response(response)
        return FetchResponse(response)

    def close(self):
        """Fermeture synchrone de la session requests."""
        self.session.close()

    async def aclose(self):
        self.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
