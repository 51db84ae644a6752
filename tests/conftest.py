import pytest
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse
from httpx import AsyncClient, ASGITransport
from typing import AsyncGenerator
from pytest_asyncio import fixture as async_fixture

from sarvis.core.transport import HttpxTransport

ECHO_BASE_URL = "http://test"


# --- Application de test : renvoie ce qu'elle reçoit ---

echo_app = FastAPI()


@echo_app.get("/missing")
async def missing():
    raise HTTPException(status_code=404, detail="Not Found")


@echo_app.get("/not-json")
async def not_json():
    return PlainTextResponse("ceci n'est pas du JSON")


@echo_app.api_route("/echo/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def echo(path: str, request: Request):
    body = await request.body()
    return {
        "method": request.method,
        "path": "/" + path,
        "headers": dict(request.headers),
        "query": dict(request.query_params),
        "body": body.decode("utf-8") or None,
    }


# --- Fixtures ---

@async_fixture
async def echo_transport() -> AsyncGenerator[HttpxTransport, None]:
    """Transport httpx branché sur l'application echo, sans réseau."""
    transport = HttpxTransport(client=AsyncClient(transport=ASGITransport(app=echo_app)))
    yield transport
    await transport.aclose()


@pytest.fixture
def echo_base_url() -> str:
    return ECHO_BASE_URL
