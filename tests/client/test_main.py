import pytest
from unittest.mock import AsyncMock, MagicMock

from sarvis.client.main import main
from sarvis.client.request_client import RequestClient


def make_transport(payload, ok=True, status_code=200):
    response = MagicMock(ok=ok, status_code=status_code)
    response.json = MagicMock(return_value=payload)
    return AsyncMock(return_value=response)


@pytest.mark.asyncio
async def test_main_prints_todo(capsys):
    todo = {"userId": 1, "id": 1, "title": "delectus aut autem", "completed": False}
    transport = make_transport(todo)
    client = RequestClient({"base_url": "https://demo.example.com"}, transport=transport)

    result = await main(client=client)

    assert result == todo
    transport.assert_awaited_once()
    assert transport.call_args.args[0] == "https://demo.example.com/todos/1"
    assert '"title": "delectus aut autem"' in capsys.readouterr().out
    transport.aclose.assert_awaited_once()


@pytest.mark.asyncio
async def test_main_reports_failure(capsys):
    client = RequestClient({"base_url": "https://demo.example.com"}, transport=make_transport(None, ok=False,
                                                                                               status_code=500))

    result = await main(client=client)

    assert result is None
    assert "Requête échouée" in capsys.readouterr().out
