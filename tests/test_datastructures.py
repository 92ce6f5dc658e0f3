from unittest.mock import AsyncMock

import pytest

from lambdaware import Request, State


async def test_state() -> None:
    client = AsyncMock()
    state = State(state={"client": client})
    state.new_client = AsyncMock()
    await state.client.get_parameter(Name="/app/secret")
    assert hasattr(state, "client")
    assert hasattr(state, "new_client")
    state.client.get_parameter.assert_awaited_once_with(Name="/app/secret")
    with pytest.raises(AttributeError):
        _ = state.non_exists_key

    del state.new_client
    assert not hasattr(state, "new_client")
    assert str(state).startswith("State(")


def test_request_defaults() -> None:
    request = Request(event={"body": "{}"})

    assert request.context is None
    assert request.response is None
    assert request.error is None
    assert request.terminated is False
    assert request.failed is False
    assert len(request.internal) == 0


def test_short_circuit_and_resolve() -> None:
    request = Request(event={}, error=ValueError("boom"))
    assert request.failed

    request.resolve({"statusCode": 500})
    assert request.error is None
    assert request.response == {"statusCode": 500}

    request.short_circuit("cached")
    assert request.terminated is True
    assert request.response == "cached"
