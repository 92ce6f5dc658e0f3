from typing import Any

import pytest
from typing_extensions import override

from lambdaware import Lambdaware, Request
from lambdaware.middleware import Middleware, PhaseSet, middleware


class HttpErrorHandler(Middleware):
    name = "http-error-handler"

    @override
    def on_error(self, request: Request) -> None:
        request.resolve({"statusCode": 500, "body": str(request.error)})


class LegacyErrorHandler(Middleware):
    def onError(self, request: Request) -> None:  # noqa: N802
        request.resolve("legacy")


class Warmup(Middleware):
    @override
    async def before(self, request: Request) -> None:
        if request.event.get("source") == "serverless-plugin-warmup":
            request.short_circuit("warm")


def _fail(event: Any, context: Any) -> None:
    msg = "boom"
    raise RuntimeError(msg)


async def test_subclass_on_error() -> None:
    app = Lambdaware(_fail).use(HttpErrorHandler())

    assert await app({}) == {"statusCode": 500, "body": "boom"}


async def test_subclass_camel_case_on_error() -> None:
    app = Lambdaware(_fail).use(LegacyErrorHandler())

    assert await app({}) == "legacy"


async def test_async_subclass_phase() -> None:
    app = Lambdaware(lambda event, context: "cold").use(Warmup())

    assert await app({"source": "serverless-plugin-warmup"}) == "warm"
    assert await app({"source": "aws.events"}) == "cold"


async def test_phase_assigned_on_instance() -> None:
    unit = Middleware()
    unit.after = lambda request: setattr(request, "response", "patched")  # type: ignore[method-assign]

    assert await Lambdaware(lambda event, context: "raw").use(unit)({}) == (
        "patched"
    )


async def test_base_middleware_is_inert() -> None:
    app = Lambdaware(_fail).use(Middleware())

    with pytest.raises(RuntimeError, match="boom"):
        _ = await app({})


def test_middleware_factory() -> None:
    def before(request: Request) -> None:
        pass

    unit = middleware(before=before, name="noop")

    assert unit == PhaseSet(before=before, name="noop")
    assert unit.after is None
    assert unit.on_error is None
