from typing import Any

from lambdaware import Request
from lambdaware.middleware import middleware
from tests.conftest import Recorder, create_app


async def test_after_runs_in_reverse_order(recorder: Recorder) -> None:
    app = create_app(
        recorder.handler(),
        recorder.unit("a"),
        recorder.unit("b", is_async=True),
        recorder.unit("c"),
    )

    response = await app({"k": "v"})

    assert response == "response"
    assert recorder.calls == [
        "a.before",
        "b.before",
        "c.before",
        "handler",
        "c.after",
        "b.after",
        "a.after",
    ]


async def test_handler_receives_event_and_context() -> None:
    seen: list[tuple[Any, Any]] = []

    def handler(event: Any, context: Any) -> str:
        seen.append((event, context))
        return "ok"

    app = create_app(handler)
    context = object()

    assert await app({"id": 1}, context) == "ok"
    assert seen == [({"id": 1}, context)]


async def test_absent_phases_are_skipped() -> None:
    calls: list[str] = []
    app = create_app(
        lambda event, context: event * 2,
        middleware(before=lambda request: calls.append("before")),
        middleware(after=lambda request: calls.append("after")),
        middleware(name="empty"),
    )

    assert await app(21) == 42
    assert calls == ["before", "after"]


async def test_phases_share_the_request() -> None:
    def parse(request: Request) -> None:
        request.event = {"body": int(request.event)}
        request.internal.parsed = True

    def wrap(request: Request) -> None:
        assert request.internal.parsed is True
        request.response = {"statusCode": 200, "body": request.response}

    app = create_app(
        lambda event, context: event["body"] + 1,
        middleware(after=wrap),
        middleware(before=parse),
    )

    assert await app("41") == {"statusCode": 200, "body": 42}


async def test_short_circuit_skips_handler(recorder: Recorder) -> None:
    app = create_app(
        recorder.handler(),
        recorder.unit("x", short_circuit={"cached": True}),
    )

    assert await app({}) == {"cached": True}
    assert recorder.calls == ["x.before"]


async def test_short_circuit_runs_after_of_outer_units(
    recorder: Recorder,
) -> None:
    app = create_app(
        recorder.handler(),
        recorder.unit("a"),
        recorder.unit("b"),
        recorder.unit("c", short_circuit="early"),
        recorder.unit("d"),
    )

    assert await app({}) == "early"
    assert recorder.calls == [
        "a.before",
        "b.before",
        "c.before",
        "b.after",
        "a.after",
    ]


async def test_after_sees_short_circuit_response() -> None:
    def cache_hit(request: Request) -> None:
        request.short_circuit({"body": "cached"})

    def add_header(request: Request) -> None:
        request.response["headers"] = {"x-cache": "hit"}

    app = create_app(
        lambda event, context: {"body": "fresh"},
        middleware(after=add_header),
        middleware(before=cache_hit),
    )

    assert await app({}) == {"body": "cached", "headers": {"x-cache": "hit"}}


async def test_after_can_replace_response(recorder: Recorder) -> None:
    def replace(request: Request) -> None:
        request.response = request.response.upper()

    app = create_app(recorder.handler("ok"), middleware(after=replace))

    assert await app({}) == "OK"


async def test_request_is_not_shared_between_invocations() -> None:
    seen: list[Request] = []

    def remember(request: Request) -> None:
        assert "count" not in request.internal
        request.internal.count = 1
        seen.append(request)

    app = create_app(lambda event, context: event, middleware(before=remember))

    assert await app(1) == 1
    assert await app(1) == 1
    assert seen[0] is not seen[1]
    assert all(r.terminated for r in seen)
