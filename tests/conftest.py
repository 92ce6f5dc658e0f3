from collections.abc import Callable, Collection
from typing import Any

import pytest

from lambdaware import Lambdaware, Request
from lambdaware.middleware import PhaseSet, middleware


class PhaseError(Exception):
    def __init__(self, where: str) -> None:
        self.where: str = where
        super().__init__(where)


class Recorder:
    """Build middleware units that log every phase they run."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def unit(  # noqa: PLR0913
        self,
        name: str,
        *,
        fail_in: Collection[str] = (),
        short_circuit: Any = None,
        resolve: Any = None,
        is_async: bool = False,
    ) -> PhaseSet:
        def make(phase: str) -> Callable[[Request], Any]:
            def body(request: Request) -> None:
                self.calls.append(f"{name}.{phase}")
                if phase in fail_in:
                    raise PhaseError(f"{name}.{phase}")
                if phase == "before" and short_circuit is not None:
                    request.short_circuit(short_circuit)
                if phase == "on_error" and resolve is not None:
                    request.resolve(resolve)

            if not is_async:
                return body

            async def async_body(request: Request) -> None:
                body(request)

            return async_body

        return middleware(
            before=make("before"),
            after=make("after"),
            on_error=make("on_error"),
            name=name,
        )

    def handler(
        self,
        response: Any = "response",
        *,
        fail: bool = False,
    ) -> Callable[[Any, Any], Any]:
        async def handler(event: Any, context: Any) -> Any:
            self.calls.append("handler")
            if fail:
                raise PhaseError("handler")
            return response

        return handler


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


def create_app(
    handler: Callable[[Any, Any], Any],
    *units: object,
    **kwargs: Any,
) -> Lambdaware[Any]:
    return Lambdaware(handler, **kwargs).use(*units)
