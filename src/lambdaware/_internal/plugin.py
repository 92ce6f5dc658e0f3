from __future__ import annotations

import inspect
import logging
import time
from typing import TYPE_CHECKING, Any

from typing_extensions import override

if TYPE_CHECKING:
    from lambdaware._internal.context import Request

logger = logging.getLogger("lambdaware.plugin")


class Plugin:
    """Lifecycle hooks around an invocation.

    Hooks may be sync or async. Subclasses override only what they need;
    a hook raising an exception fails the phase it surrounds.
    """

    def request_start(self, request: Request) -> Any:  # noqa: ANN401
        return None

    def before_middleware(self, request: Request, name: str) -> Any:  # noqa: ANN401
        return None

    def after_middleware(self, request: Request, name: str) -> Any:  # noqa: ANN401
        return None

    def before_handler(self, request: Request) -> Any:  # noqa: ANN401
        return None

    def after_handler(self, request: Request) -> Any:  # noqa: ANN401
        return None

    def request_end(self, request: Request) -> Any:  # noqa: ANN401
        return None


async def call_hook(plugin: object | None, hook: str, *args: Any) -> None:  # noqa: ANN401
    if plugin is None:
        return
    fn = getattr(plugin, hook, None)
    if fn is None:
        return
    result = fn(*args)
    if inspect.isawaitable(result):
        await result


class LoggingPlugin(Plugin):
    """Log how long each middleware phase and the handler take."""

    _KEY = "_lambdaware_timings"

    def __init__(self, level: int = logging.DEBUG) -> None:
        self.level: int = level

    def _start(self, request: Request, key: str) -> None:
        timings = request.internal.setdefault(self._KEY, {})
        timings[key] = time.perf_counter()

    def _stop(self, request: Request, key: str) -> None:
        started = request.internal.get(self._KEY, {}).pop(key, None)
        if started is None:
            return
        elapsed = (time.perf_counter() - started) * 1000
        logger.log(self.level, "%s took %.3fms", key, elapsed)

    @override
    def request_start(self, request: Request) -> None:
        self._start(request, "request")

    @override
    def before_middleware(self, request: Request, name: str) -> None:
        self._start(request, name)

    @override
    def after_middleware(self, request: Request, name: str) -> None:
        self._stop(request, name)

    @override
    def before_handler(self, request: Request) -> None:
        self._start(request, "handler")

    @override
    def after_handler(self, request: Request) -> None:
        self._stop(request, "handler")

    @override
    def request_end(self, request: Request) -> None:
        self._stop(request, "request")
        _ = request.internal.pop(self._KEY, None)
