from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar, final

from lambdaware._internal.common.constants import Phase, PipelineState
from lambdaware._internal.completion import CompletionBridge
from lambdaware._internal.context import Request
from lambdaware._internal.plugin import call_hook

if TYPE_CHECKING:
    from collections.abc import Sequence

    from lambdaware._internal.configuration import LambdawareConfiguration
    from lambdaware._internal.middleware.base import BoundUnit
    from lambdaware._internal.middleware.stack import MiddlewareStack
    from lambdaware._internal.runners import RunStrategy

logger = logging.getLogger("lambdaware.pipeline")

ReturnT = TypeVar("ReturnT")


@final
class PipelineExecutor(Generic[ReturnT]):
    """Drive one invocation through the middleware lifecycle.

    `before` phases run in stack order, then the handler, then `after`
    phases in reverse order. Any failure switches to the `on_error` phases,
    also in reverse order, of the units wrapping the failed step. An
    `on_error` phase that clears `request.error` ends error propagation and
    the invocation completes with `request.response`.

    Only `Exception` subclasses are routed to `on_error`; cancellation and
    interpreter exits propagate untouched.
    """

    __slots__: tuple[str, ...] = ("_config", "_handler", "_stack")

    def __init__(
        self,
        *,
        stack: MiddlewareStack,
        handler: RunStrategy[..., ReturnT],
        config: LambdawareConfiguration,
    ) -> None:
        self._stack: MiddlewareStack = stack
        self._handler: RunStrategy[..., ReturnT] = handler
        self._config: LambdawareConfiguration = config

    async def __call__(self, event: Any, context: Any = None) -> ReturnT:  # noqa: ANN401
        units = self._stack.acquire()
        try:
            loop = self._config.getloop()
            bridge: CompletionBridge[ReturnT] = CompletionBridge(
                loop.create_future(),
            )
            request = Request(event=event, context=context)
            await self.run(request, units, bridge)
            return await bridge.wait()
        finally:
            self._stack.release()

    async def run(
        self,
        request: Request,
        units: Sequence[BoundUnit],
        bridge: CompletionBridge[ReturnT],
    ) -> None:
        plugin = self._config.plugin
        # `after` and `on_error` only ever run for units[:depth],
        # innermost first.
        depth = 0
        state = PipelineState.RUNNING_BEFORE
        try:
            await call_hook(plugin, "request_start", request)
            for index, unit in enumerate(units):
                depth = index + 1
                await self._run_phase(request, unit, Phase.BEFORE)
                if request.terminated:
                    logger.debug(
                        "Invocation short-circuited by %r at position %d.",
                        unit.name,
                        index,
                    )
                    depth = index
                    break
            else:
                state = PipelineState.RUNNING_HANDLER
                await call_hook(plugin, "before_handler", request)
                request.response = await self._handler(
                    request.event,
                    request.context,
                )
                await call_hook(plugin, "after_handler", request)

            state = PipelineState.RUNNING_AFTER
            for unit in reversed(units[:depth]):
                await self._run_phase(request, unit, Phase.AFTER)
        except Exception as exc:  # noqa: BLE001
            logger.debug(
                "%s failed with %r, running error phases of %d unit(s).",
                state.value,
                exc,
                depth,
            )
            request.error = exc
            await self._run_error_phases(request, units[:depth])

        request.terminated = True
        try:
            await call_hook(plugin, "request_end", request)
        except Exception as exc:  # noqa: BLE001
            request.error = exc

        logger.debug("%s: failed=%s", PipelineState.DONE.value, request.failed)
        if request.error is not None:
            bridge.reject(request.error)
        else:
            bridge.resolve(request.response)

    async def _run_error_phases(
        self,
        request: Request,
        units: Sequence[BoundUnit],
    ) -> None:
        for unit in reversed(units):
            if unit.on_error is None:
                continue
            try:
                await self._run_phase(request, unit, Phase.ON_ERROR)
            except Exception as exc:  # noqa: BLE001
                # The new failure replaces the old one and keeps propagating.
                logger.debug("on_error of %r failed with %r.", unit.name, exc)
                request.error = exc
                continue
            if request.error is None:
                logger.debug("Error resolved by %r.", unit.name)
                return

    async def _run_phase(
        self,
        request: Request,
        unit: BoundUnit,
        phase: Phase,
    ) -> None:
        runner = unit.get(phase)
        if runner is None:
            return
        plugin = self._config.plugin
        name = f"{unit.name}.{phase.value}"
        await call_hook(plugin, "before_middleware", request, name)
        await runner(request)
        await call_hook(plugin, "after_middleware", request, name)
