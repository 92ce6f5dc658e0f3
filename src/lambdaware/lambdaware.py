"""Lambdaware entrypoint."""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import TYPE_CHECKING, Any, Generic, ParamSpec, TypeVar

from typing_extensions import Self

from lambdaware._internal.common.constants import Phase, RunMode
from lambdaware._internal.configuration import (
    LambdawareConfiguration,
    WorkerPools,
)
from lambdaware._internal.executor import PipelineExecutor
from lambdaware._internal.middleware.base import PhaseSet
from lambdaware._internal.middleware.stack import MiddlewareStack
from lambdaware._internal.runners import create_run_strategy

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from concurrent.futures import ThreadPoolExecutor

    from lambdaware._internal.common.types import Handler, LoopFactory, PhaseFn
    from lambdaware._internal.middleware.base import (
        MiddlewareUnit,
        PhaseRunner,
    )
    from lambdaware._internal.plugin import Plugin

logger = logging.getLogger("lambdaware")

ReturnT = TypeVar("ReturnT")
ParamsT = ParamSpec("ParamsT")


def cache_result(f: Callable[ParamsT, ReturnT]) -> Callable[ParamsT, ReturnT]:
    """Cache the result of the first function call."""
    result: ReturnT | None = None

    @functools.wraps(f)
    def wrapper(*args: ParamsT.args, **kwargs: ParamsT.kwargs) -> ReturnT:
        nonlocal result
        if result is None:
            result = f(*args, **kwargs)
        return result

    return wrapper


class Lambdaware(Generic[ReturnT]):
    """A serverless handler wrapped in a middleware stack.

    The wrapped handler keeps the `(event, context)` shape of the handler
    it wraps, so it can be invoked directly, passed to a runtime, or be
    wrapped again by another `Lambdaware`.

    Example:
        app = Lambdaware(handler).use(json_body()).use(cors())
        response = await app(event, context)

    """

    def __init__(  # noqa: PLR0913
        self,
        handler: Handler,
        *,
        middleware: Iterable[MiddlewareUnit] | None = None,
        plugin: Plugin | None = None,
        run_mode: RunMode | None = None,
        phase_run_mode: RunMode = RunMode.MAIN,
        loop_factory: LoopFactory | None = None,
        threadpool_executor: ThreadPoolExecutor | None = None,
    ) -> None:
        """Initialize a `Lambdaware` instance.

        Args:
            handler: The base handler, sync or async, called as
                `handler(event, context)`.
            middleware: Units registered in order, as if passed to `use`.
            plugin: Optional lifecycle hooks, see `Plugin`.
            run_mode: How a sync handler runs. Defaults to a worker thread
                so blocking handlers do not stall the loop.
            phase_run_mode: How sync phases run. Defaults to inline.
            loop_factory: Returns the loop running the invocations.
                Defaults to `asyncio.get_running_loop` per invocation.
            threadpool_executor: Executor for `RunMode.THREAD`. Defaults to
                the loop's default executor.

        """
        # The loop is only cached when the caller pins one explicitly,
        # `run_sync` creates a fresh loop for every call.
        getloop = (
            cache_result(loop_factory)
            if loop_factory is not None
            else asyncio.get_running_loop
        )
        self.configs: LambdawareConfiguration = LambdawareConfiguration(
            getloop=getloop,
            worker_pools=WorkerPools(threadpool=threadpool_executor),
            handler_run_mode=run_mode,
            phase_run_mode=phase_run_mode,
            plugin=plugin,
        )
        self.handler: Handler = handler
        self._stack: MiddlewareStack = MiddlewareStack(
            self._wrap_phase,
            middleware,
        )
        self._executor: PipelineExecutor[ReturnT] = PipelineExecutor(
            stack=self._stack,
            handler=create_run_strategy(
                handler,
                self.configs,
                mode=self.configs.handler_run_mode,
            ),
            config=self.configs,
        )
        _ = functools.update_wrapper(self, handler, updated=())  # pyright: ignore[reportArgumentType]

    def _wrap_phase(self, fn: PhaseFn) -> PhaseRunner:
        return create_run_strategy(
            fn,
            self.configs,
            mode=self.configs.phase_run_mode,
        )

    @property
    def middlewares(self) -> tuple[MiddlewareUnit, ...]:
        """Registered units in registration order."""
        return self._stack.units()

    @property
    def in_flight(self) -> int:
        """Number of invocations currently running."""
        return self._stack.in_flight

    def use(self, *middlewares: MiddlewareUnit) -> Self:
        """Append middleware units to the stack.

        Accepts one or more units, or iterables of units. Returns the app so
        calls can be chained.
        """
        self._stack.use(*middlewares)
        logger.debug("Middleware stack is now %r.", self._stack)
        return self

    def before(self, fn: PhaseFn, /) -> Self:
        """Register `fn` as a unit with only a `before` phase."""
        return self._use_phase(Phase.BEFORE, fn)

    def after(self, fn: PhaseFn, /) -> Self:
        """Register `fn` as a unit with only an `after` phase."""
        return self._use_phase(Phase.AFTER, fn)

    def on_error(self, fn: PhaseFn, /) -> Self:
        """Register `fn` as a unit with only an `on_error` phase."""
        return self._use_phase(Phase.ON_ERROR, fn)

    def _use_phase(self, phase: Phase, fn: PhaseFn) -> Self:
        name = getattr(fn, "__name__", None)
        unit = PhaseSet(**{phase.value: fn}, name=name)
        self._stack.use(unit, operation=phase.value)
        return self

    async def __call__(self, event: Any, context: Any = None) -> ReturnT:  # noqa: ANN401
        """Run one invocation and return its response.

        Raises:
            Exception: The error left unresolved by the `on_error` phases.

        """
        return await self._executor(event, context)

    def run_sync(self, event: Any, context: Any = None) -> ReturnT:  # noqa: ANN401
        """Run one invocation on a new event loop.

        For runtimes that call the handler synchronously, e.g.
        `lambda_handler = app.run_sync`.
        """
        return asyncio.run(self(event, context))

    def __repr__(self) -> str:
        name = getattr(self.handler, "__qualname__", repr(self.handler))
        return f"{type(self).__name__}({name}, {self._stack!r})"
