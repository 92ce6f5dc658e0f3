from __future__ import annotations

import functools
import inspect
import warnings
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Final, Generic, ParamSpec, TypeVar

from typing_extensions import override

from lambdaware._internal.common.constants import RunMode

if TYPE_CHECKING:
    from collections.abc import Callable
    from concurrent.futures import Executor

    from lambdaware._internal.common.types import LoopFactory
    from lambdaware._internal.configuration import LambdawareConfiguration

ReturnT = TypeVar("ReturnT")
ParamsT = ParamSpec("ParamsT")


def is_async_callable(obj: object) -> bool:
    while isinstance(obj, functools.partial):
        obj = obj.func
    # inspect.iscoroutinefunction returns TypeGuard,
    # but we need a regular bool variable
    return bool(
        inspect.iscoroutinefunction(obj)
        or (
            callable(obj)
            and inspect.iscoroutinefunction(getattr(obj, "__call__", None))
        ),
    )


async def _settle(result: Any) -> Any:  # noqa: ANN401
    # A sync callable may still hand back a deferred result.
    if inspect.isawaitable(result):
        return await result
    return result


class RunStrategy(ABC, Generic[ParamsT, ReturnT]):
    __slots__: tuple[str, ...] = ("func",)

    def __init__(self, func: Callable[ParamsT, ReturnT]) -> None:
        self.func: Final = func

    @abstractmethod
    async def __call__(
        self,
        *args: ParamsT.args,
        **kwargs: ParamsT.kwargs,
    ) -> Any:  # noqa: ANN401
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.func!r})"


class SyncStrategy(RunStrategy[ParamsT, ReturnT]):
    @override
    async def __call__(
        self,
        *args: ParamsT.args,
        **kwargs: ParamsT.kwargs,
    ) -> Any:
        return await _settle(self.func(*args, **kwargs))


class AsyncStrategy(RunStrategy[ParamsT, ReturnT]):
    @override
    async def __call__(
        self,
        *args: ParamsT.args,
        **kwargs: ParamsT.kwargs,
    ) -> Any:
        return await self.func(*args, **kwargs)  # pyright: ignore[reportGeneralTypeIssues]


class PoolStrategy(RunStrategy[ParamsT, ReturnT]):
    __slots__: tuple[str, ...] = ("executor", "getloop")

    def __init__(
        self,
        func: Callable[ParamsT, ReturnT],
        executor: Executor | None,
        getloop: LoopFactory,
    ) -> None:
        super().__init__(func)
        self.executor: Executor | None = executor
        self.getloop: LoopFactory = getloop

    @override
    async def __call__(
        self,
        *args: ParamsT.args,
        **kwargs: ParamsT.kwargs,
    ) -> Any:
        func_call = functools.partial(self.func, *args, **kwargs)
        result = await self.getloop().run_in_executor(self.executor, func_call)
        return await _settle(result)


def _validate_run_mode(mode: RunMode | None, *, is_async: bool) -> RunMode:
    if is_async:
        if mode is RunMode.THREAD:
            msg = (
                "Async functions are always done in the main loop."
                " This mode (THREAD) is not used."
            )
            warnings.warn(msg, category=RuntimeWarning, stacklevel=3)
        return RunMode.MAIN
    if mode is None:
        return RunMode.THREAD
    return mode


def create_run_strategy(
    func: Callable[ParamsT, ReturnT],
    config: LambdawareConfiguration,
    *,
    mode: RunMode | None,
) -> RunStrategy[ParamsT, ReturnT]:
    is_async = is_async_callable(func)

    mode = _validate_run_mode(mode, is_async=is_async)
    if is_async:
        return AsyncStrategy(func)

    match mode:
        case RunMode.THREAD:
            threadpool = config.worker_pools.threadpool
            return PoolStrategy(func, threadpool, config.getloop)
        case _:
            return SyncStrategy(func)
