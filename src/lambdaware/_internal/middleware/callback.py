from __future__ import annotations

import asyncio
import functools
import inspect
from typing import TYPE_CHECKING

from lambdaware._internal.completion import CompletionBridge

if TYPE_CHECKING:
    from lambdaware._internal.common.types import CallbackPhaseFn, PhaseFn
    from lambdaware._internal.context import Request


def callback_phase(fn: CallbackPhaseFn, /) -> PhaseFn:
    """Adapt a phase that reports completion through a `done` callback.

    The wrapped function is called as `fn(request, done)`. `done()` marks
    the phase as completed, `done(exc)` as failed. `done` may be called
    from any thread; only the first call counts.
    """

    @functools.wraps(fn)
    async def phase(request: Request) -> None:
        loop = asyncio.get_running_loop()
        label = f"phase {getattr(fn, '__qualname__', fn)!r}"
        bridge: CompletionBridge[None] = CompletionBridge(
            loop.create_future(),
            label=label,
        )

        def done(exc: BaseException | None = None) -> None:
            # A settled bridge only counts and logs the call, so late calls
            # skip the loop, which may already be closed.
            if bridge.done or loop.is_closed():
                bridge(exc)
                return
            try:
                _ = loop.call_soon_threadsafe(bridge, exc)
            except RuntimeError:
                # Closed between the check and the call.
                bridge(exc)

        result = fn(request, done)
        if inspect.isawaitable(result):
            await result
        await bridge.wait()

    return phase
