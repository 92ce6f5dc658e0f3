# ruff: noqa: ANN401
from __future__ import annotations

import asyncio
import logging
from typing import Any, Generic, TypeVar, final

logger = logging.getLogger("lambdaware.completion")

ReturnT = TypeVar("ReturnT")


@final
class CompletionBridge(Generic[ReturnT]):
    """Settle a future exactly once.

    The first `resolve` or `reject` wins. Every later call is dropped,
    counted in `suppressed_calls` and logged, so a unit that signals both
    success and failure cannot corrupt the outcome.
    """

    __slots__: tuple[str, ...] = ("_future", "label", "suppressed_calls")

    def __init__(
        self,
        future: asyncio.Future[ReturnT],
        *,
        label: str = "invocation",
    ) -> None:
        self._future: asyncio.Future[ReturnT] = future
        self.label: str = label
        self.suppressed_calls: int = 0

    @property
    def done(self) -> bool:
        return self._future.done()

    def resolve(self, value: ReturnT) -> None:
        if self._guard("resolve"):
            self._future.set_result(value)

    def reject(self, exc: BaseException) -> None:
        if self._guard("reject"):
            self._future.set_exception(exc)

    def __call__(
        self,
        exc: BaseException | None = None,
        value: Any = None,
    ) -> None:
        """Node-style completion: `bridge(exc)` or `bridge(None, value)`."""
        if exc is not None:
            self.reject(exc)
        else:
            self.resolve(value)

    async def wait(self) -> ReturnT:
        return await self._future

    def _guard(self, operation: str) -> bool:
        if not self._future.done():
            return True
        self.suppressed_calls += 1
        logger.warning(
            "Completion of %s signalled more than once"
            " (%s ignored, %d so far).",
            self.label,
            operation,
            self.suppressed_calls,
        )
        return False
