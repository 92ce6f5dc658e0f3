from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from lambdaware._internal.context import Request

LoopFactory: TypeAlias = Callable[[], asyncio.AbstractEventLoop]
Handler: TypeAlias = Callable[[Any, Any], Any]
PhaseFn: TypeAlias = Callable[["Request"], Awaitable[None] | None]
Done: TypeAlias = Callable[..., None]
CallbackPhaseFn: TypeAlias = Callable[
    ["Request", Done],
    Awaitable[None] | None,
]
