from __future__ import annotations

import threading
from collections.abc import Iterable
from typing import TYPE_CHECKING, final

from lambdaware._internal.exceptions import raise_invocation_in_progress_error
from lambdaware._internal.middleware.base import bind_unit, has_phases

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from lambdaware._internal.common.types import PhaseFn
    from lambdaware._internal.middleware.base import (
        BoundUnit,
        MiddlewareUnit,
        PhaseRunner,
    )


def _flatten(units: Iterable[MiddlewareUnit]) -> Iterator[MiddlewareUnit]:
    # Any iterable without phases of its own is a group of units: lists,
    # tuples, generators. Named tuples exposing phases stay one unit.
    for unit in units:
        if (
            isinstance(unit, Iterable)
            and not isinstance(unit, (str, bytes))
            and not has_phases(unit)
        ):
            yield from _flatten(unit)  # pyright: ignore[reportUnknownArgumentType]
        else:
            yield unit


@final
class MiddlewareStack:
    """Ordered middleware of one wrapped handler.

    Append-only while the handler is being composed. Each invocation works
    on a snapshot and holds a lease on the stack, registration is refused
    while any lease is outstanding. Leases are taken under a lock, so
    `run_sync` may be called from several threads at once.
    """

    __slots__: tuple[str, ...] = ("_in_flight", "_lock", "_units", "_wrap")

    def __init__(
        self,
        wrap: Callable[[PhaseFn], PhaseRunner],
        middlewares: Iterable[MiddlewareUnit] | None = None,
    ) -> None:
        self._wrap: Callable[[PhaseFn], PhaseRunner] = wrap
        self._units: list[BoundUnit] = []
        self._in_flight: int = 0
        self._lock: threading.Lock = threading.Lock()
        if middlewares:
            self.use(*middlewares)

    def use(
        self,
        *middlewares: MiddlewareUnit,
        operation: str = "use",
    ) -> None:
        if self._in_flight:
            raise_invocation_in_progress_error(operation)
        # Bind everything first so a bad unit leaves the stack untouched.
        bound = [bind_unit(m, self._wrap) for m in _flatten(middlewares)]
        with self._lock:
            if self._in_flight:
                raise_invocation_in_progress_error(operation)
            self._units.extend(bound)

    @property
    def in_flight(self) -> int:
        return self._in_flight

    def acquire(self) -> tuple[BoundUnit, ...]:
        with self._lock:
            self._in_flight += 1
            return tuple(self._units)

    def release(self) -> None:
        with self._lock:
            self._in_flight -= 1

    def units(self) -> tuple[MiddlewareUnit, ...]:
        return tuple(u.unit for u in self._units)

    def __len__(self) -> int:
        return len(self._units)

    def __repr__(self) -> str:
        names = ", ".join(u.name for u in self._units)
        return f"{type(self).__name__}([{names}])"
