"""Middleware units for the wrapped handler lifecycle.

A middleware unit is any object exposing some of three phases, each
called with the invocation's `Request`:

- `before` runs in registration order, ahead of the handler. It may end
  the invocation early with `request.short_circuit(response)`.
- `after` runs in reverse order once a response exists.
- `on_error` runs in reverse order once anything failed. It may recover
  with `request.resolve(response)`.

Phases may be sync, async, or callback based (see `callback_phase`).
"""

from lambdaware._internal.common.types import PhaseFn
from lambdaware._internal.middleware.base import (
    Middleware,
    MiddlewareUnit,
    PhaseSet,
    middleware,
)
from lambdaware._internal.middleware.callback import callback_phase

__all__ = (
    "Middleware",
    "MiddlewareUnit",
    "PhaseFn",
    "PhaseSet",
    "callback_phase",
    "middleware",
)
