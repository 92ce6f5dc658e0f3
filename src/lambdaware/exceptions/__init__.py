"""Custom exceptions for the lambdaware framework.

Errors raised by user phases and handlers are never wrapped: the exception
that remains unresolved after the `on_error` chain is re-raised to the
caller as is. The types below describe misuse of the engine itself.
"""

from lambdaware._internal.exceptions import (
    ApplicationStateError,
    BaseLambdawareError,
    InvalidMiddlewareError,
)

__all__ = (
    "ApplicationStateError",
    "BaseLambdawareError",
    "InvalidMiddlewareError",
)
