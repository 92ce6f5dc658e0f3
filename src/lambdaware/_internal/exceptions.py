from typing import NoReturn


class BaseLambdawareError(Exception):
    pass


class InvalidMiddlewareError(BaseLambdawareError, TypeError):
    """Raised when a middleware exposes a phase that cannot be called."""

    def __init__(self, name: str, phase: str) -> None:
        self.name: str = name
        self.phase: str = phase
        msg = (
            f"Middleware {name!r} has a non-callable {phase!r} phase. "
            "Each phase must be a callable or left undefined."
        )
        super().__init__(msg)


class ApplicationStateError(BaseLambdawareError):
    """Raised when app is in wrong state for the requested operation."""

    def __init__(
        self,
        *,
        operation: str,
        reason: str,
        solution: str,
    ) -> None:
        self.operation: str = operation
        self.reason: str = reason
        self.solution: str = solution

        msg = (
            f"Cannot perform operation '{operation}'.\n"
            f"  Reason: {reason}\n"
            f"  Resolution: {solution}"
        )
        super().__init__(msg)


def raise_invocation_in_progress_error(operation: str) -> NoReturn:
    raise ApplicationStateError(
        operation=operation,
        reason="The handler is being invoked and its middleware is frozen.",
        solution=(
            "Middleware (use, before, after, on_error) must be registered "
            "when the handler is composed, before it starts serving events."
        ),
    )
