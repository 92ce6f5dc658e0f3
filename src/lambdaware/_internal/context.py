# ruff: noqa: ANN401
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from lambdaware._internal.common.datastructures import State


@dataclass(slots=True, kw_only=True)
class Request:
    """Mutable state of one invocation, shared by every phase.

    A fresh request is built for each call of the wrapped handler and is
    dropped once the outcome has been delivered. Phases communicate only
    by mutating it.
    """

    event: Any
    context: Any = None
    response: Any = None
    error: BaseException | None = None
    terminated: bool = False
    internal: State = field(default_factory=State)

    @property
    def failed(self) -> bool:
        return self.error is not None

    def short_circuit(self, response: Any = None) -> None:
        """Finish the invocation early with `response`.

        Called from a `before` phase: the remaining `before` phases and the
        handler are skipped, `after` phases of the outer units still run.
        """
        self.response = response
        self.terminated = True

    def resolve(self, response: Any = None) -> None:
        """Turn a failed invocation into a successful one.

        Called from an `on_error` phase to stop error propagation.
        """
        self.error = None
        self.response = response
