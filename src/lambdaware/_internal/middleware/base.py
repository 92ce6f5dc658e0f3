from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeAlias

from lambdaware._internal.common.constants import Phase
from lambdaware._internal.exceptions import InvalidMiddlewareError

if TYPE_CHECKING:
    from lambdaware._internal.common.types import PhaseFn
    from lambdaware._internal.context import Request

# Anything exposing some of `before`, `after` and `on_error`, as attributes
# or as mapping keys. Every phase is optional.
MiddlewareUnit: TypeAlias = object
PhaseRunner: TypeAlias = Callable[["Request"], Awaitable[Any]]

# camelCase spellings accepted for units written against the JS contract.
_PHASE_ALIASES: dict[Phase, tuple[str, ...]] = {
    Phase.BEFORE: ("before",),
    Phase.AFTER: ("after",),
    Phase.ON_ERROR: ("on_error", "onError"),
}


class Middleware:
    """Base class with no-op phases.

    Override the phases the middleware needs. Phases left as inherited are
    treated as absent and skipped by the executor.
    """

    name: str | None = None

    def before(self, request: Request) -> Any:  # noqa: ANN401
        return None

    def after(self, request: Request) -> Any:  # noqa: ANN401
        return None

    def on_error(self, request: Request) -> Any:  # noqa: ANN401
        return None


@dataclass(slots=True, frozen=True, kw_only=True)
class PhaseSet:
    before: PhaseFn | None = None
    after: PhaseFn | None = None
    on_error: PhaseFn | None = None
    name: str | None = None


def middleware(
    *,
    before: PhaseFn | None = None,
    after: PhaseFn | None = None,
    on_error: PhaseFn | None = None,
    name: str | None = None,
) -> PhaseSet:
    """Build a middleware unit out of plain phase functions."""
    return PhaseSet(before=before, after=after, on_error=on_error, name=name)


@dataclass(slots=True, frozen=True)
class BoundUnit:
    """A registered unit with its phases resolved once, at registration."""

    name: str
    unit: object
    before: PhaseRunner | None
    after: PhaseRunner | None
    on_error: PhaseRunner | None

    def get(self, phase: Phase) -> PhaseRunner | None:
        match phase:
            case Phase.BEFORE:
                return self.before
            case Phase.AFTER:
                return self.after
            case _:
                return self.on_error


def _get(unit: object, attr: str) -> Any:  # noqa: ANN401
    if isinstance(unit, Mapping):
        return unit.get(attr)  # pyright: ignore[reportUnknownMemberType]
    return getattr(unit, attr, None)


def has_phases(unit: object) -> bool:
    if isinstance(unit, Mapping):
        return True
    return any(
        hasattr(unit, attr)
        for attrs in _PHASE_ALIASES.values()
        for attr in attrs
    )


def unit_name(unit: object) -> str:
    name = _get(unit, "name")
    if isinstance(name, str) and name:
        return name
    return type(unit).__name__


def _lookup_phase(unit: object, phase: Phase, name: str) -> PhaseFn | None:
    for attr in _PHASE_ALIASES[phase]:
        fn = _get(unit, attr)
        if fn is None:
            continue
        if not callable(fn):
            raise InvalidMiddlewareError(name, attr)
        if isinstance(unit, Middleware):
            inherited = getattr(Middleware, phase.value)
            overridden = attr in getattr(unit, "__dict__", {})
            if not overridden and getattr(type(unit), attr, None) is inherited:
                continue
        return fn
    return None


def bind_unit(
    unit: object,
    wrap: Callable[[PhaseFn], PhaseRunner],
) -> BoundUnit:
    name = unit_name(unit)
    runners: dict[str, PhaseRunner | None] = {}
    for phase in Phase:
        fn = _lookup_phase(unit, phase, name)
        runners[phase.value] = wrap(fn) if fn is not None else None
    return BoundUnit(name, unit, **runners)
