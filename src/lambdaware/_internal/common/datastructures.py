# ruff: noqa: ANN401
from __future__ import annotations

from collections import UserDict
from typing import Any


class State(UserDict[str, Any]):
    """Attribute-style storage shared by the phases of one invocation."""

    data: dict[str, Any]
    __slots__: tuple[str, ...] = ("data",)

    def __init__(self, state: dict[str, Any] | None = None) -> None:  # pyright: ignore[reportMissingSuperCall]
        object.__setattr__(self, "data", state or {})

    def __setattr__(self, key: str, value: Any) -> None:
        self[key] = value

    def __getattr__(self, key: str) -> Any:
        try:
            return self.data[key]
        except KeyError as exc:
            message = (
                f"{self.__class__.__name__!r} object has no attribute {key!r}"
            )
            raise AttributeError(message) from exc

    def __delattr__(self, key: str) -> None:
        del self[key]

    def __str__(self) -> str:
        cls_name = type(self).__name__
        return f"{cls_name}({super().__str__()})"
