"""Middleware engine for serverless function handlers.

This module exposes the wrapped handler, the per-invocation request it
threads through every middleware phase, and the supporting constants.
"""

from importlib.metadata import version as get_version

from lambdaware._internal.common.constants import Phase, PipelineState, RunMode
from lambdaware._internal.common.datastructures import State
from lambdaware._internal.context import Request
from lambdaware.lambdaware import Lambdaware

__version__ = get_version("lambdaware")
__all__ = (
    "Lambdaware",
    "Phase",
    "PipelineState",
    "Request",
    "RunMode",
    "State",
)
