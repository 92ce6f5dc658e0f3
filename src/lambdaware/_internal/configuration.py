from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from concurrent.futures import ThreadPoolExecutor

    from lambdaware._internal.common.constants import RunMode
    from lambdaware._internal.common.types import LoopFactory
    from lambdaware._internal.plugin import Plugin


@dataclass(slots=True, kw_only=True)
class WorkerPools:
    # None means the loop's default executor.
    threadpool: ThreadPoolExecutor | None = None


@dataclass(slots=True, kw_only=True)
class LambdawareConfiguration:
    getloop: LoopFactory
    worker_pools: WorkerPools
    handler_run_mode: RunMode | None
    phase_run_mode: RunMode
    plugin: Plugin | None = None
