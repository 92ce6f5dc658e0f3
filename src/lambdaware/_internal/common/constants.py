from enum import Enum, unique


@unique
class RunMode(str, Enum):
    MAIN = "main"
    THREAD = "thread"


@unique
class Phase(str, Enum):
    BEFORE = "before"
    AFTER = "after"
    ON_ERROR = "on_error"


@unique
class PipelineState(str, Enum):
    RUNNING_BEFORE = "running_before"
    RUNNING_HANDLER = "running_handler"
    RUNNING_AFTER = "running_after"
    RUNNING_ERROR = "running_error"
    DONE = "done"
