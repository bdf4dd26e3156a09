"""
Log mirroring for task-scoped operations.

Operations that run on behalf of a task write each line to the module
logger and, when one is supplied, to the task's own logger as well.
"""

import logging
from typing import List, Optional


class TaskLog:
    """Writes every message to a process logger and an optional task logger."""

    def __init__(self, logger: logging.Logger, task_logger: Optional[logging.Logger] = None):
        self.logger = logger
        self.task_logger = task_logger

    def _targets(self) -> List[logging.Logger]:
        if self.task_logger is None or self.task_logger is self.logger:
            return [self.logger]
        return [self.logger, self.task_logger]

    def debug(self, message: str) -> None:
        for target in self._targets():
            target.debug(message)

    def info(self, message: str) -> None:
        for target in self._targets():
            target.info(message)

    def warning(self, message: str) -> None:
        for target in self._targets():
            target.warning(message)

    def error(self, message: str, exc_info=None) -> None:
        for target in self._targets():
            target.error(message, exc_info=exc_info)
