"""
Base job class and job context.

A job is one operator-level run (import a file, write an export,
restore a backup) with common logging, timing and error capture.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional, Any

from ..config import Config
from ..exceptions import BloRegisterError
from ..logger import get_logger, log_timing
from ..workspace import Workspace


@dataclass
class JobContext:
    """
    Shared context passed to jobs.

    Contains:
    - The loaded workspace (repositories, settings, engines)
    - The reference date for age-dependent output
    """

    workspace: Workspace
    today: Optional[date] = None

    @property
    def config(self) -> Config:
        return self.workspace.config

    def reference_date(self) -> date:
        return self.today or date.today()


class BaseJob(ABC):
    """
    Abstract base class for all jobs.

    Provides:
    - Consistent logging
    - Timing instrumentation
    - Error capture: a failed run keeps one message on `error`
    """

    # Job name for logging (override in subclass)
    name: str = "BaseJob"

    def __init__(self, context: JobContext):
        self.context = context
        self.workspace = context.workspace
        self.config = context.config
        self.logger = get_logger(f"blo_register.jobs.{self.name}")
        self.error: Optional[str] = None
        self.result: Any = None

    @property
    def debug_mode(self) -> bool:
        return self.config.debug

    def log_debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message (only in debug mode)."""
        if self.debug_mode:
            extra = " ".join(f"{k}={v}" for k, v in kwargs.items())
            self.logger.debug(f"{message} {extra}".strip())

    def log_info(self, message: str, **kwargs: Any) -> None:
        extra = " ".join(f"{k}={v}" for k, v in kwargs.items())
        self.logger.info(f"{message} {extra}".strip())

    def log_warning(self, message: str, **kwargs: Any) -> None:
        extra = " ".join(f"{k}={v}" for k, v in kwargs.items())
        self.logger.warning(f"{message} {extra}".strip())

    def log_error(self, message: str, error: Optional[Exception] = None) -> None:
        if error:
            self.logger.error(f"{message}: {error}", exc_info=self.debug_mode)
        else:
            self.logger.error(message)

    def fail(self, message: str) -> bool:
        """Record a validation failure message and return False."""
        self.error = message
        return False

    @abstractmethod
    def process(self) -> bool:
        """
        Execute the job's main task.

        Returns:
            True if the job succeeded, False otherwise
        """
        pass

    def validate(self) -> bool:
        """
        Check prerequisites. Override in subclass; call fail() to report.

        Returns:
            True if validation passes
        """
        return True

    def run(self) -> bool:
        """
        Run the job with timing and error handling.

        Returns:
            True if the job succeeded; otherwise `error` holds the reason
        """
        self.log_info(f"Starting {self.name}")
        self.error = None
        start = time.perf_counter()

        try:
            if not self.validate():
                self.log_error(f"Validation failed: {self.error}")
                return False

            ok = self.process()
            log_timing(self.logger, f"Completed {self.name}", time.perf_counter() - start)
            return ok

        except BloRegisterError as e:
            self.error = e.message
            self.log_error(f"{self.name} failed", error=e)
            return False
        except Exception as e:
            self.error = f"An unexpected error occurred: {e}"
            self.log_error(f"Failed after {time.perf_counter() - start:.2f}s", error=e)
            return False
