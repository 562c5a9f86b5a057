"""
Structured logging system for the evaluation worker.

Provides centralized logging with console and file outputs,
log levels, and metrics tracking for monitoring job throughput.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics for monitoring handled jobs.
    """

    def __init__(
        self,
        name: str = "evalworker",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)
        for handler in list(self.logger.handlers):
            handler.close()
        self.logger.handlers.clear()
        self.logger.propagate = False

        self.metrics = {
            "jobs_received": 0,
            "jobs_completed": 0,
            "jobs_failed": 0,
            "errors_by_type": {},
            "task_types": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"evalworker_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def _task_stats(self, task_type: str) -> dict:
        if task_type not in self.metrics["task_types"]:
            self.metrics["task_types"][task_type] = {
                "received": 0,
                "completed": 0,
                "failed": 0,
                "score_sum": 0.0,
                "score_min": None,
                "score_max": None,
            }
        return self.metrics["task_types"][task_type]

    def record_job_received(self, task_type: str):
        """Record a job handed to the handler."""
        self.metrics["jobs_received"] += 1
        self._task_stats(task_type)["received"] += 1

    def record_job_completed(self, task_type: str, score: float):
        """Record a completed job and the score it reported."""
        self.metrics["jobs_completed"] += 1
        stats = self._task_stats(task_type)
        stats["completed"] += 1
        stats["score_sum"] += score
        if stats["score_min"] is None or score < stats["score_min"]:
            stats["score_min"] = score
        if stats["score_max"] is None or score > stats["score_max"]:
            stats["score_max"] = score

    def record_job_failed(self, task_type: str, error_type: str):
        """Record a job whose handler raised."""
        self.metrics["jobs_failed"] += 1
        self._task_stats(task_type)["failed"] += 1

        if error_type not in self.metrics["errors_by_type"]:
            self.metrics["errors_by_type"][error_type] = 0
        self.metrics["errors_by_type"][error_type] += 1

    def get_metrics(self) -> dict:
        """Return current metrics."""
        metrics_copy = json.loads(json.dumps(self.metrics))
        for stats in metrics_copy["task_types"].values():
            if stats["completed"] > 0:
                stats["score_mean"] = round(stats["score_sum"] / stats["completed"], 4)
            if stats["received"] > 0:
                stats["success_rate"] = round(stats["completed"] / stats["received"], 3)

        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        received = metrics["jobs_received"]
        completed = metrics["jobs_completed"]
        overall_rate = 0
        if received > 0:
            overall_rate = round(completed / received * 100, 1)

        self.info("=== Worker Session Metrics ===")
        self.info(f"Jobs: {completed}/{received} completed ({overall_rate}% success), {metrics['jobs_failed']} failed")

        if metrics["task_types"]:
            self.info("Task Types:")
            for task_type, stats in metrics["task_types"].items():
                line = f"  {task_type}: {stats['completed']}/{stats['received']}"
                if "score_mean" in stats:
                    line += (
                        f" score min={stats['score_min']:.4f}"
                        f" max={stats['score_max']:.4f}"
                        f" mean={stats['score_mean']:.4f}"
                    )
                self.info(line)

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "evalworker",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
