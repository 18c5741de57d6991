"""
Structured logging for feedsuggest.

Console and optional file output, plus counters for watching how the
recommendation engine behaves: cache effectiveness, probe health and why
candidates get filtered out.
"""

import json
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


class StructuredLogger:
    """
    Logger with key/value context and ranking metrics.
    """

    def __init__(
        self,
        name: str = "feedsuggest",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = False,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to a daily file in log_dir
            enable_console: Output logs to stdout
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()
        self.logger.propagate = False

        self.metrics = {
            "rankings_computed": 0,
            "cache_hits": 0,
            "cache_misses": 0,
            "probe_calls": 0,
            "probe_failures": 0,
            "rejections_by_reason": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_handler.setFormatter(logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"feedsuggest_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            self.logger.addHandler(file_handler)

    def set_level(self, level: str):
        """Change the level of the logger and its console handler."""
        numeric = getattr(logging, level.upper())
        self.logger.setLevel(numeric)
        for handler in self.logger.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                handler.setLevel(numeric)

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking

    def record_ranking(self):
        self.metrics["rankings_computed"] += 1

    def record_cache_hit(self):
        self.metrics["cache_hits"] += 1

    def record_cache_miss(self):
        self.metrics["cache_misses"] += 1

    def record_probe_call(self):
        self.metrics["probe_calls"] += 1

    def record_probe_failure(self):
        self.metrics["probe_failures"] += 1

    def record_rejection(self, reason: str):
        """Count a candidate dropped by the filter, keyed by reason."""
        by_reason = self.metrics["rejections_by_reason"]
        by_reason[reason] = by_reason.get(reason, 0) + 1

    def get_metrics(self) -> dict:
        """Return a copy of the metrics with derived rates."""
        metrics_copy = dict(self.metrics)
        metrics_copy["rejections_by_reason"] = dict(self.metrics["rejections_by_reason"])

        lookups = metrics_copy["cache_hits"] + metrics_copy["cache_misses"]
        metrics_copy["cache_hit_rate"] = (
            round(metrics_copy["cache_hits"] / lookups, 3) if lookups else 0.0
        )
        return metrics_copy

    def log_metrics_summary(self):
        metrics = self.get_metrics()

        self.info("=== Suggestion Engine Metrics ===")
        self.info(f"Rankings computed: {metrics['rankings_computed']}")
        self.info(
            f"Cache: {metrics['cache_hits']} hits / {metrics['cache_misses']} misses "
            f"({metrics['cache_hit_rate'] * 100:.1f}% hit rate)"
        )
        self.info(f"Reputation probes: {metrics['probe_calls']} calls, {metrics['probe_failures']} failed")

        if metrics["rejections_by_reason"]:
            self.info("Rejected candidates:")
            for reason, count in metrics["rejections_by_reason"].items():
                self.info(f"  {reason}: {count}")


_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "feedsuggest",
    level: Optional[str] = None,
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Level and file output default to FEEDSUGGEST_LOG_LEVEL and
    FEEDSUGGEST_LOG_DIR when not given explicitly.
    """
    global _global_logger

    if _global_logger is None:
        if level is None:
            level = os.getenv("FEEDSUGGEST_LOG_LEVEL", "INFO")
        log_dir = os.getenv("FEEDSUGGEST_LOG_DIR")
        if log_dir and "log_dir" not in kwargs:
            kwargs["log_dir"] = Path(log_dir)
            kwargs.setdefault("enable_file", True)
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
