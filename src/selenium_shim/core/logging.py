"""
Purpose: Centralized logging configuration with structured output support.
Constraints: Logging only; no browser logic.
"""

# Imports
import json
import logging
import os
import sys
import threading
import time
from contextlib import contextmanager
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from selenium_shim.core.config import ConfigManager
from selenium_shim.core.metrics import get_metrics


# Public API
class UnifiedLogger:
    """Named logger whose records propagate to one shared set of root handlers"""

    _lock = threading.Lock()
    _global_initialized = False

    def __init__(self, name: str = "selenium_shim", log_level: Optional[str] = None):
        self.name = name
        settings = ConfigManager().load_logging_env().logging_settings
        self.settings = settings
        level_name = (log_level or settings["log_level"]).upper()
        level = getattr(logging, level_name, logging.INFO)

        with self._lock:
            self.logger = logging.getLogger(name)
            self.logger.setLevel(level)
            if not UnifiedLogger._global_initialized:
                log_file = self._ensure_root_logger(settings, level)
                UnifiedLogger._global_initialized = True
                if log_file:
                    self.logger.info("Logger initialized. Log file: %s", log_file)
            self.logger.propagate = True

    def get_logger(self) -> logging.Logger:
        """Get the underlying logger instance"""
        return self.logger

    def log_activity(self, action: str, details: Dict[str, Any], level: str = "INFO"):
        """Log a browser action with structured data"""
        log_level = getattr(logging, level.upper(), logging.INFO)
        self.logger.log(log_level, f"ACTIVITY: {action}", extra={"action": action, "details": details})
        get_metrics().record_action(action, success=log_level < logging.ERROR)

    def log_metrics_snapshot(self) -> Optional[Path]:
        """Log a metrics snapshot and append it to <log_dir>/metrics.jsonl when enabled"""
        snapshot = get_metrics().snapshot()
        self.logger.info("METRICS_SNAPSHOT", extra={"metric_snapshot": snapshot})
        if not self.settings["metrics_enabled"]:
            return None
        metrics_path = Path(self.settings["log_dir"]) / "metrics.jsonl"
        get_metrics().write_snapshot(metrics_path)
        return metrics_path

    def log_performance(self, operation: str, duration: float):
        self.logger.info(f"PERFORMANCE: {operation} took {duration:.2f}s")

    @contextmanager
    def time_operation(self, operation_name: str):
        """Context manager for timing operations"""
        start_time = time.time()
        try:
            yield
        finally:
            self.log_performance(operation_name, time.time() - start_time)

    def _ensure_root_logger(self, settings: Dict[str, Any], level: int) -> Optional[Path]:
        if os.getenv("ENABLE_ROOT_LOGGER", "1").lower() in ("0", "false", "no"):
            return None
        root_logger = logging.getLogger()
        if root_logger.handlers:
            return None

        logs_dir = Path(settings["log_dir"])
        logs_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d")
        log_file = logs_dir / f"shim_{timestamp}.log"

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
        ))

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, settings["console_log_level"], logging.INFO))
        console_handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))

        root_logger.setLevel(level)
        root_logger.addHandler(file_handler)
        root_logger.addHandler(console_handler)

        if settings["enable_json_logging"]:
            json_handler = RotatingFileHandler(
                logs_dir / f"shim_json_{timestamp}.log",
                maxBytes=5 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
            json_handler.setLevel(level)
            json_handler.setFormatter(JsonFormatter())
            root_logger.addHandler(json_handler)

        root_logger.addHandler(_MetricsHandler())
        return log_file


# Convenience function for backward compatibility
def setup_logger(name: str = "selenium_shim", log_level: Optional[str] = None) -> logging.Logger:
    """Returns a logger whose output goes to the shared shim handlers"""
    return UnifiedLogger(name=name, log_level=log_level).get_logger()


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if hasattr(record, "action"):
            log_obj["action"] = record.action
        if hasattr(record, "details"):
            log_obj["details"] = record.details
        if hasattr(record, "metric_snapshot"):
            log_obj["metric_snapshot"] = record.metric_snapshot
        return json.dumps(log_obj, default=str)


class _MetricsHandler(logging.Handler):
    """Count log records per level."""

    def emit(self, record: logging.LogRecord) -> None:
        metrics = get_metrics()
        metrics.record(f"log.{record.levelname.lower()}", success=record.levelno < logging.ERROR)
