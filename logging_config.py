"""
Logging configuration for Cascade page migration

Application-level logging (operations, REST reads, destination lookups).
Per-page data problems go to cascade_migration.MigrationLogger instead.
"""

import logging
import logging.handlers
import sys
from typing import Optional
from datetime import datetime

from config import (
    LOG_LEVEL,
    LOG_FILE,
    LOG_DIR,
    LOG_FORMAT,
    LOG_ROTATION_SIZE,
    LOG_BACKUP_COUNT,
)


def _structured(section: str, **fields) -> dict:
    return {section: {**fields, "timestamp": datetime.now().isoformat()}}


class OperationLogger:
    """Logger for migration operations with structured context in ``extra``"""

    def __init__(self, name: str = "cascade_migration"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, LOG_LEVEL.upper()))

        LOG_DIR.mkdir(exist_ok=True)

        if not self.logger.handlers:
            self._setup_handlers()

    def _setup_handlers(self):
        """Rotating file handler plus a stderr console handler"""
        file_handler = logging.handlers.RotatingFileHandler(
            LOG_DIR / LOG_FILE, maxBytes=LOG_ROTATION_SIZE, backupCount=LOG_BACKUP_COUNT
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

        # stdout carries page JSON
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(logging.Formatter("%(levelname)s - %(message)s"))

        self.logger.addHandler(file_handler)
        self.logger.addHandler(console_handler)

    def log_operation_start(self, operation: str, **kwargs):
        self.logger.info(
            f"Starting {operation}",
            extra={"structured": _structured("operation", name=operation, context=kwargs)},
        )

    def log_operation_end(self, operation: str, success: bool, **kwargs):
        level = logging.INFO if success else logging.ERROR
        self.logger.log(
            level,
            f"Completed {operation} - {'SUCCESS' if success else 'FAILED'}",
            extra={
                "structured": _structured(
                    "operation", name=operation, success=success, results=kwargs
                )
            },
        )

    def log_lookup(self, kind: str, path: str, asset_id: Optional[str], source: str):
        """Record where a destination file/block lookup was answered"""
        outcome = asset_id if asset_id is not None else "not found"
        self.logger.debug(
            f"Lookup {kind} {path} via {source}: {outcome}",
            extra={
                "structured": _structured(
                    "lookup", kind=kind, path=path, id=asset_id, source=source
                )
            },
        )

    def log_api_call(
        self,
        method: str,
        url: str,
        status_code: Optional[int] = None,
        response_time: Optional[float] = None,
    ):
        """REST calls with timing; HTTP errors at ERROR level"""
        context = _structured(
            "api_call",
            method=method,
            url=url,
            status_code=status_code,
            response_time_ms=response_time * 1000 if response_time else None,
        )
        level = logging.ERROR if status_code and status_code >= 400 else logging.DEBUG
        self.logger.log(
            level,
            f"API {method} {url} - {status_code}" if status_code else f"API {method} {url}",
            extra={"structured": context},
        )

    def log_error(self, error: Exception, context: Optional[dict] = None):
        """Log errors with full context"""
        error_context = _structured(
            "error", type=type(error).__name__, message=str(error), context=context or {}
        )
        self.logger.error(
            f"Error: {type(error).__name__}: {error}",
            extra={"structured": error_context},
            exc_info=True,
        )


def get_logger(name: str = "cascade_migration") -> OperationLogger:
    """Get a configured logger instance"""
    return OperationLogger(name)


# Global logger instance
logger = get_logger()
