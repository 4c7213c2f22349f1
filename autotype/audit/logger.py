"""Audit logging for autotype requests.

Provides an audit trail of every autotype call with timestamps, the
injection method, and the outcome. The typed text is never recorded.
"""

import json
import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


class AuditEventType(Enum):
    """Types of audit events."""
    AUTOTYPE_REQUESTED = "autotype_requested"
    AUTOTYPE_COMPLETED = "autotype_completed"
    AUTOTYPE_FAILED = "autotype_failed"


@dataclass
class AuditEvent:
    """Represents an audit log entry."""
    timestamp: float
    event_type: AuditEventType
    details: dict[str, Any]
    result: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "timestamp": self.timestamp,
            "datetime": datetime.fromtimestamp(self.timestamp).isoformat(),
            "event_type": self.event_type.value,
            "details": self.details,
            "result": self.result,
            "error": self.error,
        }

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), separators=(",", ":"))


class AuditLogger:
    """
    Audit logger for autotype requests.

    Features:
    - One JSON line per event
    - Rotating log files to manage disk space
    - Thread-safe lazy initialization
    - Typed text is redacted before anything is written
    """

    DEFAULT_LOG_DIR = Path("logs")
    DEFAULT_LOG_FILE = "autotype-audit.log"
    DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
    DEFAULT_BACKUP_COUNT = 5

    def __init__(
        self,
        log_dir: Optional[Path] = None,
        log_file: str = DEFAULT_LOG_FILE,
        max_bytes: int = DEFAULT_MAX_BYTES,
        backup_count: int = DEFAULT_BACKUP_COUNT,
    ):
        """
        Initialize the audit logger.

        Args:
            log_dir: Directory for log files. Defaults to 'logs' in working dir.
            log_file: Name of the log file.
            max_bytes: Maximum size of each log file before rotation.
            backup_count: Number of backup files to keep.
        """
        self._log_dir = Path(log_dir) if log_dir else self.DEFAULT_LOG_DIR
        self._log_file = log_file
        self._max_bytes = max_bytes
        self._backup_count = backup_count
        self._lock = threading.Lock()
        self._logger: Optional[logging.Logger] = None
        self._handler: Optional[RotatingFileHandler] = None
        self._initialized = False

    @property
    def log_path(self) -> Path:
        return self._log_dir / self._log_file

    def _ensure_initialized(self) -> None:
        """Ensure the logger is initialized (lazy initialization)."""
        if self._initialized:
            return

        with self._lock:
            if self._initialized:
                return

            self._log_dir.mkdir(parents=True, exist_ok=True)

            self._handler = RotatingFileHandler(
                filename=str(self.log_path),
                maxBytes=self._max_bytes,
                backupCount=self._backup_count,
                encoding="utf-8",
            )
            self._handler.setLevel(logging.INFO)
            self._handler.setFormatter(logging.Formatter("%(message)s"))

            # One logger per file so several audit logs can coexist
            self._logger = logging.getLogger(f"autotype.audit.{id(self)}")
            self._logger.setLevel(logging.INFO)
            self._logger.addHandler(self._handler)
            self._logger.propagate = False

            self._initialized = True

    def log(self, event: AuditEvent) -> None:
        """
        Log an audit event.

        Args:
            event: The audit event to log.
        """
        self._ensure_initialized()

        try:
            self._logger.info(event.to_json())
            self._handler.flush()
        except (OSError, ValueError) as e:
            # Audit failures must not affect typing
            logger.warning("Failed to write audit event: %s", e)

    def log_requested(
        self,
        char_count: int,
        method: str,
        delay_ms: int,
        **extra: Any,
    ) -> None:
        """Log an incoming autotype request."""
        details = {
            "char_count": char_count,
            "method": method,
            "delay_ms": delay_ms,
        }
        details.update(self._sanitize_details(extra))

        self.log(AuditEvent(
            timestamp=time.time(),
            event_type=AuditEventType.AUTOTYPE_REQUESTED,
            details=details,
            result="pending",
        ))

    def log_result(
        self,
        success: bool,
        keys_sent: int,
        strategy: Optional[str],
        duration_ms: float,
        error: Optional[str] = None,
    ) -> None:
        """Log the outcome of an autotype request."""
        self.log(AuditEvent(
            timestamp=time.time(),
            event_type=AuditEventType.AUTOTYPE_COMPLETED if success else AuditEventType.AUTOTYPE_FAILED,
            details={
                "keys_sent": keys_sent,
                "strategy": strategy,
                "duration_ms": round(duration_ms, 2),
            },
            result="succeeded" if success else "failed",
            error=error,
        ))

    def close(self) -> None:
        """Detach and close the file handler."""
        with self._lock:
            if self._handler is not None and self._logger is not None:
                self._logger.removeHandler(self._handler)
                self._handler.close()
            self._handler = None
            self._logger = None
            self._initialized = False

    def _sanitize_details(self, details: dict[str, Any]) -> dict[str, Any]:
        """
        Remove anything that could carry the typed text.

        Text values are replaced by their length only.
        """
        safe_details = {}

        for key, value in details.items():
            if key in ("text", "secret", "password") and isinstance(value, str):
                safe_details[key] = f"<redacted: {len(value)} chars>"
            else:
                safe_details[key] = value

        return safe_details


# Global audit logger instance
_audit_logger: Optional[AuditLogger] = None
_audit_lock = threading.Lock()


def configure_audit_logger(
    log_dir: Optional[Path] = None,
    log_file: str = AuditLogger.DEFAULT_LOG_FILE,
    max_bytes: int = AuditLogger.DEFAULT_MAX_BYTES,
    backup_count: int = AuditLogger.DEFAULT_BACKUP_COUNT,
) -> AuditLogger:
    """
    Configure and return the global audit logger.

    Args:
        log_dir: Directory for log files.
        log_file: Name of the log file.
        max_bytes: Maximum size of each log file before rotation.
        backup_count: Number of backup files to keep.

    Returns:
        The configured AuditLogger instance.
    """
    global _audit_logger

    with _audit_lock:
        if _audit_logger:
            _audit_logger.close()

        _audit_logger = AuditLogger(
            log_dir=log_dir,
            log_file=log_file,
            max_bytes=max_bytes,
            backup_count=backup_count,
        )

    return _audit_logger
