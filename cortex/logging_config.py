"""Logging setup for the Cortex backend.

All loggers live under the ``cortex`` namespace. The ``log_*`` helpers emit
pipe-delimited lines so audit and sync activity can be grepped out of the
service logs.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Attach a stream handler to the ``cortex`` root logger (idempotent)."""
    global _configured
    root = logging.getLogger("cortex")
    root.setLevel(level.upper())
    if _configured:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger, namespaced under ``cortex``."""
    if not name.startswith("cortex"):
        name = f"cortex.{name}"
    return logging.getLogger(name)


_mutation_logger = get_logger("cortex.audit")
_sync_logger = get_logger("cortex.sync")
_auth_logger = get_logger("cortex.auth")


def log_mutation_event(
    user_id: str,
    label: str,
    stage: str,
    success: bool,
    error: str | None = None,
) -> None:
    """Log one stage of a mutation-pipeline invocation."""
    status = "ok" if success else "failed"
    message = f"NYX | {user_id} | {label} | {stage} | {status}"
    if error:
        message += f" | {error}"
    if success:
        _mutation_logger.info(message)
    else:
        _mutation_logger.warning(message)


def log_sync_operation(
    user_id: str,
    table: str,
    record_id: str | None,
    status: str,
    error: str | None = None,
) -> None:
    """Log the outcome of a single reconciled change."""
    message = f"SYNC | {user_id} | {table}/{record_id} | {status}"
    if error:
        message += f" | {error}"
        _sync_logger.warning(message)
    else:
        _sync_logger.info(message)


def log_auth_event(event: str, success: bool, reason: str | None = None) -> None:
    """Log an authentication attempt (never the credential itself)."""
    message = f"AUTH | {event} | {'ok' if success else 'rejected'}"
    if reason:
        message += f" | {reason}"
    if success:
        _auth_logger.info(message)
    else:
        _auth_logger.warning(message)
