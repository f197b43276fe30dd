"""
Structured logging for the bookshop service using structlog.
Provides JSON or console output and an audit logger for identity events.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union
import structlog
from structlog.stdlib import LoggerFactory


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[Union[str, Path]] = None,
    debug: bool = False
) -> None:
    """
    Set up structured logging with configurable output formats.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        log_file: Optional log file path
        debug: Add call-site information to every event
    """

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        processors.append(structlog.processors.CallsiteParameterAdder())

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(getattr(logging, log_level.upper()))
        file_handler.setFormatter(logging.Formatter('%(message)s'))
        logging.getLogger().addHandler(file_handler)

    logger = structlog.get_logger(__name__)
    logger.info(
        "Logging system initialized",
        level=log_level,
        format=log_format,
        file=str(log_file) if log_file else None,
        debug=debug
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class AuthEventLogger:
    """
    Audit logger for identity and review-ownership events.

    Only usernames and outcomes are recorded. Passwords, digests and
    tokens never reach the log.
    """

    def __init__(self, name: str = "auth"):
        self.logger = structlog.get_logger(name)

    def log_registration(self, username: str, success: bool, reason: Optional[str] = None) -> None:
        """Log a registration attempt."""
        level = "info" if success else "warning"
        getattr(self.logger, level)(
            "User registration",
            username=username,
            success=success,
            reason=reason
        )

    def log_login(self, username: str, success: bool) -> None:
        """Log a login attempt without revealing why it failed."""
        level = "info" if success else "warning"
        getattr(self.logger, level)(
            "User login",
            username=username,
            success=success
        )

    def log_token_rejected(self, reason: str, defect: Optional[str] = None) -> None:
        """Log a rejected bearer credential with its server-side cause."""
        self.logger.warning(
            "Bearer token rejected",
            reason=reason,
            defect=defect
        )

    def log_review_change(self, operation: str, isbn: str, username: str, success: bool = True) -> None:
        """Log a review upsert or removal."""
        level = "info" if success else "warning"
        getattr(self.logger, level)(
            "Review changed",
            operation=operation,
            isbn=isbn,
            username=username,
            success=success
        )
