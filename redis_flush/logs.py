"""
Structured logging module for the Redis flush tool.

This module provides structured logging with component naming and execution timing.
It supports colored output for console logs and, when enabled in settings,
JSON output for rotating file logs.
"""

import logging
import structlog
import os
import time
import functools
import contextlib
from typing import Any
from logging.handlers import RotatingFileHandler
from datetime import datetime

from redis_flush.config import get_settings

# Global flag to prevent multiple initializations
_logging_configured = False

# ANSI color codes for console output
COLORS = {
    'blue': '\033[34;1m',      # Blue bold for component paths
    'green': '\033[32m',       # Green for success
    'red': '\033[31m',         # Red for failures and errors
    'magenta': '\033[35m',     # Magenta for durations
    'gray': '\033[2;37m',      # Dim gray for identifiers
    'yellow': '\033[33m',      # Yellow for warnings
    'reset': '\033[0m',
}

ICONS = {
    'success': '✓',
    'fail': '✗',
    'warning': '!'
}


def add_component_context(_, __, event_dict):
    """
    Add component context to log events.

    Creates a formatted component path like [Component > SubComponent]
    based on component and subcomponent fields.
    """
    if 'component' in event_dict and 'subcomponent' in event_dict:
        event_dict['component_path'] = f"[{event_dict['component']} > {event_dict['subcomponent']}]"
    elif 'component' in event_dict:
        event_dict['component_path'] = f"[{event_dict['component']}]"
    return event_dict


def colorize_console_output(_, __, event_dict):
    """
    Format log events with colors for console output.

    This function works with ProcessorFormatter and returns a formatted string.
    """
    event_data = event_dict.copy()

    timestamp = event_data.get('timestamp', '')
    level = event_data.get('level', '').upper()
    event = event_data.get('event', '')

    output_parts = [f"{timestamp} [{level}]"]

    if 'component_path' in event_data:
        output_parts.append(f"{COLORS['blue']}{event_data['component_path']}{COLORS['reset']}")

    output_parts.append(str(event))

    if 'execution_time' in event_data:
        output_parts.append(f"{COLORS['magenta']}(took {event_data['execution_time']}){COLORS['reset']}")

    # component/subcomponent are already shown in component_path
    skip_keys = {
        'timestamp', 'level', 'event', 'component_path', 'component', 'subcomponent',
        'execution_time', 'exc_info', 'exception', '_record', '_from_structlog',
    }

    for key, value in event_data.items():
        if key in skip_keys:
            continue

        if key == 'status' and value == 'success':
            output_parts.append(f"{key}={COLORS['green']}{ICONS['success']} {value}{COLORS['reset']}")
        elif key == 'status' and value in ('failed', 'error'):
            output_parts.append(f"{key}={COLORS['red']}{ICONS['fail']} {value}{COLORS['reset']}")
        elif key == 'error' or key == 'exception_message':
            output_parts.append(f"{key}={COLORS['red']}{value}{COLORS['reset']}")
        elif key == 'warning':
            output_parts.append(f"{key}={COLORS['yellow']}{value}{COLORS['reset']}")
        elif key.endswith('_id'):
            output_parts.append(f"{key}={COLORS['gray']}{value}{COLORS['reset']}")
        else:
            output_parts.append(f"{key}={value}")

    rendered = " ".join(output_parts)
    if 'exception' in event_data:
        rendered = f"{rendered}\n{event_data['exception']}"
    return rendered


def _configure_logging_once():
    """
    Configure logging only once to prevent duplicate handlers.

    Uses ProcessorFormatter for dual output:
    - Console: Colored, human-readable format
    - File: Pure JSON format for structured logging (only when log_to_file is set)
    """
    global _logging_configured

    if _logging_configured:
        return

    settings = get_settings()
    level = logging.DEBUG if settings.debug_mode else getattr(
        logging, settings.log_level.upper(), logging.INFO
    )

    # Final rendering is done by the ProcessorFormatter attached to each handler
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_component_context,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    foreign_pre_chain = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_component_context,
    ]

    package_logger = logging.getLogger("redis_flush")
    package_logger.setLevel(level)
    package_logger.propagate = False

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=colorize_console_output,
            foreign_pre_chain=foreign_pre_chain,
        )
    )
    package_logger.addHandler(console_handler)

    if settings.log_to_file:
        os.makedirs(settings.log_dir, exist_ok=True)
        log_file = os.path.join(
            settings.log_dir, f"redis_flush_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        )
        file_handler = RotatingFileHandler(
            filename=log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.processors.JSONRenderer(default=str),
                ],
                foreign_pre_chain=foreign_pre_chain,
            )
        )
        package_logger.addHandler(file_handler)

    logging.getLogger("redis").setLevel(logging.WARNING)

    _logging_configured = True


def get_logger(log_name: str = __name__) -> Any:
    """
    Get a configured structlog logger.

    Args:
        log_name: Logger name, normally the module's ``__name__``

    Returns:
        Configured structlog logger
    """
    _configure_logging_once()
    return structlog.wrap_logger(logging.getLogger(log_name))


def get_component_logger(component: str) -> Any:
    """
    Get a logger pre-configured with a component name.

    Args:
        component: Component name to bind to the logger

    Returns:
        Logger with component name bound
    """
    logger = get_logger(f"redis_flush.{component.lower()}")
    return logger.bind(component=component)


@contextlib.contextmanager
def log_execution_time(logger, component: str, operation: str):
    """
    Context manager to log execution time of a block of code.

    Example:
        with log_execution_time(logger, "Statistics", "Info"):
            info = client.info()
    """
    start_time = time.perf_counter()
    try:
        yield
    finally:
        execution_time = time.perf_counter() - start_time
        logger.debug(
            "Operation completed",
            component=component,
            subcomponent=operation,
            execution_time=f"{execution_time:.3f}s",
        )


def time_execution(component: str, operation: str):
    """
    Decorator to log execution time of a function.

    Uses ``self.logger`` when the wrapped callable is a method that has one.

    Example:
        @time_execution("Flush", "FlushAll")
        def flush_all(self):
            ...
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if args and hasattr(args[0], 'logger'):
                logger = args[0].logger
            else:
                logger = get_component_logger(component)

            start_time = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                execution_time = time.perf_counter() - start_time
                logger.info(
                    f"{func.__name__} completed",
                    component=component,
                    subcomponent=operation,
                    execution_time=f"{execution_time:.3f}s",
                )

        return wrapper

    return decorator
