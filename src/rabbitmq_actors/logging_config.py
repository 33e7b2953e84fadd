"""
Centralized logging configuration for rabbitmq_actors.

Library internals log through module loggers. Agents log their activity to
the logger they were given, or to a default one writing to standard output.
"""

import logging
import sys
from typing import Optional

from rabbitmq_actors.config import SERVICE_NAME


def setup_logging(
    level: int = logging.INFO,
    component: Optional[str] = None,
    force_setup: bool = False,
) -> None:
    """
    Setup root logging for processes running agents.

    Args:
        level: Logging level (default: INFO)
        component: Name of the running component (e.g., 'listen', 'publish')
        force_setup: Whether to force reconfiguration even if already setup
    """
    root_logger = logging.getLogger()
    if root_logger.handlers and not force_setup:
        # Logging already configured, just ensure our level is set
        root_logger.setLevel(level)
        return

    if force_setup:
        root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(create_formatter(component))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # Reduce noise from the broker client
    logging.getLogger("amqpstorm").setLevel(logging.WARNING)

    logging.getLogger(SERVICE_NAME).setLevel(level)


def create_formatter(component: Optional[str] = None) -> logging.Formatter:
    """
    Create a standardized formatter.

    Args:
        component: Name of the component for log identification

    Returns:
        Configured logging formatter
    """
    if component:
        prefix = f"[{component}] "
    else:
        prefix = ""

    return logging.Formatter(f"%(asctime)s - {prefix}%(name)s - %(levelname)s - %(message)s")


def get_default_logger(name: str) -> logging.Logger:
    """
    Get the logger used by agents that were not given one.

    The logger writes everything from DEBUG up to standard output and does
    not propagate to the root logger. The handler is only installed once per name.

    Args:
        name: Suffix of the logger name, usually the agent class name

    Returns:
        The standard output logger
    """
    logger = logging.getLogger(f"{SERVICE_NAME}.{name}")
    if not any(getattr(h, "_rabbitmq_actors_default", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(create_formatter())
        handler._rabbitmq_actors_default = True
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
    return logger
