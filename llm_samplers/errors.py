"""
Sampler error handling utilities.

This module provides the exception classes raised by the sampling pipeline
and the logging setup shared by its components.
"""

import logging
import os
import sys
from typing import Any, Dict, Optional

# Create the main logger
logger = logging.getLogger("llm_samplers")

# Component-specific loggers
chain_logger = logging.getLogger("llm_samplers.chain")
config_logger = logging.getLogger("llm_samplers.config")


class SamplerError(Exception):
    """Base exception class for sampler errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize error with message and optional details.

        Args:
            message: Error description
            details: Additional context about the error
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class InternalError(SamplerError):
    """Exception raised when a logits buffer invariant is violated."""
    pass


class ConfigurationError(SamplerError):
    """Exception raised for configuration errors."""
    pass


class ValidationError(SamplerError):
    """Exception raised for validation failures."""
    pass


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    component_config: Optional[Dict[str, Dict[str, Any]]] = None,
) -> None:
    """Configure logging for the sampler package.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (if None, logs to console only)
        component_config: Component-specific logging configuration
    """
    level = getattr(logging, log_level.upper())

    logger.setLevel(level)

    # Prevent propagation to avoid duplicate logs
    logger.propagate = False
    logger.handlers = []

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode="w")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    component_loggers = {
        "llm_samplers.chain": chain_logger,
        "llm_samplers.config": config_logger,
    }

    for logger_name, logger_instance in component_loggers.items():
        logger_instance.handlers = []

        # Set component-specific level if configured, otherwise use default level
        component_level = level
        if component_config and logger_name in component_config:
            component_level_name = component_config[logger_name].get("level", log_level)
            component_level = getattr(logging, component_level_name.upper())

        logger_instance.setLevel(component_level)
        logger_instance.propagate = False

        for handler in logger.handlers:
            # Component loggers get their own handlers of the same type
            if isinstance(handler, logging.FileHandler) and log_file:
                new_handler = logging.FileHandler(log_file, mode="a")
            else:
                new_handler = logging.StreamHandler(sys.stdout)

            new_handler.setLevel(component_level)
            new_handler.setFormatter(handler.formatter)
            logger_instance.addHandler(new_handler)

        logger_instance.debug(
            f"Logger {logger_name} configured with level {logging.getLevelName(component_level)}"
        )


def log_exception(
    e: Exception, logger_instance: logging.Logger = logger, log_traceback: bool = True
) -> None:
    """Log exception details with appropriate formatting.

    Args:
        e: Exception instance
        logger_instance: Logger to use
        log_traceback: Whether to log full traceback
    """
    logger_instance.error(f"{type(e).__name__}: {str(e)}")
    if isinstance(e, SamplerError) and e.details:
        for key, value in e.details.items():
            logger_instance.error(f"  {key}: {value}")

    if log_traceback:
        logger_instance.debug("Traceback:", exc_info=True)
