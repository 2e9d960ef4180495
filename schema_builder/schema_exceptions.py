"""
Custom exception classes for schema tree editing errors.

This module provides specialized exception classes for the failures the
schema tree editor reports to its callers, with enough context for the
view layer to explain what went wrong.
"""

import logging
from typing import Optional, Dict, Any, List

logger = logging.getLogger(__name__)


class SchemaEditorError(Exception):
    """
    Base exception for schema editor errors.

    Attributes:
        message: Error message
        context: Additional context information
        recovery_suggestions: List of suggested recovery actions
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None,
                 recovery_suggestions: Optional[List[str]] = None):
        self.message = message
        self.context = context or {}
        self.recovery_suggestions = recovery_suggestions or []
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class InvalidIndexError(SchemaEditorError, IndexError):
    """
    Exception raised when an operation addresses a position outside its sequence.

    The editor state is left untouched when this is raised.
    """

    def __init__(self, sequence: str, index: Any, length: int,
                 message: Optional[str] = None):
        self.sequence = sequence
        self.index = index
        self.length = length

        if message is None:
            message = f"Index {index} is out of range for {sequence} (length {length})"

        context = {
            'sequence': sequence,
            'index': index,
            'length': length
        }

        recovery_suggestions = [
            "Refresh the page so the field list matches the current schema",
            f"Use a position between 0 and {length - 1}" if length > 0 else f"Add an entry to {sequence} first"
        ]

        super().__init__(message, context, recovery_suggestions)


class UnsupportedFormatError(SchemaEditorError, ValueError):
    """Exception raised when a document is requested in an unknown text format."""

    def __init__(self, fmt: str, supported: List[str]):
        self.fmt = fmt
        self.supported = list(supported)

        message = f"Unsupported document format '{fmt}'"
        context = {
            'format': fmt,
            'supported_formats': self.supported
        }
        recovery_suggestions = [
            f"Use one of: {', '.join(self.supported)}",
            "Check the export.format setting in config.yaml"
        ]

        super().__init__(message, context, recovery_suggestions)



def log_error_with_context(error: SchemaEditorError, operation: str) -> None:
    """
    Log error with full context information.

    Args:
        error: SchemaEditorError instance
        operation: Description of the operation that failed
    """
    logger.warning(f"Schema editor error during {operation}")
    logger.warning(f"Error type: {type(error).__name__}")
    logger.warning(f"Error message: {error.message}")

    if error.context:
        logger.warning("Error context:")
        for key, value in error.context.items():
            logger.warning(f"  {key}: {value}")

    if error.recovery_suggestions:
        logger.info("Recovery suggestions:")
        for i, suggestion in enumerate(error.recovery_suggestions, 1):
            logger.info(f"  {i}. {suggestion}")
