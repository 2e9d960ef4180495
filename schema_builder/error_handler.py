"""
Error handling utilities for the schema tree editor.
Turns exceptions raised by editor operations into logged, user-friendly messages.
"""

import streamlit as st
import logging
import traceback
from typing import List, Optional

from schema_builder.schema_exceptions import (
    SchemaEditorError,
    InvalidIndexError,
    UnsupportedFormatError,
    log_error_with_context
)

logger = logging.getLogger(__name__)


class ErrorType:
    """Error type constants."""
    USER_INPUT = "user_input"
    EXPORT = "export"
    SYSTEM = "system"


class ErrorHandler:
    """Error handling for the schema tree editor."""

    @staticmethod
    def handle_error(
        error: Exception,
        context: str,
        error_type: str = ErrorType.SYSTEM,
        user_message: Optional[str] = None,
        show_details: bool = False
    ) -> None:
        """
        Handle errors with user-friendly messages and recovery suggestions.

        Args:
            error: The exception that occurred
            context: Context where the error occurred
            error_type: Type of error (from ErrorType constants)
            user_message: Custom user-friendly message
            show_details: Whether to show technical details
        """
        if isinstance(error, SchemaEditorError):
            log_error_with_context(error, context)
        else:
            logger.error(f"Error in {context}: {str(error)}", exc_info=True)

        if not user_message:
            user_message = ErrorHandler._get_user_friendly_message(error, error_type)

        ErrorHandler._display_error(user_message, error, context, show_details)

    @staticmethod
    def _get_user_friendly_message(error: Exception, error_type: str) -> str:
        """Generate user-friendly error messages based on error type."""
        error_messages = {
            ErrorType.USER_INPUT: {
                InvalidIndexError: "⚠️ That entry no longer exists. The field list may be out of date.",
                ValueError: "⚠️ Invalid input provided. Please check your data and try again.",
                "default": "⚠️ Input error. Please review your data and try again."
            },

            ErrorType.EXPORT: {
                UnsupportedFormatError: "📋 The configured export format is not supported.",
                "default": "📋 The schema document could not be generated."
            },

            ErrorType.SYSTEM: {
                MemoryError: "💻 System is running low on memory. Please try again or contact support.",
                ImportError: "💻 Required system component is missing. Please contact support.",
                "default": "💻 System error occurred. Please try again or contact support."
            }
        }

        error_type_messages = error_messages.get(error_type, error_messages[ErrorType.SYSTEM])

        for exception_type, message in error_type_messages.items():
            if exception_type != "default" and isinstance(error, exception_type):
                return message

        return error_type_messages.get("default", "An unexpected error occurred.")

    @staticmethod
    def _display_error(
        user_message: str,
        error: Exception,
        context: str,
        show_details: bool = False
    ) -> None:
        """Display error message to user with recovery suggestions."""
        st.error(user_message)

        suggestions: List[str] = []
        if isinstance(error, SchemaEditorError):
            suggestions = error.recovery_suggestions
        if suggestions:
            st.info("💡 **Recovery Options:**")
            for suggestion in suggestions:
                st.info(f"• {suggestion}")

        if show_details:
            with st.expander("🔍 Technical Details"):
                st.write(f"**Error Type:** {type(error).__name__}")
                st.write(f"**Context:** {context}")
                st.write(f"**Error Message:** {str(error)}")
                st.code(traceback.format_exc())

