"""
Toast notifications and the startup spinner for the schema tree editor.
"""

import streamlit as st
import logging

logger = logging.getLogger(__name__)


class Notify:
    """
    Non-blocking toast notifications for editor actions.

    Usage:
    Notify.success("Added field: id")
    Notify.once("Schema Editor ready", key="schema_editor_loaded")
    """

    SUCCESS_ICON = '✅'
    INFO_ICON = 'ℹ️'

    @staticmethod
    def success(message: str) -> None:
        st.toast(message, icon=Notify.SUCCESS_ICON)

    @staticmethod
    def info(message: str) -> None:
        st.toast(message, icon=Notify.INFO_ICON)

    @staticmethod
    def once(message: str, notification_type: str = 'info', key: str = 'default_once') -> bool:
        """
        Toast ``message`` the first time ``key`` is seen in this session.

        Returns:
            True if the toast was shown, False if it was shown before
        """
        if st.session_state.get(key):
            return False
        if notification_type == 'success':
            Notify.success(message)
        else:
            Notify.info(message)
        st.session_state[key] = True
        logger.debug(f"One-time notification '{key}' shown")
        return True


def show_loading(message: str = "Loading..."):
    """Spinner shown while the page initializes; use as a context manager."""
    return st.spinner(message)
