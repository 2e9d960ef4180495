"""
Session state management for the schema tree editor.
Owns the per-session SchemaTreeEditor and the export snapshot used for
change tracking.
"""

import streamlit as st
from typing import Dict, Any, List, Optional
from datetime import datetime
from copy import deepcopy
import logging

from schema_builder.schema_tree import SchemaTreeEditor

logger = logging.getLogger(__name__)

EDITOR_KEY = 'schema_tree_editor'
LAST_EXPORT_KEY = 'schema_last_export'
LAST_EXPORT_TS_KEY = 'schema_last_exported_at'


class SessionManager:
    """Manages Streamlit session state for the schema tree editor."""

    @staticmethod
    def initialize():
        """Initialize all session state variables with default values."""
        defaults = {
            LAST_EXPORT_KEY: None,
            LAST_EXPORT_TS_KEY: None,
            'unsaved_changes': False,
            'last_activity': datetime.now(),
            'session_id': None,
        }

        for key, default_value in defaults.items():
            if key not in st.session_state:
                st.session_state[key] = default_value

        # One editor per session, created once and reused across reruns
        if EDITOR_KEY not in st.session_state:
            st.session_state[EDITOR_KEY] = SchemaTreeEditor()

        if not st.session_state.session_id:
            st.session_state.session_id = f"session_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
            logger.info(f"Session initialized: {st.session_state.session_id}")

    @staticmethod
    def get_editor() -> SchemaTreeEditor:
        """Get the session's editor, creating it if needed."""
        if EDITOR_KEY not in st.session_state:
            SessionManager.initialize()
        return st.session_state[EDITOR_KEY]

    @staticmethod
    def mark_changed():
        """Record that the schema changed since the last export."""
        st.session_state.unsaved_changes = True
        SessionManager.update_activity()

    @staticmethod
    def has_unsaved_changes() -> bool:
        """Check if the schema changed since the last export."""
        return st.session_state.get('unsaved_changes', False)

    @staticmethod
    def mark_exported(document: List[Dict[str, Any]]):
        """Store the exported document as the baseline for change tracking."""
        st.session_state[LAST_EXPORT_KEY] = deepcopy(document)
        st.session_state[LAST_EXPORT_TS_KEY] = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        st.session_state.unsaved_changes = False
        logger.info(f"Schema exported with {len(document)} fields")
        SessionManager.update_activity()

    @staticmethod
    def get_last_export() -> Optional[List[Dict[str, Any]]]:
        """Get the last exported document, or None if nothing was exported."""
        return st.session_state.get(LAST_EXPORT_KEY)

    @staticmethod
    def get_last_export_time() -> Optional[str]:
        """Get the timestamp of the last export."""
        return st.session_state.get(LAST_EXPORT_TS_KEY)

    @staticmethod
    def update_activity():
        """Update last activity timestamp."""
        st.session_state.last_activity = datetime.now()

    @staticmethod
    def get_last_activity() -> datetime:
        """Get last activity timestamp."""
        return st.session_state.get('last_activity', datetime.now())

    @staticmethod
    def get_session_id() -> str:
        """Get the session ID."""
        return st.session_state.get('session_id', 'unknown')

    @staticmethod
    def reset_session():
        """Clear the schema, the draft and the export snapshot."""
        logger.info(f"Resetting session: {SessionManager.get_session_id()}")

        SessionManager.get_editor().reset()
        st.session_state[LAST_EXPORT_KEY] = None
        st.session_state[LAST_EXPORT_TS_KEY] = None
        st.session_state.unsaved_changes = False
        SessionManager.update_activity()

    @staticmethod
    def get_session_info() -> Dict[str, Any]:
        """Get session information for debugging."""
        editor = SessionManager.get_editor()
        return {
            'session_id': SessionManager.get_session_id(),
            'field_count': len(editor),
            'draft': editor.draft.model_dump(),
            'unsaved_changes': SessionManager.has_unsaved_changes(),
            'last_export': SessionManager.get_last_export_time(),
            'last_activity': SessionManager.get_last_activity().isoformat()
        }
