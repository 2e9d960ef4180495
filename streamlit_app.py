"""
Main Streamlit application for the schema tree editor.
Interactive builder for record schemas made of named, typed and nested fields.
"""

import streamlit as st
import logging

from schema_builder.config_loader import get_config, get_config_value, validate_config
from schema_builder.session_manager import SessionManager


def get_logging_level(level_str):
    """Map string logging level to logging constant."""
    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }
    return level_map.get(str(level_str).upper(), logging.INFO)


# Configure logging dynamically from config
log_level_str = get_config_value('logging', 'level', 'INFO')
logging.basicConfig(level=get_logging_level(log_level_str))
logger = logging.getLogger(__name__)
logger.info(f"Logging configured to level: {log_level_str}")


def main():
    """Main application entry point."""
    from schema_builder.error_handler import ErrorHandler, ErrorType
    from schema_builder.ui_feedback import show_loading

    st.set_page_config(
        page_title=get_config_value('ui', 'page_title', 'Schema Tree Editor'),
        page_icon="🧩",
        layout="wide"
    )

    try:
        with show_loading("Initializing application..."):
            validate_configuration()
            SessionManager.initialize()

        render_header()
        render_sidebar()
        render_schema_editor_view()

    except Exception as e:
        ErrorHandler.handle_error(e, "application startup", ErrorType.SYSTEM)


def validate_configuration():
    """Validate configuration and warn the user when defaults are substituted."""
    config = get_config()
    if not validate_config(config):
        st.warning("⚠️ **Configuration Issues Detected**")
        st.warning("Some configuration settings in config.yaml are invalid. Check the application logs for details.")
    else:
        logger.debug("Configuration validated")


def render_header():
    """Render application header."""
    st.title(get_config_value('app', 'name', 'Schema Tree Editor'))
    st.caption("Add fields, pick their types and nest items under nested fields. "
               "The schema document below updates as you edit.")


def render_sidebar():
    """Render application sidebar with session information."""
    with st.sidebar:
        st.header("Session")

        info = SessionManager.get_session_info()
        st.metric("Fields", info['field_count'])

        if info['last_export']:
            st.caption(f"Last export: {info['last_export']}")
        else:
            st.caption("Not exported yet")

        if info['unsaved_changes']:
            st.warning("Changes since last export")

        st.divider()
        st.caption(f"Version {get_config_value('app', 'version', 'Unknown')}")


def render_schema_editor_view():
    """Render the schema editor page."""
    from schema_builder.schema_editor_view import SchemaEditorView

    try:
        SchemaEditorView.render()
    except Exception as e:
        st.error(f"Error loading schema editor: {str(e)}")
        logger.error(f"Error in schema editor: {e}", exc_info=True)


if __name__ == "__main__":
    main()
