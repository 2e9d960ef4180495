"""
Schema Editor View for the schema tree editor.
Renders the draft form, one editable row per field, child rows for nested
fields and the serialized document, and routes every user action to the
session's SchemaTreeEditor.
"""

import streamlit as st
import logging
from typing import Callable, List, Optional

from schema_builder.schema_tree import FieldKind, SchemaField, SchemaTreeEditor
from schema_builder.schema_exceptions import SchemaEditorError
from schema_builder.session_manager import SessionManager
from schema_builder.error_handler import ErrorHandler, ErrorType
from schema_builder.config_loader import get_config_value
from schema_builder.diff_utils import calculate_diff, has_changes, get_change_summary, format_diff_for_display
from schema_builder.ui_feedback import Notify

logger = logging.getLogger(__name__)

# Widget keys embed these counters so that widgets are rebuilt after an edit
# that shifts positions or clears the draft; otherwise Streamlit would hand a
# removed row's widget value to the row that moved into its slot.
LAYOUT_VERSION_KEY = "schema_editor_layout_version"
DRAFT_VERSION_KEY = "schema_editor_draft_version"

MIME_TYPES = {
    'json': 'application/json',
    'yaml': 'application/x-yaml'
}


class SchemaEditorView:
    """Streamlit controller for the schema tree editor page."""

    @staticmethod
    def render() -> None:
        """Main entry point for rendering the schema editor."""
        editor = SessionManager.get_editor()
        Notify.once("Schema Editor ready", notification_type="info", key="schema_editor_loaded")

        st.subheader("🏷️ Schema Fields")
        SchemaEditorView._render_draft_form(editor)
        st.divider()

        SchemaEditorView._render_field_rows(editor)
        st.divider()

        SchemaEditorView._render_document_preview(editor)

    # ------------------------------------------------------------------
    # Draft form
    # ------------------------------------------------------------------

    @staticmethod
    def _render_draft_form(editor: SchemaTreeEditor) -> None:
        """Render the name/kind inputs and the Add Field button."""
        draft_version = st.session_state.get(DRAFT_VERSION_KEY, 0)
        col1, col2, col3 = st.columns([2, 2, 1])

        with col1:
            draft_name = st.text_input(
                "Field Name",
                value=editor.draft.name,
                key=f"draft_name_{draft_version}",
                placeholder="Field Name",
                label_visibility="collapsed"
            )

        with col2:
            draft_kind = st.selectbox(
                "Field Type",
                options=FieldKind.ALL,
                index=FieldKind.ALL.index(editor.draft.kind) if editor.draft.kind in FieldKind.ALL else None,
                key=f"draft_kind_{draft_version}",
                placeholder="Field Type",
                format_func=SchemaEditorView._format_kind,
                label_visibility="collapsed"
            )

        editor.set_draft(name=draft_name or '', kind=draft_kind or '')

        with col3:
            if st.button("➕ Add Field", type="primary", key="add_field_btn",
                         help="Add a field using the name and type on the left",
                         width='stretch'):
                SchemaEditorView._add_field(editor)

    @staticmethod
    def _add_field(editor: SchemaTreeEditor) -> None:
        """Add a field from the draft; does nothing until both inputs are filled."""
        name = editor.draft.name
        if not editor.add_field():
            logger.debug("Add Field pressed with incomplete draft")
            return

        SessionManager.mark_changed()
        st.session_state[DRAFT_VERSION_KEY] = st.session_state.get(DRAFT_VERSION_KEY, 0) + 1
        SchemaEditorView._bump_layout_version()
        Notify.success(f"Added field: {name}")
        st.rerun()

    # ------------------------------------------------------------------
    # Field rows
    # ------------------------------------------------------------------

    @staticmethod
    def _render_field_rows(editor: SchemaTreeEditor) -> None:
        """Render an editable row for every field, stopping after a structural edit."""
        fields = editor.fields

        if not fields:
            st.caption("No fields defined yet. Enter a name and type, then click 'Add Field'.")
            return

        for index, field in enumerate(fields):
            if SchemaEditorView._render_field_row(editor, index, field):
                return

    @staticmethod
    def _render_field_row(editor: SchemaTreeEditor, index: int, field: SchemaField) -> bool:
        """
        Render one top-level field with its children.

        Returns:
            True if a structural button was pressed and rendering should stop
        """
        version = st.session_state.get(LAYOUT_VERSION_KEY, 0)
        col1, col2, col3 = st.columns([2, 2, 1])

        with col1:
            new_name = st.text_input(
                "Field Name",
                value=field.name,
                key=f"name_{version}_{index}",
                placeholder="Field Name",
                label_visibility="collapsed"
            )

        with col2:
            options = SchemaEditorView._kind_options(field.kind)
            new_kind = st.selectbox(
                "Field Type",
                options=options,
                index=options.index(field.kind) if field.kind in options else None,
                key=f"type_{version}_{index}",
                placeholder="Field Type",
                format_func=SchemaEditorView._format_kind,
                label_visibility="collapsed"
            )

        with col3:
            if st.button("🗑️ Remove", key=f"remove_{version}_{index}",
                         help="Remove this field", width='stretch'):
                if SchemaEditorView._run_action(
                        "remove field", lambda: editor.remove_field(index), structural=True):
                    Notify.info(f"Removed field: {field.name}")
                    st.rerun()
                return True

        if new_name != field.name:
            SchemaEditorView._run_action(
                "rename field", lambda: editor.rename_field(index, None, new_name=new_name))
        if new_kind is not None and new_kind != field.kind:
            SchemaEditorView._run_action(
                "change field type", lambda: editor.retype_field(index, None, new_kind=new_kind))

        if not field.is_nested():
            return False

        if field.children:
            if SchemaEditorView._render_child_rows(editor, index, field):
                return True

        _, item_col, _ = st.columns([2, 2, 1])
        with item_col:
            if st.button("➕ Add Item", type="primary", key=f"add_item_{version}_{index}",
                         help="Add a child using the name and type in the form above",
                         width='stretch'):
                if SchemaEditorView._run_action(
                        "add item", lambda: editor.add_child(index), structural=True):
                    st.rerun()
                return True

        return False

    @staticmethod
    def _render_child_rows(editor: SchemaTreeEditor, parent_index: int, parent: SchemaField) -> bool:
        """
        Render the children of a nested field.

        Returns:
            True if a child Remove button was pressed
        """
        version = st.session_state.get(LAYOUT_VERSION_KEY, 0)

        for child_index, child in enumerate(list(parent.children or [])):
            spacer, col1, col2, col3 = st.columns([0.3, 1.7, 2, 1])
            key_suffix = f"{version}_{parent_index}_{child_index}"

            with spacer:
                st.markdown("↳")

            with col1:
                new_name = st.text_input(
                    "Field Name",
                    value=child.name,
                    key=f"child_name_{key_suffix}",
                    placeholder="Field Name",
                    label_visibility="collapsed"
                )

            with col2:
                options = SchemaEditorView._kind_options(child.kind)
                new_kind = st.selectbox(
                    "Field Type",
                    options=options,
                    index=options.index(child.kind) if child.kind in options else None,
                    key=f"child_type_{key_suffix}",
                    placeholder="Field Type",
                    format_func=SchemaEditorView._format_kind,
                    label_visibility="collapsed"
                )

            with col3:
                if st.button("🗑️ Remove", key=f"remove_child_{key_suffix}",
                             help="Remove this item", width='stretch'):
                    if SchemaEditorView._run_action(
                            "remove item",
                            lambda: editor.remove_child(parent_index, child_index),
                            structural=True):
                        st.rerun()
                    return True

            if new_name != child.name:
                SchemaEditorView._run_action(
                    "rename item", lambda: editor.rename_field(parent_index, child_index, new_name=new_name))
            if new_kind is not None and new_kind != child.kind:
                SchemaEditorView._run_action(
                    "change item type", lambda: editor.retype_field(parent_index, child_index, new_kind=new_kind))

        return False

    # ------------------------------------------------------------------
    # Document preview and export
    # ------------------------------------------------------------------

    @staticmethod
    def _render_document_preview(editor: SchemaTreeEditor) -> None:
        """Render the serialized document, the download button and the change summary."""
        fmt = get_config_value('export', 'format', 'json')
        indent = get_config_value('export', 'indent', 2)
        file_name = get_config_value('export', 'file_name', 'schema')

        try:
            text = editor.serialize(fmt=fmt, indent=indent)
        except SchemaEditorError as e:
            ErrorHandler.handle_error(e, "render schema document", ErrorType.EXPORT)
            return

        document = editor.to_document()

        st.subheader("📋 Schema Document")
        st.code(text, language=fmt)

        col1, col2 = st.columns([1, 1])
        with col1:
            if st.download_button(
                label=f"📥 Download {fmt.upper()}",
                data=text,
                file_name=f"{file_name}.{fmt}",
                mime=MIME_TYPES.get(fmt, 'text/plain'),
                key="download_schema_document",
                width='stretch'
            ):
                SessionManager.mark_exported(document)
                Notify.success(f"Schema exported as {file_name}.{fmt}")

        with col2:
            if st.button("🔄 Reset Schema", key="reset_schema_btn",
                         help="Remove all fields and clear the form", width='stretch'):
                SessionManager.reset_session()
                st.session_state[DRAFT_VERSION_KEY] = st.session_state.get(DRAFT_VERSION_KEY, 0) + 1
                SchemaEditorView._bump_layout_version()
                Notify.info("Schema reset")
                st.rerun()

        if get_config_value('ui', 'show_diff', True):
            SchemaEditorView._render_change_summary(document)

    @staticmethod
    def _render_change_summary(document: List[dict]) -> None:
        """Show what changed since the document was last downloaded."""
        last_export = SessionManager.get_last_export()
        if last_export is None:
            st.caption("Download the document to start tracking changes.")
            return

        diff = calculate_diff(last_export, document)
        exported_at = SessionManager.get_last_export_time()

        with st.expander(f"🕘 Changes since last export ({exported_at})", expanded=has_changes(diff)):
            summary = get_change_summary(diff)
            col1, col2, col3 = st.columns(3)
            with col1:
                st.metric("Modified", summary['modified'] + summary['type_changed'])
            with col2:
                st.metric("Added", summary['added'])
            with col3:
                st.metric("Removed", summary['removed'])
            for line in format_diff_for_display(diff):
                st.markdown(line)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _run_action(context: str, action: Callable[[], object], structural: bool = False) -> bool:
        """
        Apply an editor operation, reporting rejected input instead of raising.

        Returns:
            True if the operation succeeded
        """
        try:
            action()
        except SchemaEditorError as e:
            ErrorHandler.handle_error(e, context, ErrorType.USER_INPUT)
            return False

        SessionManager.mark_changed()
        if structural:
            SchemaEditorView._bump_layout_version()
        return True

    @staticmethod
    def _bump_layout_version() -> None:
        st.session_state[LAYOUT_VERSION_KEY] = st.session_state.get(LAYOUT_VERSION_KEY, 0) + 1

    @staticmethod
    def _kind_options(current_kind: Optional[str]) -> List[str]:
        """Kind choices for a row; a kind outside the standard set is kept selectable."""
        if current_kind and current_kind not in FieldKind.ALL:
            return FieldKind.ALL + [current_kind]
        return list(FieldKind.ALL)

    @staticmethod
    def _format_kind(kind: str) -> str:
        return FieldKind.LABELS.get(kind, kind)
