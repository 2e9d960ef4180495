"""
Diff utilities for the schema tree editor.
Compares two serialized schema documents using the DeepDiff library and
summarizes the changes for display next to the document preview.
"""

from typing import Dict, Any, List, Optional
from deepdiff import DeepDiff
import json
import re
import logging

logger = logging.getLogger(__name__)

CHANGE_TYPES = [
    'values_changed',
    'dictionary_item_added',
    'dictionary_item_removed',
    'iterable_item_added',
    'iterable_item_removed',
    'type_changes'
]

_PATH_TOKEN_PATTERN = re.compile(r"\['([^']+)'\]|\[(\d+)\]")


def calculate_diff(previous: Optional[List[Dict[str, Any]]], current: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Calculate differences between two schema documents.

    Field order is significant in a schema document, so lists are
    compared positionally.

    Args:
        previous: Previously exported document, or None if nothing was exported yet
        current: Current document

    Returns:
        Dict keyed by DeepDiff change type; empty when the documents match
    """
    diff = DeepDiff(
        previous if previous is not None else [],
        current,
        ignore_order=False,
        verbose_level=2
    )
    result = {change_type: dict(diff[change_type]) for change_type in CHANGE_TYPES if change_type in diff}
    logger.debug(f"calculate_diff: change types {list(result.keys())}")
    return result


def has_changes(diff: Dict[str, Any]) -> bool:
    """
    Check if there are any changes in the diff.

    Args:
        diff: Diff dictionary from calculate_diff

    Returns:
        True if there are changes, False otherwise
    """
    if not diff:
        return False

    return any(change_type in diff and diff[change_type] for change_type in CHANGE_TYPES)


def get_change_summary(diff: Dict[str, Any]) -> Dict[str, int]:
    """
    Get a summary of changes by type.

    Args:
        diff: Diff dictionary from calculate_diff

    Returns:
        Dictionary with change counts by type
    """
    summary = {
        'modified': len(diff.get('values_changed', {})),
        'added': len(diff.get('dictionary_item_added', {})) + len(diff.get('iterable_item_added', {})),
        'removed': len(diff.get('dictionary_item_removed', {})) + len(diff.get('iterable_item_removed', {})),
        'type_changed': len(diff.get('type_changes', {})),
    }
    summary['total'] = sum(summary.values())
    return summary


def format_diff_for_display(diff: Dict[str, Any]) -> List[str]:
    """
    Format diff output as markdown lines for display in Streamlit.

    Args:
        diff: Diff dictionary from calculate_diff

    Returns:
        One markdown line per change
    """
    if not has_changes(diff):
        return ["✅ **No changes since last export**"]

    lines: List[str] = []

    for path, change in diff.get('values_changed', {}).items():
        lines.append(
            f"{create_change_badge('modified')} `{_clean_path(path)}`: "
            f"{_format_value(change.get('old_value'))} → {_format_value(change.get('new_value'))}"
        )

    for path, change in diff.get('type_changes', {}).items():
        lines.append(
            f"{create_change_badge('type_changed')} `{_clean_path(path)}`: "
            f"{_format_value(change.get('old_value'))} → {_format_value(change.get('new_value'))}"
        )

    for section in ('dictionary_item_added', 'iterable_item_added'):
        for path, value in diff.get(section, {}).items():
            lines.append(f"{create_change_badge('added')} `{_clean_path(path)}`: {_format_value(value)}")

    for section in ('dictionary_item_removed', 'iterable_item_removed'):
        for path, value in diff.get(section, {}).items():
            lines.append(f"{create_change_badge('removed')} `{_clean_path(path)}`: {_format_value(value)}")

    return lines


def create_change_badge(change_type: str) -> str:
    """
    Create a badge for change type.

    Args:
        change_type: Type of change (modified, added, removed, etc.)

    Returns:
        Markdown badge string
    """
    badges = {
        'modified': '🔄 **Modified**',
        'added': '➕ **Added**',
        'removed': '➖ **Removed**',
        'type_changed': '🔀 **Type Changed**'
    }

    return badges.get(change_type, f'📝 **{change_type.title()}**')


def _clean_path(path: Any) -> str:
    """
    Clean up DeepDiff path for display.

    ``root[1]['addr'][0]['name']`` becomes ``[1] → addr[0] → name``.
    """
    display_parts: List[str] = []
    for key, index in _PATH_TOKEN_PATTERN.findall(str(path)):
        if index:
            if display_parts:
                display_parts[-1] += f"[{index}]"
            else:
                display_parts.append(f"[{index}]")
        else:
            display_parts.append(key)
    return " → ".join(display_parts) if display_parts else "root"


def _format_value(value: Any, max_length: int = 100) -> str:
    """
    Format a value for display, truncating if necessary.

    Args:
        value: Value to format
        max_length: Maximum length for display

    Returns:
        Formatted string
    """
    if value is None:
        return "None"

    if isinstance(value, str):
        if len(value) > max_length:
            return f"{value[:max_length-3]}..."
        return repr(value)

    if isinstance(value, (dict, list)):
        json_str = json.dumps(value, ensure_ascii=False)
        if len(json_str) > max_length:
            return f"{json_str[:max_length-3]}..."
        return json_str

    return str(value)
