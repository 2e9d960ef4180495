"""
Unit tests for diff_utils module.
"""

import pytest

from schema_builder.diff_utils import (
    calculate_diff,
    has_changes,
    get_change_summary,
    format_diff_for_display,
    create_change_badge,
    _clean_path,
)


@pytest.fixture
def exported():
    return [
        {'name': 'id', 'type': 'number'},
        {'name': 'addr', 'type': 'nested', 'addr': [{'name': 'city', 'type': 'string'}]},
    ]


class TestDiffUtils:
    """Test class for diff utilities."""

    def test_no_changes(self, exported):
        diff = calculate_diff(exported, [dict(entry) for entry in exported])

        assert not has_changes(diff)
        assert get_change_summary(diff)['total'] == 0
        assert format_diff_for_display(diff) == ["✅ **No changes since last export**"]

    def test_renamed_field(self, exported):
        current = [{'name': 'key', 'type': 'number'}, exported[1]]

        diff = calculate_diff(exported, current)

        assert has_changes(diff)
        assert 'values_changed' in diff
        assert get_change_summary(diff)['modified'] == 1

    def test_added_field(self, exported):
        current = exported + [{'name': 'zip', 'type': 'string'}]

        diff = calculate_diff(exported, current)

        assert 'iterable_item_added' in diff
        assert get_change_summary(diff)['added'] == 1

    def test_removed_child_list(self, exported):
        current = [exported[0], {'name': 'addr', 'type': 'nested'}]

        diff = calculate_diff(exported, current)

        assert 'dictionary_item_removed' in diff
        assert get_change_summary(diff)['removed'] == 1

    def test_no_previous_export_counts_everything_as_added(self, exported):
        diff = calculate_diff(None, exported)

        assert get_change_summary(diff)['added'] == 2

    def test_order_is_significant(self, exported):
        diff = calculate_diff(exported, list(reversed(exported)))

        assert has_changes(diff)

    def test_has_changes_empty(self):
        assert has_changes({}) is False
        assert has_changes({'values_changed': {}}) is False

    def test_format_lines_mention_paths(self, exported):
        current = [{'name': 'key', 'type': 'number'}, exported[1]]

        lines = format_diff_for_display(calculate_diff(exported, current))

        assert len(lines) == 1
        assert "[0] → name" in lines[0]
        assert "'id' → 'key'" in lines[0]

    def test_clean_path(self):
        assert _clean_path("root[1]['addr'][0]['name']") == "[1] → addr[0] → name"
        assert _clean_path("root") == "root"

    def test_create_change_badge(self):
        assert "Added" in create_change_badge('added')
        assert "Custom" in create_change_badge('custom')
