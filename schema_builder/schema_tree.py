"""
Schema tree state model for the schema editor.

Holds the ordered list of schema fields and the draft buffer used to stage
the next field or child, and renders the schema as a structured document.
This module has no Streamlit dependency; the view layer calls into
SchemaTreeEditor and renders its current state.
"""

from typing import Dict, Any, List, Optional, Tuple
import json
import logging

import yaml
from pydantic import BaseModel

from schema_builder.schema_exceptions import InvalidIndexError, UnsupportedFormatError

logger = logging.getLogger(__name__)

# Fallbacks used when a child is added or serialized with an empty name/kind
DEFAULT_CHILD_NAME = "DefaultName"
DEFAULT_CHILD_TYPE = "DefaultType"

SUPPORTED_FORMATS = ['json', 'yaml']


class FieldKind:
    """Field kind constants."""
    STRING = "string"
    NUMBER = "number"
    NESTED = "nested"

    ALL = [STRING, NUMBER, NESTED]
    LABELS = {
        STRING: "String",
        NUMBER: "Number",
        NESTED: "Nested"
    }


class SchemaField(BaseModel):
    """One entry in the schema tree."""

    name: str = ''
    kind: str = ''
    # None until the first child is added, a list from then on
    children: Optional[List["SchemaField"]] = None

    def is_nested(self) -> bool:
        return self.kind == FieldKind.NESTED


SchemaField.model_rebuild()


class Draft(BaseModel):
    """Name/kind pair staged for the next add."""

    name: str = ''
    kind: str = ''

    def is_complete(self) -> bool:
        return bool(self.name) and bool(self.kind)


class SchemaTreeEditor:
    """
    Owner of one editing session's schema tree.

    All structural edits replace the affected list instead of mutating it,
    so a ``fields`` tuple or ``children`` list obtained earlier keeps
    describing the state it was read from.
    """

    def __init__(self):
        self._fields: List[SchemaField] = []
        self.draft = Draft()

    def reset(self) -> None:
        """Drop all fields and clear the draft."""
        self._fields = []
        self.draft = Draft()
        logger.debug("Schema tree reset")

    @property
    def fields(self) -> Tuple[SchemaField, ...]:
        return tuple(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    # ------------------------------------------------------------------
    # Draft
    # ------------------------------------------------------------------

    def set_draft(self, name: Optional[str] = None, kind: Optional[str] = None) -> None:
        """Update the draft name, kind, or both. Parts passed as None are kept."""
        if name is not None:
            self.draft.name = name
        if kind is not None:
            self.draft.kind = kind

    # ------------------------------------------------------------------
    # Top-level fields
    # ------------------------------------------------------------------

    def add_field(self) -> bool:
        """
        Append a field built from the draft and clear the draft.

        Does nothing when the draft name or kind is empty.

        Returns:
            True if a field was added, False if the draft was incomplete
        """
        if not self.draft.is_complete():
            logger.debug(f"add_field ignored, incomplete draft: name={self.draft.name!r} kind={self.draft.kind!r}")
            return False

        new_field = SchemaField(name=self.draft.name, kind=self.draft.kind)
        self._fields = self._fields + [new_field]
        self.draft = Draft()
        logger.debug(f"Added field '{new_field.name}' ({new_field.kind}) at position {len(self._fields) - 1}")
        return True

    def remove_field(self, index: int) -> SchemaField:
        """
        Remove the field at ``index``; later fields shift left by one.

        Returns:
            The removed field

        Raises:
            InvalidIndexError: If index is outside the schema
        """
        self._check_index("fields", index, len(self._fields))
        removed = self._fields[index]
        self._fields = self._fields[:index] + self._fields[index + 1:]
        logger.debug(f"Removed field '{removed.name}' from position {index}")
        return removed

    # ------------------------------------------------------------------
    # Child fields
    # ------------------------------------------------------------------

    def add_child(self, parent_index: int) -> SchemaField:
        """
        Append a child to the field at ``parent_index``.

        The child takes the draft name and kind, falling back to
        DEFAULT_CHILD_NAME / DEFAULT_CHILD_TYPE for empty parts. The draft
        is left as it is so several similar children can be added in a row.
        The parent's kind is not checked.

        Raises:
            InvalidIndexError: If parent_index is outside the schema
        """
        parent = self._get_field(parent_index)
        child = SchemaField(
            name=self.draft.name or DEFAULT_CHILD_NAME,
            kind=self.draft.kind or DEFAULT_CHILD_TYPE
        )
        parent.children = (parent.children or []) + [child]
        logger.debug(f"Added child '{child.name}' ({child.kind}) to field '{parent.name}', {len(parent.children)} children")
        return child

    def remove_child(self, parent_index: int, child_index: int) -> SchemaField:
        """
        Remove a child of the field at ``parent_index``; later children shift left.

        Removing the last child leaves an empty children list.

        Raises:
            InvalidIndexError: If either index is out of range
        """
        parent = self._get_field(parent_index)
        children = parent.children or []
        self._check_index(f"children of field {parent_index}", child_index, len(children))
        removed = children[child_index]
        parent.children = children[:child_index] + children[child_index + 1:]
        logger.debug(f"Removed child '{removed.name}' from field '{parent.name}' at position {child_index}")
        return removed

    # ------------------------------------------------------------------
    # In-place edits
    # ------------------------------------------------------------------

    def rename_field(self, parent_index: int, child_index: Optional[int] = None, *, new_name: str) -> None:
        """Rename a top-level field, or one of its children when child_index is given."""
        target = self._resolve(parent_index, child_index)
        target.name = new_name

    def retype_field(self, parent_index: int, child_index: Optional[int] = None, *, new_kind: str) -> None:
        """
        Set the kind of a top-level field, or of one of its children.

        Children are neither cleared nor created here; they are only
        initialised by the first add_child.
        """
        target = self._resolve(parent_index, child_index)
        target.kind = new_kind

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_document(self) -> List[Dict[str, Any]]:
        """
        Build the document for the current schema.

        Each field becomes ``{"name", "type"}``. A nested field with at
        least one child gets an extra key named after the field itself,
        holding its children as ``{"name", "type"}`` pairs.
        """
        document = []
        for field in self._fields:
            entry: Dict[str, Any] = {'name': field.name, 'type': field.kind}
            if field.is_nested() and field.children:
                entry[field.name] = [
                    {
                        'name': child.name or DEFAULT_CHILD_NAME,
                        'type': child.kind or DEFAULT_CHILD_TYPE
                    }
                    for child in field.children
                ]
            document.append(entry)
        return document

    def serialize(self, fmt: str = 'json', indent: int = 2) -> str:
        """
        Render the current schema as indented text.

        Args:
            fmt: 'json' or 'yaml'
            indent: Indentation width

        Raises:
            UnsupportedFormatError: If fmt is not a supported format
        """
        document = self.to_document()

        if fmt == 'json':
            return json.dumps(document, indent=indent, ensure_ascii=False)
        if fmt == 'yaml':
            return yaml.safe_dump(
                document,
                default_flow_style=False,
                indent=indent,
                sort_keys=False,
                allow_unicode=True
            )
        raise UnsupportedFormatError(fmt, SUPPORTED_FORMATS)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_index(sequence: str, index: int, length: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < length:
            logger.warning(f"Rejected index {index!r} for {sequence} (length {length})")
            raise InvalidIndexError(sequence, index, length)

    def _get_field(self, index: int) -> SchemaField:
        self._check_index("fields", index, len(self._fields))
        return self._fields[index]

    def _resolve(self, parent_index: int, child_index: Optional[int]) -> SchemaField:
        parent = self._get_field(parent_index)
        if child_index is None:
            return parent
        children = parent.children or []
        self._check_index(f"children of field {parent_index}", child_index, len(children))
        return children[child_index]
