"""
Entry Transcoder.

Turns the current row of a source container into one target row, following a
validated `TargetSchema`. A reader function is compiled once per field; each
call to `transcode()` then copies every value out of the entry cursor, in
field order, before the caller advances the source.
"""

from typing import Any, Callable, Dict, List, Tuple

from treeport.enum import FieldKind, PrimitiveKind
from treeport.errors import TranscodeError
from treeport.models import FieldSpec, TargetSchema
from treeport.tree import EntryView

_FieldReader = Callable[[EntryView], Any]

_STRING_TERMINATOR = b"\0"


def decode_c_string(raw: bytes) -> str:
    """
    Extracts the text of a NUL-terminated buffer.

    The value is the bytes strictly before the first terminator. Without a
    terminator the whole buffer is the value. Invalid UTF-8 is replaced, not
    rejected.
    """
    end = raw.find(_STRING_TERMINATOR)
    if end >= 0:
        raw = raw[:end]
    return raw.decode("utf-8", errors="replace")


def _scalar_reader(branch: str, leaf: str) -> _FieldReader:
    def read(entry: EntryView) -> Any:
        return entry.read_scalar(branch, leaf)

    return read


def _string_reader(branch: str, leaf: str, capacity: int) -> _FieldReader:
    def read(entry: EntryView) -> str:
        # bounded scan: never look past the branch capacity
        return decode_c_string(entry.read_bytes_up_to(branch, leaf, capacity))

    return read


def _array_reader(branch: str, leaf: str, length: int) -> _FieldReader:
    def read(entry: EntryView) -> List[Any]:
        return [entry.read_array_element(branch, leaf, i) for i in range(length)]

    return read


def _record_reader(sub_readers: List[Tuple[str, _FieldReader]]) -> _FieldReader:
    def read(entry: EntryView) -> Dict[str, Any]:
        return {name: reader(entry) for name, reader in sub_readers}

    return read


def _make_reader(field: FieldSpec) -> _FieldReader:
    if field.kind == FieldKind.Record:
        return _record_reader([(sub.name, _make_reader(sub)) for sub in field.sub_fields])

    assert field.source_leaf is not None
    if field.kind == FieldKind.FixedArray:
        assert field.length is not None
        return _array_reader(field.source_branch, field.source_leaf, field.length)
    if field.primitive == PrimitiveKind.String:
        assert field.capacity is not None
        return _string_reader(field.source_branch, field.source_leaf, field.capacity)
    return _scalar_reader(field.source_branch, field.source_leaf)


class EntryTranscoder:
    """
    Produces target rows from positioned source entries.

    Args:
        schema (TargetSchema): The schema built for the source.
    """

    def __init__(self, schema: TargetSchema):
        self._schema = schema
        self._readers: List[Tuple[FieldSpec, _FieldReader]] = [
            (field, _make_reader(field)) for field in schema.fields
        ]

    @property
    def schema(self) -> TargetSchema:
        return self._schema

    def transcode(self, entry: EntryView, entry_index: int | None = None) -> Dict[str, Any]:
        """
        Copies the current entry into a new row.

        Args:
            entry: The source cursor, positioned at the row to copy.
            entry_index: The row number, for error reporting only.

        Returns:
            Dict[str, Any]: {field_name: value}, in schema order.

        Raises:
            TranscodeError: If a value cannot be read as the schema promises.
        """
        row: Dict[str, Any] = {}
        for field, reader in self._readers:
            try:
                row[field.name] = reader(entry)
            except (KeyError, IndexError, ValueError, TypeError) as e:
                raise TranscodeError(field.source_branch, entry_index, e) from e
        return row
