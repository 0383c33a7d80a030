"""
Store Reading Module.

Reads a committed store back from an artifact, by row (`entry`) or by column
(`view`). Record sub-fields are addressable as "<record>.<sub_field>".
"""

from typing import Any, Dict, List

import pyarrow as pa

from treeport.enum import ObjectKind
from treeport.models import TargetSchema
from .artifact import Artifact


class StoreReader:
    def __init__(self, name: str, schema: TargetSchema, table: pa.Table, num_entries: int):
        """
        Internal constructor. Use `StoreReader.open()` instead.
        """
        self._name = name
        self._schema = schema
        self._table = table
        self._num_entries = num_entries

    @classmethod
    def open(cls, artifact: Artifact, name: str) -> "StoreReader":
        """
        Loads the committed store `name`.

        Raises:
            KeyError: If the artifact holds no store with this name.
        """
        entry = artifact.get(name)
        if entry is None or entry.kind != ObjectKind.NTuple:
            raise KeyError(f"No store named '{name}' in artifact '{artifact.path}'")

        with pa.OSFile(str(artifact.path / entry.path), "rb") as source:
            table = pa.ipc.open_file(source).read_all()

        return cls(
            name=name,
            schema=TargetSchema.from_pyarrow(table.schema),
            table=table,
            num_entries=entry.num_entries,
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def schema(self) -> TargetSchema:
        return self._schema

    @property
    def num_entries(self) -> int:
        return self._num_entries

    def entry(self, index: int) -> Dict[str, Any]:
        """
        Returns row `index` as {field_name: value}.

        Raises:
            IndexError: If `index` is out of range.
        """
        if not 0 <= index < self._num_entries:
            raise IndexError(
                f"Entry {index} out of range for store '{self._name}' with {self._num_entries} entries"
            )
        return {
            name: self._table.column(name)[index].as_py()
            for name in self._schema.field_names
        }

    def view(self, path: str) -> List[Any]:
        """
        Returns all values of a field or of a record sub-field.

        Args:
            path (str): A top-level field name, or "<record>.<sub_field>".

        Raises:
            KeyError: If the path does not address a field.
        """
        resolved = self._schema.resolve(path)
        if resolved is None:
            raise KeyError(
                f"No field '{path}' in store '{self._name}'. "
                f"Available: {self._schema.qualified_names()}"
            )
        field, sub_field = resolved
        values = self._table.column(field.name).to_pylist()
        if sub_field is None:
            return values
        return [value[sub_field.name] for value in values]
