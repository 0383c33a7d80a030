"""
Target Schema Module.

The `TargetSchema` is the ordered, immutable list of fields of a store. It is
built once before any row is written and travels with the data: the JSON
form of the schema is embedded into the pyarrow schema metadata, so a reader
recovers exactly the fields (kinds, lengths, capacities) the writer used.
"""

from typing import Any, List, Optional, Tuple

import pyarrow as pa
from pydantic import ConfigDict

from treeport.helpers import unpack_qualified_name
from .base_model import BaseModel
from .field import FieldSpec

SCHEMA_METADATA_KEY = b"treeport.schema"


class TargetSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    fields: Tuple[FieldSpec, ...] = ()

    def model_post_init(self, context: Any) -> None:
        """
        Raises:
            ValueError: If two fields share a name.
        """
        super().model_post_init(context)
        seen = set()
        for field in self.fields:
            if field.name in seen:
                raise ValueError(f"Duplicate field name '{field.name}' in schema")
            seen.add(field.name)

    @property
    def field_names(self) -> List[str]:
        return [field.name for field in self.fields]

    def qualified_names(self) -> List[str]:
        """All addressable names: top-level fields and 'record.sub' paths."""
        return [name for field in self.fields for name in field.qualified_names()]

    def get_field(self, name: str) -> Optional[FieldSpec]:
        return next((field for field in self.fields if field.name == name), None)

    def resolve(self, path: str) -> Optional[Tuple[FieldSpec, Optional[FieldSpec]]]:
        """
        Resolves a top-level name or a 'record.sub' path.

        Returns:
            Optional[Tuple[FieldSpec, Optional[FieldSpec]]]: (field, sub_field),
            sub_field being None for top-level matches; None if not found.
        """
        field = self.get_field(path)
        if field is not None:
            return field, None
        parts = unpack_qualified_name(path)
        if parts is None:
            return None
        field = self.get_field(parts[0])
        if field is None:
            return None
        sub_field = field.get_sub_field(parts[1])
        if sub_field is None:
            return None
        return field, sub_field

    def to_pyarrow(self) -> pa.Schema:
        return pa.schema(
            [field.to_pyarrow() for field in self.fields],
            metadata={SCHEMA_METADATA_KEY: self.model_dump_json().encode("utf-8")},
        )

    @classmethod
    def from_pyarrow(cls, schema: pa.Schema) -> "TargetSchema":
        """
        Recovers the schema embedded by `to_pyarrow`.

        Raises:
            ValueError: If the pyarrow schema carries no embedded schema.
        """
        metadata = schema.metadata or {}
        raw = metadata.get(SCHEMA_METADATA_KEY)
        if raw is None:
            raise ValueError("The pyarrow schema carries no 'treeport.schema' metadata")
        return cls.model_validate_json(raw)
