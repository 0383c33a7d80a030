"""
Field Specification Module.

A `FieldSpec` is one column of the target store: a primitive, a fixed-size
array of primitives or a record of named primitive sub-fields. Besides the
target type, each spec remembers where its value comes from in the source
(`source_branch`, `source_leaf`) and, for strings, how many bytes may be
scanned for the terminator (`capacity`).
"""

from typing import Any, List, Optional, Tuple

import pyarrow as pa
from pydantic import ConfigDict

from treeport.enum import FieldKind, PrimitiveKind
from treeport.helpers import pack_qualified_name
from .base_model import BaseModel
from .internal.pyarrow_mapper import (
    fixed_array_to_pyarrow,
    primitive_to_pyarrow,
    record_to_pyarrow,
)


class FieldSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    kind: FieldKind
    primitive: Optional[PrimitiveKind] = None
    """Value kind of a primitive field, element kind of a fixed array, None for records."""
    length: Optional[int] = None
    capacity: Optional[int] = None
    sub_fields: Tuple["FieldSpec", ...] = ()
    source_branch: str
    source_leaf: Optional[str] = None

    def model_post_init(self, context: Any) -> None:
        """
        Checks the consistency of the kind-specific attributes.

        Raises:
            ValueError: On a spec that no store could hold.
        """
        super().model_post_init(context)
        if self.kind == FieldKind.Record:
            if not self.sub_fields:
                raise ValueError(f"Record field '{self.name}' has no sub-fields")
            names = [sub.name for sub in self.sub_fields]
            if len(set(names)) != len(names):
                raise ValueError(f"Record field '{self.name}' has duplicate sub-fields")
            if any(sub.kind != FieldKind.Primitive for sub in self.sub_fields):
                raise ValueError(
                    f"Record field '{self.name}' may only hold primitive sub-fields"
                )
            return

        if self.primitive is None:
            raise ValueError(f"Field '{self.name}' of kind '{self.kind}' needs a primitive kind")
        if self.kind == FieldKind.FixedArray and (self.length is None or self.length < 1):
            raise ValueError(f"Fixed array field '{self.name}' needs a length >= 1")
        if self.primitive == PrimitiveKind.String and self.capacity is None:
            raise ValueError(f"String field '{self.name}' needs a capacity")

    def qualified_names(self) -> List[str]:
        """The field name followed by the addressable names of its sub-fields."""
        return [self.name] + [
            pack_qualified_name(self.name, sub.name) for sub in self.sub_fields
        ]

    def get_sub_field(self, name: str) -> Optional["FieldSpec"]:
        return next((sub for sub in self.sub_fields if sub.name == name), None)

    def pyarrow_type(self) -> pa.DataType:
        if self.kind == FieldKind.Record:
            return record_to_pyarrow([sub.to_pyarrow() for sub in self.sub_fields])
        assert self.primitive is not None
        if self.kind == FieldKind.FixedArray:
            assert self.length is not None
            return fixed_array_to_pyarrow(self.primitive, self.length)
        return primitive_to_pyarrow(self.primitive)

    def to_pyarrow(self) -> pa.Field:
        """Builds the pyarrow field, annotated with its source branch."""
        return pa.field(
            self.name,
            self.pyarrow_type(),
            nullable=False,
            metadata={"source_branch": self.source_branch, "kind": self.kind.value},
        )
