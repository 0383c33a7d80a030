from typing import Dict, List

import pyarrow as pa

from treeport.enum import PrimitiveKind


# -------------------------------------------------------------------------
# Primitive Kind to Pyarrow Type Mapping
# This dictionary maps the closed set of target primitive kinds to the
# PyArrow types used for columnar storage. Width and signedness are kept
# exactly; characters are single bytes so that NUL stays representable.
# -------------------------------------------------------------------------
_PRIMITIVE_TO_PYARROW: Dict[PrimitiveKind, pa.DataType] = {
    # Boolean types
    PrimitiveKind.Bool: pa.bool_(),
    # Numeric types
    PrimitiveKind.Int8: pa.int8(),
    PrimitiveKind.Int16: pa.int16(),
    PrimitiveKind.Int32: pa.int32(),
    PrimitiveKind.Int64: pa.int64(),
    PrimitiveKind.UInt8: pa.uint8(),
    PrimitiveKind.UInt16: pa.uint16(),
    PrimitiveKind.UInt32: pa.uint32(),
    PrimitiveKind.UInt64: pa.uint64(),
    PrimitiveKind.Float32: pa.float32(),
    PrimitiveKind.Float64: pa.float64(),
    # Text types
    PrimitiveKind.Char: pa.binary(1),
    PrimitiveKind.String: pa.string(),
}


def primitive_to_pyarrow(kind: PrimitiveKind) -> pa.DataType:
    """
    Returns the pyarrow type instance of a primitive kind.
    e.g. PrimitiveKind.Int32 -> pa.int32()
    """
    return _PRIMITIVE_TO_PYARROW[kind]


def fixed_array_to_pyarrow(kind: PrimitiveKind, length: int) -> pa.DataType:
    """Returns a fixed-size list type of `length` elements of `kind`."""
    return pa.list_(primitive_to_pyarrow(kind), length)


def record_to_pyarrow(sub_fields: List[pa.Field]) -> pa.DataType:
    """Returns the struct type holding the sub-fields of a record."""
    return pa.struct(sub_fields)
