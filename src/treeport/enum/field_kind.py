from enum import StrEnum


class FieldKind(StrEnum):
    """
    Structural kind of a field in a target schema.
    """

    Primitive = "primitive"
    """A single value of a `PrimitiveKind` (strings included)."""

    FixedArray = "fixed_array"
    """A fixed number of elements of the same `PrimitiveKind`."""

    Record = "record"
    """An anonymous record with named primitive sub-fields (from a leaf-list)."""


class PrimitiveKind(StrEnum):
    """
    The closed set of primitive value kinds supported by the columnar store.
    """

    Bool = "bool"
    Int8 = "int8"
    Int16 = "int16"
    Int32 = "int32"
    Int64 = "int64"
    UInt8 = "uint8"
    UInt16 = "uint16"
    UInt32 = "uint32"
    UInt64 = "uint64"
    Float32 = "float32"
    Float64 = "float64"
    Char = "char"
    """A single byte, used as element kind of character arrays."""
    String = "string"
    """Variable-length text; the length is data-driven, not schema-driven."""
