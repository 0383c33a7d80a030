from enum import StrEnum


class LeafType(StrEnum):
    """
    Single-character type codes used by legacy leaf-list descriptors
    (e.g. ``"px/F"``, ``"hits[4]/I"``, ``"a/I:b/I"``).

    The codes describe the in-memory encoding of a leaf inside the entry
    buffer of its branch. Upper-case integer codes are signed, lower-case
    codes are unsigned.
    """

    Char = "C"
    """A single character, or a NUL-terminated character buffer when no length is declared."""

    Int8 = "B"
    UInt8 = "b"
    Int16 = "S"
    UInt16 = "s"
    Int32 = "I"
    UInt32 = "i"
    Int64 = "L"
    UInt64 = "l"
    Long = "G"
    """Platform ``long``, stored as 64 bits."""
    ULong = "g"
    Float32 = "F"
    Float64 = "D"
    Float16 = "f"
    """Truncated float, stored in memory as a 32-bit float."""
    Double32 = "d"
    """Truncated double, stored in memory as a 64-bit float."""
    Bool = "O"
