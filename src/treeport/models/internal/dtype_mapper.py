from typing import Dict

import numpy as np

from treeport.enum import LeafType


# -------------------------------------------------------------------------
# Leaf Type to NumPy dtype Mapping
# Describes how one element of a leaf is laid out inside an entry buffer.
# All multi-byte values are little-endian; truncated floats are held at
# their in-memory width.
# -------------------------------------------------------------------------
_LEAF_TYPE_TO_DTYPE: Dict[LeafType, np.dtype] = {
    LeafType.Char: np.dtype("S1"),
    LeafType.Bool: np.dtype("?"),
    LeafType.Int8: np.dtype("i1"),
    LeafType.UInt8: np.dtype("u1"),
    LeafType.Int16: np.dtype("<i2"),
    LeafType.UInt16: np.dtype("<u2"),
    LeafType.Int32: np.dtype("<i4"),
    LeafType.UInt32: np.dtype("<u4"),
    LeafType.Int64: np.dtype("<i8"),
    LeafType.UInt64: np.dtype("<u8"),
    LeafType.Long: np.dtype("<i8"),
    LeafType.ULong: np.dtype("<u8"),
    LeafType.Float32: np.dtype("<f4"),
    LeafType.Float64: np.dtype("<f8"),
    LeafType.Float16: np.dtype("<f4"),
    LeafType.Double32: np.dtype("<f8"),
}


def leaf_dtype(type_code: LeafType) -> np.dtype:
    """Returns the in-buffer numpy dtype of one element of a leaf."""
    return _LEAF_TYPE_TO_DTYPE[type_code]
