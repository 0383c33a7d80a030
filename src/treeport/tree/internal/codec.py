"""
Leaf Value Codec.

Converts Python values into the raw bytes a legacy branch buffer holds for
one entry: leaves are packed back to back, little-endian, and character
buffers without a declared length are terminated by a NUL byte.
"""

from typing import Any, Mapping, Sequence

import numpy as np

from treeport.enum import LeafType
from treeport.models import BranchDescriptor, LeafDescriptor


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, Sequence):
        # e.g. ['R', 'O', 'O', 'T'] or [b'R', b'O']
        return b"".join(_to_bytes(v) for v in value)
    raise TypeError(f"Cannot interpret {type(value).__name__} as characters")


def _encode_chars(leaf: LeafDescriptor, value: Any) -> bytes:
    raw = _to_bytes(value if value is not None else b"")
    if leaf.length is None:
        # C-string: everything up to the first NUL, plus the terminator
        end = raw.find(b"\0")
        if end >= 0:
            raw = raw[:end]
        return raw + b"\0"

    if len(raw) > leaf.length:
        raise ValueError(
            f"Leaf '{leaf.name}' holds {leaf.length} characters, got {len(raw)}"
        )
    return raw.ljust(leaf.length, b"\0")


def encode_leaf(leaf: LeafDescriptor, value: Any) -> bytes:
    """
    Encodes the value of one leaf.

    A None value encodes the zero value of the leaf (empty string, zeros).

    Raises:
        ValueError: If an array value does not have the declared length.
        TypeError: If the value cannot be converted to the leaf type.
    """
    if leaf.type_code == LeafType.Char:
        return _encode_chars(leaf, value)

    dtype = leaf.dtype
    if leaf.length is None and leaf.count_leaf is None:
        return np.asarray(value if value is not None else 0, dtype=dtype).tobytes()

    arr = np.asarray(value if value is not None else [], dtype=dtype).reshape(-1)
    if leaf.length is not None:
        if value is None:
            arr = np.zeros(leaf.length, dtype=dtype)
        elif arr.size != leaf.length:
            raise ValueError(
                f"Leaf '{leaf.name}' is an array of {leaf.length} elements, got {arr.size}"
            )
    return arr.tobytes()


def encode_branch(branch: BranchDescriptor, value: Any) -> bytes:
    """
    Encodes the entry value of a whole branch.

    Object branches take the already serialized payload (bytes). Leaf-lists
    take a mapping {leaf_name: value} or a sequence in declared leaf order;
    single-leaf branches take the leaf value directly.
    """
    if branch.class_name is not None:
        return bytes(value) if value is not None else b""

    if not branch.is_leaf_list:
        return encode_leaf(branch.leaves[0], value)

    if value is None:
        values = [None] * len(branch.leaves)
    elif isinstance(value, Mapping):
        unknown = set(value.keys()) - {leaf.name for leaf in branch.leaves}
        if unknown:
            raise KeyError(f"Unknown leaves {sorted(unknown)} for branch '{branch.name}'")
        values = [value.get(leaf.name) for leaf in branch.leaves]
    else:
        values = list(value)
        if len(values) != len(branch.leaves):
            raise ValueError(
                f"Branch '{branch.name}' has {len(branch.leaves)} leaves, got {len(values)} values"
            )
    return b"".join(encode_leaf(leaf, v) for leaf, v in zip(branch.leaves, values))
