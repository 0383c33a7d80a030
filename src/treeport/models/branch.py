"""
Branch Descriptor Module.

This module describes the columns of a legacy tree. A branch owns one or
more leaves; a branch with several leaves is a "leaf-list", an anonymous
record whose leaves are packed one after the other in the branch buffer.

Descriptors are written in the classic leaf-list notation:

    "px/F"            one float32 leaf
    "hits[4]/I"       a fixed array of four int32
    "label/C"         a NUL-terminated character buffer
    "code[4]/C"       four characters
    "vals[n]/D"       float64 values, counted by the leaf 'n' of another branch
    "a/I:b/I"         a leaf-list with two int32 leaves
"""

import re
from typing import Dict, Optional, Tuple

import numpy as np
from pydantic import ConfigDict

from treeport.enum import LeafType
from .base_model import BaseModel
from .internal.dtype_mapper import leaf_dtype

# A leaf without an explicit type code is a float, as in the legacy format.
_DEFAULT_TYPE_CODE = "F"

_LEAF_PATTERN = re.compile(
    r"^(?P<name>[^\[\]/:]+)(?P<dims>(?:\[[^\[\]]*\])*)(?:/(?P<code>.+))?$"
)
_DIM_PATTERN = re.compile(r"\[([^\[\]]*)\]")


class LeafDescriptor(BaseModel):
    """
    One leaf of a branch.

    Attributes:
        name (str): Leaf name, unique within its branch.
        type_code (LeafType): In-buffer encoding of one element.
        length (Optional[int]): Explicit fixed array length, if declared.
        count_leaf (Optional[str]): Name of the counter leaf of a variable-length array.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type_code: LeafType
    length: Optional[int] = None
    count_leaf: Optional[str] = None

    @property
    def dtype(self) -> np.dtype:
        return leaf_dtype(self.type_code)

    @property
    def itemsize(self) -> int:
        return self.dtype.itemsize

    @property
    def is_variable(self) -> bool:
        """True if the byte size of the leaf changes from entry to entry."""
        return self.count_leaf is not None or (
            self.type_code == LeafType.Char and self.length is None
        )

    @property
    def fixed_size(self) -> Optional[int]:
        """Byte size of the leaf inside the entry buffer, or None if variable."""
        if self.is_variable:
            return None
        return self.itemsize * (self.length if self.length is not None else 1)

    def to_descriptor(self) -> str:
        dims = ""
        if self.length is not None:
            dims = f"[{self.length}]"
        elif self.count_leaf is not None:
            dims = f"[{self.count_leaf}]"
        return f"{self.name}{dims}/{self.type_code.value}"


def parse_leaflist(leaflist: str) -> Tuple[LeafDescriptor, ...]:
    """
    Parses a leaf-list descriptor string into leaf descriptors.

    Args:
        leaflist (str): e.g. "a/I:b/I" or "hits[4]/I".

    Returns:
        Tuple[LeafDescriptor, ...]: The leaves, in declared order.

    Raises:
        ValueError: If the string is malformed, uses an unknown type code,
                    or declares a multi-dimensional leaf.
    """
    if not leaflist or not leaflist.strip():
        raise ValueError("Empty leaf-list descriptor")

    leaves = []
    for token in leaflist.split(":"):
        match = _LEAF_PATTERN.match(token.strip())
        if match is None:
            raise ValueError(f"Malformed leaf descriptor '{token}' in '{leaflist}'")

        code = match["code"] or _DEFAULT_TYPE_CODE
        try:
            type_code = LeafType(code)
        except ValueError:
            raise ValueError(
                f"Unknown leaf type code '{code}' in '{leaflist}'. "
                f"Available codes: {[t.value for t in LeafType]}"
            ) from None

        dims = _DIM_PATTERN.findall(match["dims"])
        if len(dims) > 1:
            raise ValueError(
                f"Multi-dimensional leaf '{token}' in '{leaflist}' is not supported"
            )

        length: Optional[int] = None
        count_leaf: Optional[str] = None
        if dims:
            dim = dims[0].strip()
            if not dim:
                raise ValueError(f"Empty array dimension in leaf '{token}'")
            if dim.isdigit():
                length = int(dim)
            else:
                count_leaf = dim

        leaves.append(
            LeafDescriptor(
                name=match["name"].strip(),
                type_code=type_code,
                length=length,
                count_leaf=count_leaf,
            )
        )
    return tuple(leaves)


class BranchDescriptor(BaseModel):
    """
    The type descriptor of a legacy tree branch.

    A descriptor never changes during the lifetime of the tree, with the
    exception of `capacity`, which reports the largest entry (in bytes) the
    branch buffer has held so far.

    Attributes:
        name (str): Branch name, unique within the tree.
        leaves (Tuple[LeafDescriptor, ...]): The leaves, in declared order.
        class_name (Optional[str]): Set for object branches (nested containers).
        capacity (int): Byte capacity of the branch buffer.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    leaves: Tuple[LeafDescriptor, ...] = ()
    class_name: Optional[str] = None
    capacity: int = 0

    @classmethod
    def from_leaflist(
        cls, name: str, leaflist: str, capacity: int = 0
    ) -> "BranchDescriptor":
        return cls(name=name, leaves=parse_leaflist(leaflist), capacity=capacity)

    @property
    def leaflist(self) -> str:
        """The leaf-list descriptor string ('' for object branches)."""
        return ":".join(leaf.to_descriptor() for leaf in self.leaves)

    @property
    def is_leaf_list(self) -> bool:
        return len(self.leaves) > 1

    def get_leaf(self, leaf_name: str) -> Optional[LeafDescriptor]:
        return next((leaf for leaf in self.leaves if leaf.name == leaf_name), None)

    def leaf_offsets(self) -> Dict[str, int]:
        """
        Byte offset of every leaf inside the branch buffer.

        Leaves are packed without padding. Only the last leaf may be variable
        in size, otherwise the offsets of the following leaves are undefined.

        Raises:
            ValueError: If a variable-size leaf is followed by other leaves.
        """
        offsets: Dict[str, int] = {}
        offset = 0
        for index, leaf in enumerate(self.leaves):
            offsets[leaf.name] = offset
            size = leaf.fixed_size
            if size is None:
                if index != len(self.leaves) - 1:
                    raise ValueError(
                        f"Variable-size leaf '{leaf.name}' must be the last leaf of branch '{self.name}'"
                    )
                break
            offset += size
        return offsets
