"""
Type Mapper.

Maps the type descriptor of one legacy branch onto one target `FieldSpec`,
through a closed table. Anything outside the table is rejected with an
`UnsupportedBranchShapeError` naming the branch; nothing is guessed.

| Source shape                         | Target                                   |
|--------------------------------------|------------------------------------------|
| scalar leaf of type T                | primitive T (same width and signedness)  |
| `name/C`                             | primitive string, bounded by capacity    |
| `name[N]/C`                          | fixed array of N chars                   |
| `name[N]/T`, N >= 1                  | fixed array of N T                       |
| leaf-list of scalar, non-char leaves | record, one primitive sub-field per leaf |
"""

from typing import Dict

from treeport.enum import FieldKind, LeafType, PrimitiveKind
from treeport.errors import UnsupportedBranchShapeError
from treeport.models import BranchDescriptor, FieldSpec, LeafDescriptor

_LEAF_TYPE_TO_PRIMITIVE: Dict[LeafType, PrimitiveKind] = {
    LeafType.Bool: PrimitiveKind.Bool,
    LeafType.Int8: PrimitiveKind.Int8,
    LeafType.UInt8: PrimitiveKind.UInt8,
    LeafType.Int16: PrimitiveKind.Int16,
    LeafType.UInt16: PrimitiveKind.UInt16,
    LeafType.Int32: PrimitiveKind.Int32,
    LeafType.UInt32: PrimitiveKind.UInt32,
    LeafType.Int64: PrimitiveKind.Int64,
    LeafType.UInt64: PrimitiveKind.UInt64,
    LeafType.Long: PrimitiveKind.Int64,
    LeafType.ULong: PrimitiveKind.UInt64,
    LeafType.Float32: PrimitiveKind.Float32,
    LeafType.Float64: PrimitiveKind.Float64,
    LeafType.Char: PrimitiveKind.Char,
}


def _leaf_primitive(branch: BranchDescriptor, leaf: LeafDescriptor) -> PrimitiveKind:
    primitive = _LEAF_TYPE_TO_PRIMITIVE.get(leaf.type_code)
    if primitive is None:
        raise UnsupportedBranchShapeError(
            branch.name,
            f"leaf '{leaf.name}' has unsupported type code '{leaf.type_code.value}'",
        )
    return primitive


def _map_single_leaf(branch: BranchDescriptor, leaf: LeafDescriptor) -> FieldSpec:
    if leaf.count_leaf is not None:
        raise UnsupportedBranchShapeError(
            branch.name,
            f"variable-length array '{leaf.name}' is governed by counter leaf '{leaf.count_leaf}'",
        )
    primitive = _leaf_primitive(branch, leaf)

    if leaf.length is not None:
        if leaf.length < 1:
            raise UnsupportedBranchShapeError(
                branch.name, f"fixed array '{leaf.name}' has length {leaf.length}"
            )
        return FieldSpec(
            name=branch.name,
            kind=FieldKind.FixedArray,
            primitive=primitive,
            length=leaf.length,
            source_branch=branch.name,
            source_leaf=leaf.name,
        )

    if primitive == PrimitiveKind.Char:
        # NUL-terminated buffer: the text length is data-driven
        return FieldSpec(
            name=branch.name,
            kind=FieldKind.Primitive,
            primitive=PrimitiveKind.String,
            capacity=branch.capacity,
            source_branch=branch.name,
            source_leaf=leaf.name,
        )

    return FieldSpec(
        name=branch.name,
        kind=FieldKind.Primitive,
        primitive=primitive,
        source_branch=branch.name,
        source_leaf=leaf.name,
    )


def _map_leaf_list(branch: BranchDescriptor) -> FieldSpec:
    sub_fields = []
    seen = set()
    for leaf in branch.leaves:
        if leaf.name in seen:
            raise UnsupportedBranchShapeError(
                branch.name, f"leaf-list declares leaf '{leaf.name}' twice"
            )
        seen.add(leaf.name)

        if leaf.length is not None or leaf.count_leaf is not None:
            raise UnsupportedBranchShapeError(
                branch.name, f"leaf-list member '{leaf.name}' is an array"
            )
        primitive = _leaf_primitive(branch, leaf)
        if primitive == PrimitiveKind.Char:
            raise UnsupportedBranchShapeError(
                branch.name, f"leaf-list member '{leaf.name}' is a character buffer"
            )
        sub_fields.append(
            FieldSpec(
                name=leaf.name,
                kind=FieldKind.Primitive,
                primitive=primitive,
                source_branch=branch.name,
                source_leaf=leaf.name,
            )
        )

    return FieldSpec(
        name=branch.name,
        kind=FieldKind.Record,
        sub_fields=tuple(sub_fields),
        source_branch=branch.name,
    )


def map_branch(branch: BranchDescriptor) -> FieldSpec:
    """
    Maps a branch descriptor to the target field specification.

    Args:
        branch (BranchDescriptor): The source branch.

    Returns:
        FieldSpec: The target field, named after the branch.

    Raises:
        UnsupportedBranchShapeError: If the branch is not in the mapping table.
    """
    if branch.class_name is not None:
        raise UnsupportedBranchShapeError(
            branch.name, f"object branches (class '{branch.class_name}') are not supported"
        )
    if not branch.leaves:
        raise UnsupportedBranchShapeError(branch.name, "branch has no leaves")

    if branch.is_leaf_list:
        return _map_leaf_list(branch)
    return _map_single_leaf(branch, branch.leaves[0])
