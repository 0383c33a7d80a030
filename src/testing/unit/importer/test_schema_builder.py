from typing import List

import pytest

from treeport.enum import FieldKind, PrimitiveKind
from treeport.errors import UnsupportedBranchShapeError
from treeport.importer import build_schema
from treeport.models import BranchDescriptor
from treeport.tree import LegacyTree


class _StaticSource:
    """Minimal source container exposing a fixed list of branches"""

    def __init__(self, branches: List[BranchDescriptor]):
        self._branches = branches

    @property
    def name(self) -> str:
        return "static"

    @property
    def branches(self) -> List[BranchDescriptor]:
        return self._branches

    @property
    def num_entries(self) -> int:
        return 0

    def load_entry(self, index: int):
        raise IndexError(index)


def test_field_order_follows_branch_order():
    tree = LegacyTree("tree")
    tree.branch("z", "z/D")
    tree.branch("a", "a/I")
    tree.branch("pos", "x/F:y/F")
    tree.branch("label", "label/C")

    schema = build_schema(tree)
    assert schema.field_names == ["z", "a", "pos", "label"]
    assert schema.get_field("pos").kind == FieldKind.Record
    assert schema.get_field("label").primitive == PrimitiveKind.String


def test_empty_source_builds_empty_schema():
    schema = build_schema(LegacyTree("tree"))
    assert schema.fields == ()


def test_first_unsupported_branch_aborts():
    tree = LegacyTree("tree")
    tree.branch("ok", "ok/I")
    tree.branch("n", "n/I")
    tree.branch("first_bad", "v[n]/D")
    tree.object_branch("second_bad", "Event")

    with pytest.raises(UnsupportedBranchShapeError) as exc_info:
        build_schema(tree)
    assert exc_info.value.branch_name == "first_bad"


def test_duplicate_branch_names_are_rejected():
    source = _StaticSource(
        [
            BranchDescriptor.from_leaflist("x", "x/I"),
            BranchDescriptor.from_leaflist("x", "x/D"),
        ]
    )
    with pytest.raises(UnsupportedBranchShapeError, match="declared twice"):
        build_schema(source)


def test_string_capacity_comes_from_the_source():
    tree = LegacyTree("tree")
    tree.branch("s", "s/C")
    tree.fill({"s": "ROOT RNTuple"})
    tree.fill({"s": "R"})

    schema = build_schema(tree)
    # 12 characters plus the terminator
    assert schema.get_field("s").capacity == 13
