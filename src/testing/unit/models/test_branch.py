import pytest

from treeport.enum import LeafType
from treeport.models import BranchDescriptor, parse_leaflist


def test_parse_leaflist_scalars():
    leaves = parse_leaflist("a/I:b/I")
    assert [leaf.name for leaf in leaves] == ["a", "b"]
    assert all(leaf.type_code == LeafType.Int32 for leaf in leaves)
    assert all(leaf.length is None and leaf.count_leaf is None for leaf in leaves)


def test_parse_leaflist_default_type_is_float():
    (leaf,) = parse_leaflist("x")
    assert leaf.type_code == LeafType.Float32


def test_parse_leaflist_arrays():
    (fixed,) = parse_leaflist("hits[4]/I")
    assert fixed.length == 4 and fixed.count_leaf is None

    (counted,) = parse_leaflist("vals[n]/D")
    assert counted.length is None and counted.count_leaf == "n"
    assert counted.is_variable
    assert counted.fixed_size is None


def test_parse_leaflist_char_buffers():
    (cstring,) = parse_leaflist("label/C")
    assert cstring.is_variable

    (chars,) = parse_leaflist("code[4]/C")
    assert not chars.is_variable
    assert chars.fixed_size == 4


def test_parse_leaflist_rejects_malformed():
    with pytest.raises(ValueError):
        parse_leaflist("")
    with pytest.raises(ValueError, match="Unknown leaf type code"):
        parse_leaflist("x/Q")
    with pytest.raises(ValueError, match="Multi-dimensional"):
        parse_leaflist("m[2][3]/I")
    with pytest.raises(ValueError, match="Empty array dimension"):
        parse_leaflist("m[]/I")


def test_branch_descriptor_leaflist_is_preserved():
    branch = BranchDescriptor.from_leaflist("branch", "a/I:v[3]/F:n/l")
    assert branch.is_leaf_list
    assert branch.leaflist == "a/I:v[3]/F:n/l"
    assert branch.get_leaf("v") is not None
    assert branch.get_leaf("missing") is None


def test_branch_leaf_offsets_are_packed():
    branch = BranchDescriptor.from_leaflist("branch", "a/I:b/D:c/B:d[2]/S")
    assert branch.leaf_offsets() == {"a": 0, "b": 4, "c": 12, "d": 13}


def test_branch_leaf_offsets_variable_leaf_must_be_last():
    assert BranchDescriptor.from_leaflist("ok", "a/I:s/C").leaf_offsets() == {"a": 0, "s": 4}

    with pytest.raises(ValueError, match="must be the last leaf"):
        BranchDescriptor.from_leaflist("bad", "s/C:a/I").leaf_offsets()
