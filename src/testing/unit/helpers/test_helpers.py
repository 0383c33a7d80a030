import pytest

from treeport.helpers import (
    pack_qualified_name,
    unpack_qualified_name,
    validate_object_name,
)


def test_pack_qualified_name():
    assert pack_qualified_name("branch", "a") == "branch.a"


def test_unpack_qualified_name():
    parts = unpack_qualified_name("branch.a")
    assert parts is not None
    record, sub = parts
    assert record == "branch" and sub == "a"

    assert unpack_qualified_name("not-unpacked-str") is None


def test_validate_object_name():
    # valid names do not raise
    validate_object_name("ntuple")
    validate_object_name("my-tree_2")

    with pytest.raises(ValueError):
        validate_object_name("")
    with pytest.raises(ValueError, match="Invalid characters"):
        validate_object_name("a/b", "ntuple")
    with pytest.raises(ValueError, match="Invalid characters"):
        validate_object_name("a\\b")
    with pytest.raises(ValueError):
        validate_object_name(".hidden")
