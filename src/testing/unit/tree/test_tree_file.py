import pytest

from treeport.enum import ObjectKind
from treeport.errors import SourceNotFoundError, TargetAlreadyExistsError
from treeport.store import Artifact
from treeport.tree import LegacyTree, open_tree, write_tree


def test_tree_round_trip(artifact: Artifact):
    tree = LegacyTree("events", title="test events")
    tree.branch("n", "n/I")
    tree.branch("pos", "x/F:y/F")
    tree.branch("label", "label/C")
    tree.object_branch("payload", "Event")
    tree.fill({"n": 1, "pos": (1.0, 2.0), "label": "first", "payload": b"\x01\x02"})
    tree.fill({"n": 2, "label": "x"})

    write_tree(artifact, tree)
    entry = artifact.get("events")
    assert entry is not None
    assert entry.kind == ObjectKind.Tree
    assert entry.num_entries == 2

    with open_tree(artifact, "events") as loaded:
        assert loaded.title == "test events"
        assert loaded.num_entries == 2
        assert loaded.branches == tree.branches
        assert loaded.get_branch("payload").class_name == "Event"
        assert loaded.get_branch("label").capacity == 6
        assert loaded.branch_entries("label") == tree.branch_entries("label")

        cursor = loaded.load_entry(1)
        assert cursor.read_scalar("n", "n") == 2
        assert cursor.read_scalar("pos", "y") == 2.0


def test_empty_tree_round_trip(artifact: Artifact):
    write_tree(artifact, LegacyTree("tree"))

    with open_tree(artifact, "tree") as loaded:
        assert loaded.num_entries == 0
        assert loaded.branches == []


def test_write_tree_never_overwrites(artifact: Artifact):
    write_tree(artifact, LegacyTree("tree"))
    with pytest.raises(TargetAlreadyExistsError):
        write_tree(artifact, LegacyTree("tree"))
    assert artifact.keys() == ["tree"]


def test_open_missing_tree(artifact: Artifact):
    with pytest.raises(SourceNotFoundError) as exc_info:
        open_tree(artifact, "missing")
    assert exc_info.value.tree_name == "missing"
