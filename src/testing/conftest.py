from typing import Any, Dict

import pytest

from treeport.store import Artifact
from treeport.tree import LegacyTree, write_tree

# Branch name -> (leaf-list descriptor, value filled in the single entry)
SIMPLE_BRANCHES: Dict[str, tuple[str, Any]] = {
    "myBool": ("myBool/O", True),
    "myInt8": ("myInt8/B", -8),
    "myUInt8": ("myUInt8/b", 8),
    "myInt16": ("myInt16/S", -16),
    "myUInt16": ("myUInt16/s", 16),
    "myInt32": ("myInt32/I", -32),
    "myUInt32": ("myUInt32/i", 32),
    "myInt64": ("myInt64/L", -64),
    "myUInt64": ("myUInt64/l", 64),
    "myFloat": ("myFloat/F", 32.0),
    "myDouble": ("myDouble/D", 64.0),
}


@pytest.fixture(scope="function")
def artifact(tmp_path) -> Artifact:
    """A new, empty artifact FOR EACH function using this fixture"""
    return Artifact(tmp_path / "artifact", create=True)


@pytest.fixture(scope="function")
def simple_tree() -> LegacyTree:
    """A tree with one scalar branch per primitive type and a single entry"""
    tree = LegacyTree("tree")
    for name, (leaflist, _) in SIMPLE_BRANCHES.items():
        tree.branch(name, leaflist)
    tree.fill({name: value for name, (_, value) in SIMPLE_BRANCHES.items()})
    return tree


@pytest.fixture(scope="function")
def cstring_tree() -> LegacyTree:
    """Three entries of a NUL-terminated string branch, the longest one first"""
    tree = LegacyTree("tree")
    tree.branch("myString", "myString/C")
    for value in ["ROOT RNTuple", "R", ""]:
        tree.fill({"myString": value})
    return tree


@pytest.fixture(scope="function")
def simple_artifact(artifact: Artifact, simple_tree: LegacyTree) -> Artifact:
    """An artifact holding `simple_tree` under the name 'tree'"""
    write_tree(artifact, simple_tree)
    return artifact
