"""
Tree Persistence Module.

Stores a `LegacyTree` inside an artifact, next to the ntuples imported from
it. The on-disk form is an Arrow IPC file with one binary column per branch,
holding the raw entry bytes exactly as filled; the leaf-list descriptor,
object class and buffer capacity of each branch travel as field metadata.
"""

import logging as log
import os

import pyarrow as pa

from treeport.enum import ObjectKind
from treeport.errors import SourceNotFoundError, TargetAlreadyExistsError
from treeport.models import BranchDescriptor
from treeport.store import Artifact, CatalogEntry
from .legacy_tree import LegacyTree

_KIND_KEY = b"treeport.kind"
_TITLE_KEY = b"treeport.title"
_LEAFLIST_KEY = b"leaflist"
_CLASS_NAME_KEY = b"class_name"
_CAPACITY_KEY = b"capacity"


def _tree_to_table(tree: LegacyTree) -> pa.Table:
    fields = []
    arrays = []
    for branch in tree.branches:
        metadata = {_CAPACITY_KEY: str(branch.capacity).encode("utf-8")}
        if branch.class_name is not None:
            metadata[_CLASS_NAME_KEY] = branch.class_name.encode("utf-8")
        else:
            metadata[_LEAFLIST_KEY] = branch.leaflist.encode("utf-8")
        fields.append(pa.field(branch.name, pa.binary(), nullable=False, metadata=metadata))
        arrays.append(pa.array(tree.branch_entries(branch.name), type=pa.binary()))

    schema = pa.schema(
        fields,
        metadata={
            _KIND_KEY: ObjectKind.Tree.value.encode("utf-8"),
            _TITLE_KEY: tree.title.encode("utf-8"),
        },
    )
    return pa.Table.from_arrays(arrays, schema=schema)


def write_tree(artifact: Artifact, tree: LegacyTree):
    """
    Commits `tree` into `artifact` under the tree name.

    Raises:
        TargetAlreadyExistsError: If the artifact already holds that name.
    """
    if artifact.contains(tree.name):
        raise TargetAlreadyExistsError(tree.name, artifact.path)

    table = _tree_to_table(tree)
    partial_path = artifact.partial_path(tree.name)
    data_path = artifact.data_path(tree.name)
    try:
        with pa.OSFile(str(partial_path), "wb") as sink:
            with pa.ipc.new_file(sink, table.schema) as writer:
                writer.write_table(table)
        os.replace(partial_path, data_path)
        artifact.register(
            CatalogEntry(
                name=tree.name,
                kind=ObjectKind.Tree,
                path=data_path.name,
                num_entries=tree.num_entries,
            )
        )
    except Exception:
        partial_path.unlink(missing_ok=True)
        raise

    log.info(
        f"Tree '{tree.name}' written to {artifact.path} "
        f"({len(table.schema)} branches, {tree.num_entries} entries)."
    )


def open_tree(artifact: Artifact, name: str) -> LegacyTree:
    """
    Loads the tree `name` from `artifact`.

    The returned tree is fully in memory; use it as a context manager to
    release its entry buffers.

    Raises:
        SourceNotFoundError: If the artifact holds no tree with this name.
    """
    entry = artifact.get(name)
    if entry is None or entry.kind != ObjectKind.Tree:
        raise SourceNotFoundError(
            f"No tree named '{name}' in artifact '{artifact.path}'", tree_name=name
        )

    with pa.OSFile(str(artifact.path / entry.path), "rb") as source:
        table = pa.ipc.open_file(source).read_all()

    branches = []
    for field in table.schema:
        metadata = field.metadata or {}
        capacity = int(metadata.get(_CAPACITY_KEY, b"0"))
        if _CLASS_NAME_KEY in metadata:
            descriptor = BranchDescriptor(
                name=field.name,
                class_name=metadata[_CLASS_NAME_KEY].decode("utf-8"),
                capacity=capacity,
            )
        else:
            descriptor = BranchDescriptor.from_leaflist(
                field.name, metadata[_LEAFLIST_KEY].decode("utf-8"), capacity=capacity
            )
        branches.append((descriptor, table.column(field.name).to_pylist()))

    title = (table.schema.metadata or {}).get(_TITLE_KEY, b"").decode("utf-8")
    log.debug(f"Opened tree '{name}' from {artifact.path}")
    return LegacyTree._restore(name, title, branches, entry.num_entries)
