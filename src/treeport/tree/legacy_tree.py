"""
Legacy Tree Module.

This module provides `LegacyTree`, a row-oriented container made of named
branches. Each branch owns a buffer; `fill()` snapshots every branch buffer
into a new entry, and `load_entry()` copies an entry back into a reusable
cursor (`TreeEntry`), overwriting the previous contents in place.

Example:
    tree = LegacyTree("events")
    tree.branch("n", "n/I")
    tree.branch("label", "label/C")
    tree.branch("pos", "x/F:y/F")
    tree.fill({"n": 3, "label": "first", "pos": {"x": 1.0, "y": 2.0}})
"""

import logging as log
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np

from treeport.enum import LeafType
from treeport.helpers import validate_object_name
from treeport.models import BranchDescriptor, LeafDescriptor
from .internal.codec import encode_branch


class _BranchStore:
    """Holds the declared descriptor, the current buffer value and all filled entries."""

    def __init__(self, descriptor: BranchDescriptor, entries: Optional[List[bytes]] = None):
        self.descriptor = descriptor
        self.offsets: Dict[str, int] = (
            descriptor.leaf_offsets() if descriptor.class_name is None else {}
        )
        self.entries: List[bytes] = entries if entries is not None else []
        self.current: bytes = encode_branch(descriptor, None)
        self.capacity = max(
            [descriptor.capacity] + [len(raw) for raw in self.entries]
        )

    def append(self, raw: bytes):
        self.entries.append(raw)
        if len(raw) > self.capacity:
            self.capacity = len(raw)

    def snapshot(self) -> BranchDescriptor:
        """The descriptor, reporting the current buffer capacity."""
        return self.descriptor.model_copy(update={"capacity": self.capacity})


class TreeEntry:
    """
    The entry cursor of a `LegacyTree`.

    One instance is shared by all `load_entry()` calls of a tree. Each branch
    buffer is sized to the branch capacity and is overwritten in place, so
    bytes of a longer previous entry may still follow a shorter current one.
    """

    def __init__(self, tree_name: str, stores: Dict[str, _BranchStore]):
        self._tree_name = tree_name
        self._stores = stores
        self._buffers: Dict[str, bytearray] = {
            name: bytearray(store.capacity) for name, store in stores.items()
        }
        self._sizes: Dict[str, int] = {name: 0 for name in stores}
        self._index: int = -1

    @property
    def index(self) -> int:
        """The loaded row, -1 before the first load."""
        return self._index

    def _load(self, index: int):
        for name, store in self._stores.items():
            raw = store.entries[index]
            buf = self._buffers[name]
            if len(buf) < len(raw):
                buf.extend(bytes(len(raw) - len(buf)))
            buf[: len(raw)] = raw
            self._sizes[name] = len(raw)
        self._index = index

    def _locate(self, branch_name: str, leaf_name: str) -> tuple[LeafDescriptor, int]:
        store = self._stores.get(branch_name)
        if store is None:
            raise KeyError(f"No branch '{branch_name}' in tree '{self._tree_name}'")
        leaf = store.descriptor.get_leaf(leaf_name)
        if leaf is None:
            raise KeyError(f"No leaf '{leaf_name}' in branch '{branch_name}'")
        return leaf, store.offsets[leaf_name]

    def _decode(self, branch_name: str, leaf: LeafDescriptor, position: int) -> Any:
        buf = self._buffers[branch_name]
        if position + leaf.itemsize > self._sizes[branch_name]:
            raise IndexError(
                f"Read past the end of entry {self._index} of branch '{branch_name}'"
            )
        if leaf.type_code == LeafType.Char:
            # numpy would strip a NUL character, slice the byte instead
            return bytes(buf[position : position + 1])
        return np.frombuffer(buf, dtype=leaf.dtype, count=1, offset=position)[0].item()

    def read_scalar(self, branch_name: str, leaf_name: str) -> Any:
        leaf, offset = self._locate(branch_name, leaf_name)
        if leaf.length is not None or leaf.count_leaf is not None:
            raise ValueError(
                f"Leaf '{branch_name}.{leaf_name}' is an array, use read_array_element()"
            )
        if leaf.is_variable:
            raise ValueError(
                f"Leaf '{branch_name}.{leaf_name}' is a character buffer, use read_bytes_up_to()"
            )
        return self._decode(branch_name, leaf, offset)

    def read_array_element(self, branch_name: str, leaf_name: str, index: int) -> Any:
        leaf, offset = self._locate(branch_name, leaf_name)
        if leaf.length is not None:
            size = leaf.length
        else:
            size = (self._sizes[branch_name] - offset) // leaf.itemsize
        if not 0 <= index < size:
            raise IndexError(
                f"Index {index} out of range for leaf '{branch_name}.{leaf_name}' of size {size}"
            )
        return self._decode(branch_name, leaf, offset + index * leaf.itemsize)

    def read_bytes_up_to(self, branch_name: str, leaf_name: str, max_bytes: int) -> bytes:
        _, offset = self._locate(branch_name, leaf_name)
        buf = self._buffers[branch_name]
        end = min(offset + max(max_bytes, 0), len(buf))
        return bytes(buf[offset:end])


class LegacyTree:
    """
    In-memory legacy tree.

    Branches must all be declared before the first `fill()`. Branch buffers
    keep their value between fills, as in the legacy container: a branch
    missing from the `fill()` mapping repeats its previous value.
    """

    def __init__(self, name: str, title: str = ""):
        validate_object_name(name, "tree")
        self._name = name
        self._title = title
        self._stores: Dict[str, _BranchStore] = {}
        self._num_entries = 0
        self._entry: Optional[TreeEntry] = None
        self._closed = False

    # --- Declaration ---
    def _check_can_declare(self, name: str):
        if self._num_entries > 0:
            raise ValueError(
                f"Cannot add branch '{name}' to tree '{self._name}' after entries were filled"
            )
        if name in self._stores:
            raise ValueError(f"Branch '{name}' already exists in tree '{self._name}'")
        validate_object_name(name, "branch")

    def _declared_leaf_names(self) -> set[str]:
        return {
            leaf.name for store in self._stores.values() for leaf in store.descriptor.leaves
        }

    def branch(self, name: str, leaflist: str) -> BranchDescriptor:
        """
        Declares a leaf branch.

        Args:
            name (str): The branch name.
            leaflist (str): Leaf-list descriptor, e.g. "x/F", "v[3]/I", "a/I:b/I".

        Returns:
            BranchDescriptor: The declared descriptor.

        Raises:
            ValueError: If the name is taken, entries were already filled,
                        the descriptor is malformed, or a counter leaf is unknown.
        """
        self._check_can_declare(name)
        descriptor = BranchDescriptor.from_leaflist(name, leaflist)

        known_leaves = self._declared_leaf_names()
        for leaf in descriptor.leaves:
            if leaf.count_leaf is not None and leaf.count_leaf not in known_leaves:
                raise ValueError(
                    f"Counter leaf '{leaf.count_leaf}' of '{name}.{leaf.name}' is not declared"
                )
            known_leaves.add(leaf.name)

        self._stores[name] = _BranchStore(descriptor)
        log.debug(f"Tree '{self._name}': declared branch '{name}' ({descriptor.leaflist})")
        return descriptor

    def object_branch(self, name: str, class_name: str) -> BranchDescriptor:
        """Declares a branch holding serialized objects of class `class_name`."""
        self._check_can_declare(name)
        descriptor = BranchDescriptor(name=name, class_name=class_name)
        self._stores[name] = _BranchStore(descriptor)
        return descriptor

    # --- Filling ---
    def set_value(self, branch_name: str, value: Any):
        """Sets the buffer of a branch; the value is used by the next fills."""
        store = self._get_store(branch_name)
        store.current = encode_branch(store.descriptor, value)

    def fill(self, values: Optional[Mapping[str, Any]] = None) -> int:
        """
        Appends one entry.

        Args:
            values: Optional {branch_name: value} updates applied before filling.

        Returns:
            int: The number of bytes written for this entry.

        Raises:
            KeyError: For an unknown branch name.
            ValueError, TypeError: For a value that does not fit its branch;
                                   the tree is left unchanged.
        """
        self._check_open()
        values = values or {}
        unknown = set(values.keys()) - set(self._stores.keys())
        if unknown:
            raise KeyError(f"Unknown branches {sorted(unknown)} in tree '{self._name}'")

        # encode everything first, so a bad value does not leave a half-filled entry
        encoded = {
            name: encode_branch(self._stores[name].descriptor, value)
            for name, value in values.items()
        }
        for name, raw in encoded.items():
            self._stores[name].current = raw

        nbytes = 0
        for store in self._stores.values():
            store.append(store.current)
            nbytes += len(store.current)
        self._num_entries += 1
        return nbytes

    # --- Properties ---
    @property
    def name(self) -> str:
        return self._name

    @property
    def title(self) -> str:
        return self._title

    @property
    def num_entries(self) -> int:
        return self._num_entries

    @property
    def branches(self) -> List[BranchDescriptor]:
        """Branch descriptors in declaration order."""
        return [store.snapshot() for store in self._stores.values()]

    def get_branch(self, name: str) -> Optional[BranchDescriptor]:
        store = self._stores.get(name)
        return store.snapshot() if store else None

    def branch_entries(self, name: str) -> Sequence[bytes]:
        """Raw per-entry bytes of a branch, as filled."""
        return tuple(self._get_store(name).entries)

    # --- Reading ---
    def load_entry(self, index: int) -> TreeEntry:
        """
        Positions the shared cursor at entry `index`.

        Raises:
            IndexError: If `index` is out of range.
            RuntimeError: If the tree was closed.
        """
        self._check_open()
        if not 0 <= index < self._num_entries:
            raise IndexError(
                f"Entry {index} out of range for tree '{self._name}' with {self._num_entries} entries"
            )
        if self._entry is None:
            self._entry = TreeEntry(self._name, self._stores)
        self._entry._load(index)
        return self._entry

    # --- Resources ---
    def _get_store(self, name: str) -> _BranchStore:
        store = self._stores.get(name)
        if store is None:
            raise KeyError(f"No branch '{name}' in tree '{self._name}'")
        return store

    def _check_open(self):
        if self._closed:
            raise RuntimeError(f"Tree '{self._name}' is closed")

    def close(self):
        """Releases the entry buffers. The tree cannot be read afterwards."""
        self._entry = None
        self._closed = True

    def __enter__(self) -> "LegacyTree":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @classmethod
    def _restore(
        cls,
        name: str,
        title: str,
        branches: List[tuple[BranchDescriptor, List[bytes]]],
        num_entries: int,
    ) -> "LegacyTree":
        """Rebuilds a filled tree from persisted descriptors and entries."""
        tree = cls(name, title)
        for descriptor, entries in branches:
            if len(entries) != num_entries:
                raise ValueError(
                    f"Branch '{descriptor.name}' has {len(entries)} entries, tree '{name}' has {num_entries}"
                )
            tree._stores[descriptor.name] = _BranchStore(descriptor, list(entries))
        tree._num_entries = num_entries
        return tree
