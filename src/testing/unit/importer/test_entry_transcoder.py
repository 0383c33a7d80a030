from typing import Any, Dict, List

import numpy as np
import pytest

from treeport.enum import ImportErrorKind
from treeport.errors import TranscodeError
from treeport.importer import EntryTranscoder, build_schema, decode_c_string
from treeport.models import BranchDescriptor
from treeport.tree import LegacyTree


class _RawEntry:
    """
    Entry view over hand-made branch buffers. Records the byte limit of
    every bounded read.
    """

    def __init__(self, buffers: Dict[str, bytes]):
        self.buffers = buffers
        self.requested: List[int] = []

    def read_scalar(self, branch_name: str, leaf_name: str) -> Any:
        raise KeyError(branch_name)

    def read_array_element(self, branch_name: str, leaf_name: str, index: int) -> Any:
        raise IndexError(index)

    def read_bytes_up_to(self, branch_name: str, leaf_name: str, max_bytes: int) -> bytes:
        self.requested.append(max_bytes)
        return self.buffers[branch_name][:max_bytes]


class _StringSource:
    def __init__(self, capacity: int):
        self._branches = [BranchDescriptor.from_leaflist("s", "s/C", capacity=capacity)]

    @property
    def name(self) -> str:
        return "raw"

    @property
    def branches(self):
        return self._branches

    @property
    def num_entries(self) -> int:
        return 1

    def load_entry(self, index: int):
        raise NotImplementedError


def test_decode_c_string():
    assert decode_c_string(b"R\0OOT") == "R"
    assert decode_c_string(b"\0") == ""
    assert decode_c_string(b"") == ""
    # no terminator: the whole buffer is the value
    assert decode_c_string(b"ROOT") == "ROOT"
    # invalid UTF-8 is replaced, not rejected
    assert decode_c_string(b"\xff\0") == "\ufffd"


def test_transcode_primitives(simple_tree: LegacyTree):
    transcoder = EntryTranscoder(build_schema(simple_tree))
    row = transcoder.transcode(simple_tree.load_entry(0), 0)

    assert list(row.keys()) == transcoder.schema.field_names
    assert row["myBool"] is True
    assert row["myInt8"] == -8
    assert row["myUInt8"] == 8
    assert row["myInt16"] == -16
    assert row["myUInt16"] == 16
    assert row["myInt32"] == -32
    assert row["myUInt32"] == 32
    assert row["myInt64"] == -64
    assert row["myUInt64"] == 64
    assert row["myFloat"] == 32.0
    assert row["myDouble"] == 64.0


def test_transcode_ignores_stale_bytes(cstring_tree: LegacyTree):
    transcoder = EntryTranscoder(build_schema(cstring_tree))

    # the longest value is loaded first, so later buffers keep its tail
    values = [
        transcoder.transcode(cstring_tree.load_entry(i), i)["myString"]
        for i in range(cstring_tree.num_entries)
    ]
    assert values == ["ROOT RNTuple", "R", ""]


def test_unterminated_buffer_is_bounded_by_capacity():
    transcoder = EntryTranscoder(build_schema(_StringSource(capacity=4)))
    entry = _RawEntry({"s": b"ROOTGARBAGE"})

    row = transcoder.transcode(entry)
    assert row["s"] == "ROOT"
    assert entry.requested == [4]


def test_transcode_arrays_and_records():
    tree = LegacyTree("tree")
    tree.branch("a", "a[1]/I")
    tree.branch("b", "b[2]/I")
    tree.branch("c", "c[4]/C")
    tree.branch("branch", "a/I:b/I")
    tree.fill({"a": [42], "b": [1, 2], "c": "ROOT", "branch": {"a": 1, "b": 2}})

    row = EntryTranscoder(build_schema(tree)).transcode(tree.load_entry(0), 0)
    assert row["a"] == [42]
    assert row["b"] == [1, 2]
    assert row["c"] == [b"R", b"O", b"O", b"T"]
    assert row["branch"] == {"a": 1, "b": 2}


def test_char_array_keeps_nul_characters():
    tree = LegacyTree("tree")
    tree.branch("c", "c[3]/C")
    tree.fill({"c": "A"})

    row = EntryTranscoder(build_schema(tree)).transcode(tree.load_entry(0), 0)
    assert row["c"] == [b"A", b"\0", b"\0"]


def test_unreadable_value_raises_transcode_error(simple_tree: LegacyTree):
    transcoder = EntryTranscoder(build_schema(simple_tree))

    with pytest.raises(TranscodeError) as exc_info:
        transcoder.transcode(_RawEntry({}), 7)
    assert exc_info.value.kind == ImportErrorKind.TranscodeFailure
    assert exc_info.value.branch_name == "myBool"
    assert exc_info.value.entry_index == 7
    assert isinstance(exc_info.value.__cause__, KeyError)


def test_transcode_floats_keep_their_width():
    tree = LegacyTree("tree")
    tree.branch("f", "f/F")
    tree.branch("d", "d/D")
    tree.fill({"f": 0.1, "d": 0.1})

    row = EntryTranscoder(build_schema(tree)).transcode(tree.load_entry(0), 0)
    assert np.float32(row["f"]).tobytes() == np.float32(0.1).tobytes()
    assert row["f"] != 0.1
    assert np.float64(row["d"]).tobytes() == np.float64(0.1).tobytes()
