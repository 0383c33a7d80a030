import pytest

from treeport.tree import LegacyTree


def test_fill_repeats_previous_values():
    tree = LegacyTree("tree")
    tree.branch("x", "x/I")
    tree.branch("y", "y/D")

    tree.fill({"x": 1, "y": 0.5})
    tree.fill({"x": 2})  # 'y' keeps its buffer value
    assert tree.num_entries == 2

    entry = tree.load_entry(1)
    assert entry.index == 1
    assert entry.read_scalar("x", "x") == 2
    assert entry.read_scalar("y", "y") == 0.5


def test_set_value_is_used_by_next_fills():
    tree = LegacyTree("tree")
    tree.branch("x", "x/l")
    tree.set_value("x", 2**64 - 1)
    tree.fill()
    tree.fill()

    assert tree.load_entry(1).read_scalar("x", "x") == 2**64 - 1


def test_failed_fill_leaves_tree_unchanged():
    tree = LegacyTree("tree")
    tree.branch("n", "n/I")
    tree.branch("c", "c[2]/C")
    tree.fill({"n": 1, "c": "ok"})

    with pytest.raises(KeyError):
        tree.fill({"unknown": 1})
    # 'n' is valid, 'c' is too long: neither is applied
    with pytest.raises(ValueError):
        tree.fill({"n": 2, "c": "ROOT"})
    assert tree.num_entries == 1

    tree.fill()
    assert tree.load_entry(1).read_scalar("n", "n") == 1


def test_branch_declaration_rules():
    tree = LegacyTree("tree")
    tree.branch("x", "x/I")

    with pytest.raises(ValueError, match="already exists"):
        tree.branch("x", "x/D")
    with pytest.raises(ValueError, match="not declared"):
        tree.branch("v", "v[n]/D")
    with pytest.raises(ValueError, match="Invalid characters"):
        tree.branch("a/b", "a/I")

    tree.fill({"x": 1})
    with pytest.raises(ValueError, match="after entries were filled"):
        tree.branch("late", "late/I")


def test_capacity_tracks_largest_entry():
    tree = LegacyTree("tree")
    tree.branch("s", "s/C")
    assert tree.get_branch("s").capacity == 0

    tree.fill({"s": "R"})
    tree.fill({"s": "ROOT"})
    tree.fill({"s": ""})
    assert tree.get_branch("s").capacity == 5
    assert tree.branch_entries("s") == (b"R\0", b"ROOT\0", b"\0")


def test_entry_buffers_keep_stale_bytes():
    tree = LegacyTree("tree")
    tree.branch("s", "s/C")
    tree.fill({"s": "ROOT"})
    tree.fill({"s": "R"})

    tree.load_entry(0)
    entry = tree.load_entry(1)
    # the cursor is overwritten in place, the tail of entry 0 is still there
    assert entry.read_bytes_up_to("s", "s", 5) == b"R\0OT\0"
    assert entry.read_bytes_up_to("s", "s", 2) == b"R\0"


def test_entry_accessors():
    tree = LegacyTree("tree")
    tree.branch("n", "n/I")
    tree.branch("v", "v[n]/D")
    tree.branch("fixed", "fixed[2]/S")
    tree.branch("s", "s/C")
    tree.fill({"n": 2, "v": [1.0, 2.0], "fixed": [3, 4], "s": "abc"})

    entry = tree.load_entry(0)
    assert entry.read_array_element("v", "v", 1) == 2.0
    assert entry.read_array_element("fixed", "fixed", 0) == 3

    with pytest.raises(IndexError):
        entry.read_array_element("v", "v", 2)
    with pytest.raises(IndexError):
        entry.read_array_element("fixed", "fixed", 2)
    with pytest.raises(ValueError, match="is an array"):
        entry.read_scalar("fixed", "fixed")
    with pytest.raises(ValueError, match="character buffer"):
        entry.read_scalar("s", "s")
    with pytest.raises(KeyError):
        entry.read_scalar("missing", "n")
    with pytest.raises(KeyError):
        entry.read_scalar("n", "missing")


def test_load_entry_bounds_and_close():
    tree = LegacyTree("tree")
    tree.branch("x", "x/I")
    tree.fill({"x": 1})

    with pytest.raises(IndexError):
        tree.load_entry(1)
    with pytest.raises(IndexError):
        tree.load_entry(-1)

    with tree:
        assert tree.load_entry(0).read_scalar("x", "x") == 1
    with pytest.raises(RuntimeError, match="closed"):
        tree.load_entry(0)
