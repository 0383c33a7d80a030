from typing import Any, Protocol, Sequence

from treeport.models import BranchDescriptor


class EntryView(Protocol):
    """
    Protocol for a cursor positioned at one row of a source container.

    Values are read through typed accessors, never through raw addresses.
    The view is reusable: the next `load_entry()` call overwrites it, so
    values must be copied out before advancing. Reading the same value twice
    without re-positioning returns the same result.
    """

    def read_scalar(self, branch_name: str, leaf_name: str) -> Any: ...

    def read_array_element(self, branch_name: str, leaf_name: str, index: int) -> Any: ...

    def read_bytes_up_to(
        self, branch_name: str, leaf_name: str, max_bytes: int
    ) -> bytes: ...


class SourceContainer(Protocol):
    """
    Protocol for a legacy row-oriented container.

    A class implicitly satisfies this protocol if it exposes its ordered
    branch descriptors, its row count and an entry loader.
    """

    @property
    def name(self) -> str: ...

    @property
    def branches(self) -> Sequence[BranchDescriptor]: ...

    @property
    def num_entries(self) -> int: ...

    def load_entry(self, index: int) -> EntryView:
        """
        Positions the cursor at row `index` (0-based).

        Raises:
            IndexError: If `index` is out of range.
        """
        ...
