"""
State Enumerations Module.

Defines the lifecycle states and outcome kinds shared by the store writer
and the import driver.
"""

from enum import Enum, StrEnum


class StoreStatus(Enum):
    """
    Represents the lifecycle state of a store during the writing process.
    """

    Null = "null"  # Not yet opened.
    Pending = "pending"  # Partial file open; accepting rows; not reachable by name.
    Committed = "committed"  # Renamed into place and registered; immutable.
    Error = "error"  # Aborted; partial data discarded.


class ImportState(Enum):
    """
    States of the import driver.

    Uninitialized -> SchemaBuilt -> Importing -> Committed, with Failed
    reachable from every non-terminal state.
    """

    Uninitialized = "uninitialized"
    SchemaBuilt = "schema_built"
    Importing = "importing"
    Committed = "committed"
    Failed = "failed"


class ObjectKind(StrEnum):
    """Kind of a named object registered in an artifact catalog."""

    Tree = "tree"
    NTuple = "ntuple"


class ImportErrorKind(StrEnum):
    """Structured failure kinds reported by the import driver."""

    UnsupportedBranchShape = "unsupported_branch_shape"
    TargetAlreadyExists = "target_already_exists"
    InvalidTargetName = "invalid_target_name"
    SourceNotFound = "source_not_found"
    TranscodeFailure = "transcode_failure"
