from .enum import (
    LeafType as LeafType,
    FieldKind as FieldKind,
    PrimitiveKind as PrimitiveKind,
    StoreStatus as StoreStatus,
    ImportState as ImportState,
    ImportErrorKind as ImportErrorKind,
)

from .errors import (
    ImporterError as ImporterError,
    UnsupportedBranchShapeError as UnsupportedBranchShapeError,
    TargetAlreadyExistsError as TargetAlreadyExistsError,
    InvalidTargetNameError as InvalidTargetNameError,
    SourceNotFoundError as SourceNotFoundError,
    TranscodeError as TranscodeError,
)

from .models import (
    BranchDescriptor as BranchDescriptor,
    FieldSpec as FieldSpec,
    TargetSchema as TargetSchema,
)

from .store import (
    Artifact as Artifact,
    StoreWriter as StoreWriter,
    StoreReader as StoreReader,
    WriterConfig as WriterConfig,
)

from .tree import (
    LegacyTree as LegacyTree,
    open_tree as open_tree,
    write_tree as write_tree,
)

from .importer import (
    TreeImporter as TreeImporter,
    ImporterConfig as ImporterConfig,
    ImportResult as ImportResult,
)

# useful to do like: `from treeport import TreeImporter`
__all__ = [
    "Artifact",
    "BranchDescriptor",
    "FieldKind",
    "FieldSpec",
    "ImportErrorKind",
    "ImportResult",
    "ImportState",
    "ImporterConfig",
    "ImporterError",
    "InvalidTargetNameError",
    "LeafType",
    "LegacyTree",
    "PrimitiveKind",
    "SourceNotFoundError",
    "StoreReader",
    "StoreStatus",
    "StoreWriter",
    "TargetAlreadyExistsError",
    "TargetSchema",
    "TranscodeError",
    "TreeImporter",
    "UnsupportedBranchShapeError",
    "WriterConfig",
    "open_tree",
    "write_tree",
]
