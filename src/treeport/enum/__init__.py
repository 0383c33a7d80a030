from .leaf_type import LeafType as LeafType
from .field_kind import FieldKind as FieldKind, PrimitiveKind as PrimitiveKind
from .status import (
    StoreStatus as StoreStatus,
    ImportState as ImportState,
    ObjectKind as ObjectKind,
    ImportErrorKind as ImportErrorKind,
)
