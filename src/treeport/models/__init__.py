from .base_model import BaseModel as BaseModel
from .branch import (
    BranchDescriptor as BranchDescriptor,
    LeafDescriptor as LeafDescriptor,
    parse_leaflist as parse_leaflist,
)
from .field import FieldSpec as FieldSpec
from .schema import TargetSchema as TargetSchema
