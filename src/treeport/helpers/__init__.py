from .helpers import (
    validate_object_name as validate_object_name,
    pack_qualified_name as pack_qualified_name,
    unpack_qualified_name as unpack_qualified_name,
)
