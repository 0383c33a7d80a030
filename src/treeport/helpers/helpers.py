"""
Helper Utilities.

Provides utility functions for object naming and qualified field paths.
"""

from pathlib import Path
from typing import Optional


def validate_object_name(name: str, what: str = "object"):
    """
    Checks that a name can be used as a key inside an artifact.

    Names map to file names in the artifact directory, so they must be
    non-empty, must not contain path separators and must not be hidden.

    Raises:
        ValueError: If the name is not usable.
    """
    if not name:
        raise ValueError(f"Empty {what} name")
    nbase = Path(name)
    if nbase.is_absolute() or "/" in name or "\\" in name:
        raise ValueError(f"Invalid characters '/' in {what} name {name}")
    if name.startswith("."):
        raise ValueError(f"Invalid leading '.' in {what} name {name}")


def pack_qualified_name(branch_name: str, leaf_name: str) -> str:
    """
    Builds the addressable name of a record sub-field.

    Examples:
        - ("branch", "a") -> "branch.a"
    """
    return f"{branch_name}.{leaf_name}"


def unpack_qualified_name(path: str) -> Optional[tuple[str, str]]:
    """
    Splits a qualified sub-field name into (field_name, sub_field_name).

    The split happens at the last '.', so top-level names that themselves
    contain dots keep working (e.g. "evt.vtx.x" -> ("evt.vtx", "x")).

    Returns:
        Optional[tuple[str, str]]: the pair, or None if `path` has no '.'.
    """
    field_name, sep, sub_name = path.rpartition(".")
    if not sep or not field_name or not sub_name:
        return None
    return field_name, sub_name
