"""
Importer Exception Module.

Every failure the importer can detect is raised as an `ImporterError`
subclass carrying a structured `kind` (see `ImportErrorKind`) and, where it
applies, the offending branch or target name. The import driver turns these
into an `ImportResult`; everything else propagates unchanged.
"""

from pathlib import Path
from typing import Optional, Union

from .enum import ImportErrorKind


class ImporterError(Exception):
    """Base class for all structural import failures."""

    kind: ImportErrorKind

    def __init__(
        self,
        msg: str,
        branch_name: Optional[str] = None,
        target_name: Optional[str] = None,
    ):
        super().__init__(msg)
        self.branch_name = branch_name
        self.target_name = target_name


class UnsupportedBranchShapeError(ImporterError):
    """Raised when a branch type or shape is outside the fixed mapping table."""

    kind = ImportErrorKind.UnsupportedBranchShape

    def __init__(self, branch_name: str, reason: str):
        super().__init__(
            f"Branch '{branch_name}' cannot be imported: {reason}",
            branch_name=branch_name,
        )
        self.reason = reason


class TargetAlreadyExistsError(ImporterError):
    """Raised when the destination name is already taken in the artifact."""

    kind = ImportErrorKind.TargetAlreadyExists

    def __init__(self, target_name: str, artifact_path: Union[str, Path]):
        super().__init__(
            f"An object named '{target_name}' already exists in '{artifact_path}'. "
            "Choose a different target name.",
            target_name=target_name,
        )
        self.artifact_path = Path(artifact_path)


class InvalidTargetNameError(ImporterError):
    """Raised when the destination name cannot be used as an artifact key."""

    kind = ImportErrorKind.InvalidTargetName

    def __init__(self, target_name: str, reason: str):
        super().__init__(
            f"Invalid target name '{target_name}': {reason}",
            target_name=target_name,
        )
        self.reason = reason


class SourceNotFoundError(ImporterError):
    """Raised when the source artifact or the named tree does not exist."""

    kind = ImportErrorKind.SourceNotFound

    def __init__(self, msg: str, tree_name: Optional[str] = None):
        super().__init__(msg)
        self.tree_name = tree_name


class TranscodeError(ImporterError):
    """
    Raised when a value cannot be read back through the schema that was
    validated for it. This signals a broken invariant and is never retried.
    """

    kind = ImportErrorKind.TranscodeFailure

    def __init__(self, branch_name: str, entry_index: Optional[int], inner: Exception):
        where = f" at entry {entry_index}" if entry_index is not None else ""
        super().__init__(
            f"Failed to transcode branch '{branch_name}'{where}.\nInner err: {inner}",
            branch_name=branch_name,
        )
        self.entry_index = entry_index
