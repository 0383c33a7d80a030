import logging as log

from treeport.errors import UnsupportedBranchShapeError
from treeport.models import TargetSchema
from treeport.tree import SourceContainer
from .type_mapper import map_branch


def build_schema(source: SourceContainer) -> TargetSchema:
    """
    Builds the target schema of a source container in one pass.

    Branches are mapped in declaration order, so field order matches branch
    order. The first unsupported branch aborts the build; no partial schema
    is ever returned. The source is only inspected, never positioned.

    Raises:
        UnsupportedBranchShapeError: For the first branch that cannot be mapped,
                                     or for a branch name declared twice.
    """
    fields = []
    seen = set()
    for branch in source.branches:
        if branch.name in seen:
            raise UnsupportedBranchShapeError(branch.name, "branch name is declared twice")
        seen.add(branch.name)

        field = map_branch(branch)
        log.debug(f"Branch '{branch.name}' ({branch.leaflist}) -> {field.kind.value} field")
        fields.append(field)

    return TargetSchema(fields=tuple(fields))
