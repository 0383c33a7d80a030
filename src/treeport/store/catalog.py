"""
Artifact Catalog Module.

The catalog is the single source of truth of what an artifact contains. A data
file becomes reachable under a name only once its entry is written here.
"""

from typing import Dict

from treeport.enum import ObjectKind
from treeport.models import BaseModel


class CatalogEntry(BaseModel):
    """
    A named object committed into an artifact.

    Attributes:
        name (str): The object name, unique within the artifact.
        kind (ObjectKind): Legacy tree or columnar ntuple.
        path (str): Data file name, relative to the artifact directory.
        num_entries (int): Number of rows.
    """

    name: str
    kind: ObjectKind
    path: str
    num_entries: int


class Catalog(BaseModel):
    objects: Dict[str, CatalogEntry] = {}
