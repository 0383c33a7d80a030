"""
Artifact Module.

An artifact is a directory holding named objects (legacy trees and columnar
ntuples), one Arrow IPC file each, plus a `catalog.json` index. Writers
produce hidden `.partial` files first; an object exists only once the
catalog, rewritten atomically, lists it.
"""

import logging as log
import os
from pathlib import Path
from typing import List, Optional, Union

from treeport.errors import TargetAlreadyExistsError
from treeport.helpers import validate_object_name
from .catalog import Catalog, CatalogEntry


class Artifact:
    CATALOG_FILE_NAME = "catalog.json"
    DATA_SUFFIX = ".arrow"
    PARTIAL_SUFFIX = ".partial"

    def __init__(self, path: Union[str, Path], create: bool = False):
        """
        Opens an artifact directory.

        Args:
            path: The artifact directory.
            create: Create the directory and an empty catalog if missing.

        Raises:
            FileNotFoundError: If the artifact does not exist and `create` is False.
            NotADirectoryError: If `path` is a regular file.
        """
        self._path = Path(path)
        if self._path.exists() and not self._path.is_dir():
            raise NotADirectoryError(f"Artifact path is not a directory: {self._path}")

        if not self._catalog_path.exists():
            if not create:
                raise FileNotFoundError(f"Artifact not found: {self._path}")
            self._path.mkdir(parents=True, exist_ok=True)
            self._write_catalog(Catalog())
            log.debug(f"Created artifact at {self._path}")

    @property
    def path(self) -> Path:
        return self._path

    @property
    def _catalog_path(self) -> Path:
        return self._path / self.CATALOG_FILE_NAME

    def _read_catalog(self) -> Catalog:
        return Catalog.model_validate_json(self._catalog_path.read_text(encoding="utf-8"))

    def _write_catalog(self, catalog: Catalog):
        tmp_path = self._path / f".{self.CATALOG_FILE_NAME}.tmp"
        tmp_path.write_text(catalog.model_dump_json(indent=2), encoding="utf-8")
        os.replace(tmp_path, self._catalog_path)

    # --- Queries ---
    def keys(self) -> List[str]:
        """Names of all committed objects."""
        return list(self._read_catalog().objects.keys())

    def contains(self, name: str) -> bool:
        """Checks if a committed object with this name exists."""
        return name in self._read_catalog().objects

    def __contains__(self, name: str) -> bool:
        return self.contains(name)

    def get(self, name: str) -> Optional[CatalogEntry]:
        """Retrieves the catalog entry of an object, if it exists."""
        return self._read_catalog().objects.get(name)

    # --- Paths ---
    def data_path(self, name: str) -> Path:
        validate_object_name(name)
        return self._path / f"{name}{self.DATA_SUFFIX}"

    def partial_path(self, name: str) -> Path:
        validate_object_name(name)
        return self._path / f".{name}{self.DATA_SUFFIX}{self.PARTIAL_SUFFIX}"

    # --- Mutations ---
    def register(self, entry: CatalogEntry):
        """
        Makes a data file reachable under `entry.name`.

        Raises:
            TargetAlreadyExistsError: If the name is already taken.
        """
        catalog = self._read_catalog()
        if entry.name in catalog.objects:
            raise TargetAlreadyExistsError(entry.name, self._path)
        catalog.objects[entry.name] = entry
        self._write_catalog(catalog)
        log.debug(f"Registered {entry.kind.value} '{entry.name}' in {self._path}")
