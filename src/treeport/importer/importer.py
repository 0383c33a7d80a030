"""
Tree Import Tool.

This module provides a command-line interface (CLI) and a Python API for
importing a legacy tree into a columnar ntuple store.

It handles the orchestration of:
1.  **Loading:** Opening the source artifact and the tree with `open_tree`.
2.  **Schema inference:** Mapping every branch to a target field (`build_schema`).
3.  **Transcoding:** Copying every entry into a target row (`EntryTranscoder`).
4.  **Writing:** Appending rows and committing the store once (`StoreWriter`).

Typical usage as a script:
    $ treeport-import ./data tree --name ntuple

Typical usage as a library:
    importer = TreeImporter.create("./data", "tree")
    importer.set_ntuple_name("ntuple")
    result = importer.run()
    result.raise_for_error()
"""

import argparse
import logging as log
import shutil
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Optional, Union

from treeport.enum import ImportErrorKind, ImportState
from treeport.errors import (
    ImporterError,
    InvalidTargetNameError,
    SourceNotFoundError,
    TargetAlreadyExistsError,
)
from treeport.helpers import validate_object_name
from treeport.models import TargetSchema
from treeport.store import Artifact, StoreWriter, WriterConfig
from treeport.store.config import DEFAULT_MAX_BATCH_SIZE_RECORDS
from treeport.tree import LegacyTree, open_tree
from .entry_transcoder import EntryTranscoder
from .progress import DEFAULT_PROGRESS_INTERVAL, ProgressManager
from .schema_builder import build_schema

# --- Configuration ---


@dataclass
class ImporterConfig:
    """
    Configuration object for the import process.

    This data class serves as the single source of truth for the import settings,
    decoupling the `TreeImporter` logic from the source of the configuration
    (CLI arguments or library calls).

    Attributes:
        source_path (Path): The artifact holding the source tree.
        tree_name (str): The name of the tree to import.
        dest_path (Optional[Path]): The artifact receiving the ntuple. Defaults to `source_path`.
        ntuple_name (Optional[str]): Name of the target ntuple. Defaults to `tree_name`.
        quiet (bool): Suppress progress output. The final outcome is always logged.
        log_level (str): Logging verbosity ("DEBUG", "INFO", "WARNING", "ERROR").
        max_batch_size_records (int): Rows per record batch written to disk.
        progress_interval (int): Rows between two progress refreshes.
    """

    source_path: Path
    tree_name: str
    dest_path: Optional[Path] = None
    ntuple_name: Optional[str] = None
    quiet: bool = False
    log_level: str = "INFO"
    max_batch_size_records: int = DEFAULT_MAX_BATCH_SIZE_RECORDS
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL


# --- Result ---


@dataclass
class ImportResult:
    """
    Outcome of one `TreeImporter.run()` call.

    Attributes:
        ntuple_name (str): The requested target name.
        num_entries (int): Rows committed (0 on failure).
        error (Optional[ImporterError]): The structured failure, if any.
    """

    ntuple_name: str
    num_entries: int = 0
    error: Optional[ImporterError] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ImportErrorKind]:
        return self.error.kind if self.error is not None else None

    @property
    def branch_name(self) -> Optional[str]:
        return self.error.branch_name if self.error is not None else None

    @property
    def target_name(self) -> Optional[str]:
        return self.error.target_name if self.error is not None else None

    def raise_for_error(self):
        """Re-raises the structured failure, if any."""
        if self.error is not None:
            raise self.error


# --- Main Importer Class ---


class TreeImporter:
    """
    Controller class for the tree import workflow.

    Each `run()` walks the states Uninitialized -> SchemaBuilt -> Importing ->
    Committed, or ends in Failed. A failed run leaves the destination artifact
    without any object under the requested name; a successful run makes every
    later run against the same target fail with `target_already_exists`.
    """

    def __init__(self, config: ImporterConfig):
        """
        Args:
            config: The fully resolved configuration object. The importer keeps
                    its own copy; the setters never change the caller's object.
        """
        self.cfg = replace(config)
        self._setup_logging()

        self._state = ImportState.Uninitialized
        self._schema: Optional[TargetSchema] = None

    @classmethod
    def create(
        cls,
        source_path: Union[str, Path],
        tree_name: str,
        dest_path: Optional[Union[str, Path]] = None,
        **kwargs,
    ) -> "TreeImporter":
        """Builds an importer from paths; `kwargs` go to `ImporterConfig`."""
        return cls(
            ImporterConfig(
                source_path=Path(source_path),
                tree_name=tree_name,
                dest_path=Path(dest_path) if dest_path is not None else None,
                **kwargs,
            )
        )

    def _setup_logging(self):
        """Configures the logging subsystem based on the config level."""
        log.basicConfig(
            level=getattr(log, self.cfg.log_level.upper(), log.INFO),
            format="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        self.logger = log.getLogger("TreeImporter")

    # --- Settings ---
    def set_ntuple_name(self, name: str):
        validate_object_name(name, "ntuple")
        self.cfg.ntuple_name = name

    def set_quiet(self, quiet: bool):
        self.cfg.quiet = quiet

    @property
    def ntuple_name(self) -> str:
        return self.cfg.ntuple_name or self.cfg.tree_name

    @property
    def dest_path(self) -> Path:
        return self.cfg.dest_path if self.cfg.dest_path is not None else self.cfg.source_path

    @property
    def state(self) -> ImportState:
        return self._state

    @property
    def schema(self) -> Optional[TargetSchema]:
        """The schema built by the last run, if it got that far."""
        return self._schema

    # --- Execution ---
    def run(self) -> ImportResult:
        """
        Main execution entry point.

        Returns:
            ImportResult: success with the committed row count, or the
            structured failure. Errors that are not import failures (e.g. I/O
            errors) propagate after the state is set to Failed.
        """
        self._state = ImportState.Uninitialized
        self._schema = None
        target = self.ntuple_name

        self.logger.info(
            f"Importing tree '{self.cfg.tree_name}' from {self.cfg.source_path} "
            f"into '{target}' at {self.dest_path}..."
        )

        try:
            num_entries = self._run(target)
        except ImporterError as e:
            self._state = ImportState.Failed
            self.logger.error(f"Import into '{target}' failed [{e.kind.value}]: {e}")
            return ImportResult(ntuple_name=target, error=e)
        except Exception as e:
            self._state = ImportState.Failed
            self.logger.exception(f"Fatal error during import into '{target}': {e}")
            raise

        self._state = ImportState.Committed
        self.logger.info(
            f"Import into '{target}' completed successfully ({num_entries} entries)."
        )
        return ImportResult(ntuple_name=target, num_entries=num_entries)

    def _open_source_artifact(self) -> Artifact:
        try:
            return Artifact(self.cfg.source_path)
        except (FileNotFoundError, NotADirectoryError) as e:
            raise SourceNotFoundError(
                f"Cannot open source artifact: {e}", tree_name=self.cfg.tree_name
            ) from e

    def _open_dest_artifact(self, source_artifact: Artifact) -> Artifact:
        if self.dest_path.resolve() == source_artifact.path.resolve():
            return source_artifact
        return Artifact(self.dest_path, create=True)

    def _remove_dest_artifact(self, dir_existed: bool):
        """Undoes the creation of a destination artifact made by this run."""
        if dir_existed:
            (self.dest_path / Artifact.CATALOG_FILE_NAME).unlink(missing_ok=True)
        else:
            shutil.rmtree(self.dest_path)
        self.logger.info(f"Removed destination artifact {self.dest_path} created by this run.")

    def _run(self, target: str) -> int:
        try:
            validate_object_name(target, "ntuple")
        except ValueError as e:
            raise InvalidTargetNameError(target, str(e)) from e

        source_artifact = self._open_source_artifact()

        with open_tree(source_artifact, self.cfg.tree_name) as tree:
            # Uninitialized -> SchemaBuilt
            self._schema = build_schema(tree)
            self._state = ImportState.SchemaBuilt
            self.logger.info(
                f"Schema built: {len(self._schema.fields)} field(s) from tree '{tree.name}' "
                f"({tree.num_entries} entries)."
            )

            dest_dir_existed = self.dest_path.exists()
            dest_created = not (self.dest_path / Artifact.CATALOG_FILE_NAME).exists()
            dest_artifact = self._open_dest_artifact(source_artifact)
            try:
                # Pre-flight: never touch an existing object
                if dest_artifact.contains(target):
                    raise TargetAlreadyExistsError(target, dest_artifact.path)

                return self._import_entries(tree, self._schema, dest_artifact, target)
            except Exception:
                if dest_created:
                    self._remove_dest_artifact(dest_dir_existed)
                raise

    def _import_entries(
        self,
        tree: LegacyTree,
        schema: TargetSchema,
        dest_artifact: Artifact,
        target: str,
    ) -> int:
        """
        SchemaBuilt -> Importing: the row loop. The writer commits when the
        block exits cleanly and discards the partial store otherwise.
        """
        transcoder = EntryTranscoder(schema)
        writer_config = WriterConfig(max_batch_size_records=self.cfg.max_batch_size_records)

        with StoreWriter(dest_artifact, target, schema, writer_config) as writer:
            self._state = ImportState.Importing
            with ProgressManager(
                target,
                tree.num_entries,
                quiet=self.cfg.quiet,
                update_interval=self.cfg.progress_interval,
            ) as ui:
                for index in range(tree.num_entries):
                    entry = tree.load_entry(index)
                    writer.append(transcoder.transcode(entry, index))
                    ui.advance()

        return writer.num_entries


# --- CLI Entry Point ---


def tree_importer(argv: Optional[List[str]] = None):
    """
    Console script entry point.
    Parses arguments, sets up configuration, and initiates the importer.
    Exits with status 0 on success and 1 on any import failure.
    """
    parser = argparse.ArgumentParser(
        description="Import a legacy tree into a columnar ntuple store."
    )

    # Required Arguments
    parser.add_argument("source", type=Path, help="Path to the source artifact directory")
    parser.add_argument("tree", help="Name of the tree to import")

    # Target Arguments
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Destination artifact directory (default: the source artifact)",
    )
    parser.add_argument(
        "--name", "-n", default=None, help="Target ntuple name (default: the tree name)"
    )

    # Advanced Arguments
    parser.add_argument("--quiet", "-q", action="store_true", help="Hide the progress bar")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging verbosity (Default: INFO)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=DEFAULT_MAX_BATCH_SIZE_RECORDS,
        help=f"Rows per written record batch (Default: {DEFAULT_MAX_BATCH_SIZE_RECORDS})",
    )

    args = parser.parse_args(argv)

    # --- Configuration Construction ---
    config = ImporterConfig(
        source_path=args.source,
        tree_name=args.tree,
        dest_path=args.output,
        ntuple_name=args.name,
        quiet=args.quiet,
        log_level=args.log_level,
        max_batch_size_records=args.batch_size,
    )

    # --- Execution ---
    importer = TreeImporter(config)
    result = importer.run()
    sys.exit(0 if result.success else 1)


if __name__ == "__main__":
    tree_importer()
