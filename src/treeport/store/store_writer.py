"""
Store Writing Module.

This module handles the buffered writing of rows into a columnar store.
It manages the lifecycle of the store inside its artifact (Create -> Write ->
Commit) and guarantees that nothing becomes reachable under the store name
unless the commit completes.
"""

import logging as log
import os
from typing import Any, Dict, List, Mapping, Optional, Type

import pyarrow as pa

from treeport.enum import ObjectKind, StoreStatus
from treeport.errors import TargetAlreadyExistsError
from treeport.helpers import validate_object_name
from treeport.models import TargetSchema
from .artifact import Artifact
from .catalog import CatalogEntry
from .config import WriterConfig


class StoreWriter:
    """
    Writes one store of a fixed `TargetSchema` into an artifact.

    **Key Responsibilities:**
    1.  **Pre-flight:** Refuses to start if the artifact already holds an object
        with the requested name.
    2.  **Buffering:** Accumulates rows column-wise and flushes an Arrow record
        batch every `WriterConfig.max_batch_size_records` rows into a hidden
        partial file.
    3.  **Commit:** Renames the partial file into place and registers the store
        in the artifact catalog, exactly once. On any error the partial file is
        deleted and the catalog is left untouched.

    Must be used as a context manager:

        with StoreWriter(artifact, "ntuple", schema) as writer:
            writer.append({"x": 1})
    """

    _status: StoreStatus = StoreStatus.Null
    _entered: bool = False

    def __init__(
        self,
        artifact: Artifact,
        name: str,
        schema: TargetSchema,
        config: Optional[WriterConfig] = None,
    ):
        validate_object_name(name, "store")
        self._artifact = artifact
        self._name = name
        self._schema = schema
        self._config = config or WriterConfig()
        self._pa_schema = schema.to_pyarrow()

        self._columns: Dict[str, List[Any]] = {n: [] for n in schema.field_names}
        self._buffered_records = 0
        self._num_entries = 0

        self._sink: Optional[pa.NativeFile] = None
        self._writer: Optional[pa.ipc.RecordBatchFileWriter] = None

    # --- Context Manager ---
    def __enter__(self) -> "StoreWriter":
        """
        Opens the partial data file.

        Raises:
            TargetAlreadyExistsError: If the artifact already holds this name.
        """
        if self._artifact.contains(self._name):
            raise TargetAlreadyExistsError(self._name, self._artifact.path)

        partial_path = self._artifact.partial_path(self._name)
        self._sink = pa.OSFile(str(partial_path), "wb")
        try:
            self._writer = pa.ipc.new_file(self._sink, self._pa_schema)
        except Exception:
            self._discard()
            raise

        self._entered = True
        self._status = StoreStatus.Pending
        log.debug(f"Store '{self._name}' opened at {partial_path}")
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> bool:
        """
        Commits the store on a clean exit, discards it otherwise.
        """
        error_in_block = exc_type is not None

        try:
            if not error_in_block:
                if self._status == StoreStatus.Pending:
                    self.commit()
            else:
                log.error(
                    f"Exception in StoreWriter '{self._name}' block. Inner err: {exc_val}"
                )
                self._abort()

        except Exception as e:
            log.exception(f"Exception during __exit__ for store '{self._name}': {e}")
            if not error_in_block:
                raise e  # Re-raise the cleanup error if it's the only one

        return False

    def __del__(self):
        """Destructor check to warn if the writer was left pending."""
        name = getattr(self, "_name", "__not_initialized__")
        status = getattr(self, "_status", StoreStatus.Null)

        if status == StoreStatus.Pending:
            log.warning(
                f"StoreWriter '{name}' destroyed without calling commit(). "
                "The partial file was not removed."
            )

    def _check_entered(self):
        """Ensures methods are only called inside a `with` block."""
        if not self._entered:
            raise RuntimeError("StoreWriter must be used within a 'with' block.")

    # --- Public API ---
    @property
    def name(self) -> str:
        return self._name

    @property
    def schema(self) -> TargetSchema:
        return self._schema

    @property
    def num_entries(self) -> int:
        """Rows appended so far."""
        return self._num_entries

    def status(self) -> StoreStatus:
        """Returns the current status of the store."""
        return self._status

    def append(self, row: Mapping[str, Any]):
        """
        Appends one row holding exactly one value per schema field.

        Raises:
            RuntimeError: If the store is not accepting rows.
            ValueError: If the row keys do not match the schema fields.
        """
        self._check_entered()
        if self._status != StoreStatus.Pending:
            raise RuntimeError(
                f"StoreWriter '{self._name}' is not accepting rows (status: {self._status.value})."
            )
        if len(row) != len(self._columns) or any(k not in row for k in self._columns):
            raise ValueError(
                f"Row fields {sorted(row.keys())} do not match the fields of store "
                f"'{self._name}': {list(self._columns.keys())}"
            )

        for field_name, column in self._columns.items():
            column.append(row[field_name])
        self._buffered_records += 1
        self._num_entries += 1

        if self._buffered_records >= self._config.max_batch_size_records:
            self._write_current_batch()

    def commit(self):
        """
        Flushes the buffered rows and makes the store reachable by name.

        Raises:
            RuntimeError: If the store was already committed or aborted.
            TargetAlreadyExistsError: If the name got taken meanwhile.
        """
        self._check_entered()
        if self._status == StoreStatus.Committed:
            raise RuntimeError(f"StoreWriter '{self._name}' already committed.")
        if self._status != StoreStatus.Pending:
            raise RuntimeError(
                f"Cannot commit StoreWriter '{self._name}' (status: {self._status.value})."
            )

        data_path = self._artifact.data_path(self._name)
        try:
            self._write_current_batch()
            self._close_file()
            if self._artifact.contains(self._name):
                raise TargetAlreadyExistsError(self._name, self._artifact.path)
            os.replace(self._artifact.partial_path(self._name), data_path)
            try:
                self._artifact.register(
                    CatalogEntry(
                        name=self._name,
                        kind=ObjectKind.NTuple,
                        path=data_path.name,
                        num_entries=self._num_entries,
                    )
                )
            except Exception:
                data_path.unlink(missing_ok=True)
                raise
        except Exception:
            self._discard()
            self._status = StoreStatus.Error
            raise

        self._status = StoreStatus.Committed
        log.info(f"Store '{self._name}' committed with {self._num_entries} entries.")

    # --- Internals ---
    def _write_current_batch(self):
        """Flushes the column buffers as one record batch."""
        if self._buffered_records == 0:
            return
        assert self._writer is not None

        # A store without fields only counts its rows
        if self._columns:
            batch = pa.RecordBatch.from_pydict(self._columns, schema=self._pa_schema)
            self._writer.write_batch(batch)

        self._columns = {n: [] for n in self._columns}
        self._buffered_records = 0

    def _close_file(self):
        try:
            if self._writer is not None:
                self._writer.close()
        finally:
            self._writer = None
            if self._sink is not None:
                self._sink.close()
                self._sink = None

    def _discard(self):
        """Closes and deletes the partial file, whatever its state."""
        try:
            self._close_file()
        except Exception as e:
            log.warning(f"Error closing partial file of store '{self._name}': {e}")
        self._artifact.partial_path(self._name).unlink(missing_ok=True)

    def _abort(self):
        """Internal: discards the pending store."""
        if self._status == StoreStatus.Pending:
            self._discard()
            self._status = StoreStatus.Error
            log.info(f"Store '{self._name}' aborted; nothing was committed.")
