"""
Configuration Module.

This module defines the configuration structures used to control the behavior
of the store writing process.
"""

from dataclasses import dataclass

DEFAULT_MAX_BATCH_SIZE_RECORDS = 5_000


@dataclass
class WriterConfig:
    """
    Configuration settings for store writers.

    Attributes:
        max_batch_size_records (int): The threshold in row count before a record batch is flushed to disk.
    """

    max_batch_size_records: int = DEFAULT_MAX_BATCH_SIZE_RECORDS

    def __post_init__(self):
        if self.max_batch_size_records < 1:
            raise ValueError("'max_batch_size_records' must be at least 1.")
