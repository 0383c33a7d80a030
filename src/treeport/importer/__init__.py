from .type_mapper import map_branch as map_branch
from .schema_builder import build_schema as build_schema
from .entry_transcoder import (
    EntryTranscoder as EntryTranscoder,
    decode_c_string as decode_c_string,
)
from .progress import ProgressManager as ProgressManager
from .importer import (
    TreeImporter as TreeImporter,
    ImporterConfig as ImporterConfig,
    ImportResult as ImportResult,
)
