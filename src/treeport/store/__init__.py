from .artifact import Artifact as Artifact
from .catalog import Catalog as Catalog, CatalogEntry as CatalogEntry
from .config import WriterConfig as WriterConfig
from .store_writer import StoreWriter as StoreWriter
from .store_reader import StoreReader as StoreReader
