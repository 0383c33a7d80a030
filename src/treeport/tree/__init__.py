from .protocols import EntryView as EntryView, SourceContainer as SourceContainer
from .legacy_tree import LegacyTree as LegacyTree, TreeEntry as TreeEntry
from .tree_file import open_tree as open_tree, write_tree as write_tree
