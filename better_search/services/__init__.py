from .context_tree import ContextTreeNode, SectionWithMatch, build_context_tree
from .context_tree_dedupe import dedupe_context_tree
from .highlights import dedupe, extract_highlight, highlights_for
from .match_classifier import MatchKind, Partition, classify, partition_matches
from .metadata_cache import Heading, ListItem, Loc, Position, Section, StructureInfo, structure_from_cache
from .position import offsets_to_position
from .section import section_containing

__all__ = [
    "ContextTreeNode",
    "Heading",
    "ListItem",
    "Loc",
    "MatchKind",
    "Partition",
    "Position",
    "Section",
    "SectionWithMatch",
    "StructureInfo",
    "build_context_tree",
    "classify",
    "dedupe",
    "dedupe_context_tree",
    "extract_highlight",
    "highlights_for",
    "offsets_to_position",
    "partition_matches",
    "section_containing",
    "structure_from_cache",
]
