"""Source parsing collaborators used by the graph builder and doc parser."""

from .dependencies import DependencyDescriptor, analyze_dependencies
from .tree_sitter import ParsedSource, SourceParser

__all__ = [
    "DependencyDescriptor",
    "ParsedSource",
    "SourceParser",
    "analyze_dependencies",
]
