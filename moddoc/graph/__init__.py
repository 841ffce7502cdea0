"""Module graph construction: loaders, resolvers and the graph builder."""

from .builder import GraphBuilder, create_graph
from .loader import DocLoader, LoadResponse, Loader, StubLoader
from .models import Dependency, ModuleGraph, ModuleRecord
from .resolver import DocResolver, Resolver

__all__ = [
    "Dependency",
    "DocLoader",
    "DocResolver",
    "GraphBuilder",
    "LoadResponse",
    "Loader",
    "ModuleGraph",
    "ModuleRecord",
    "Resolver",
    "StubLoader",
    "create_graph",
]
