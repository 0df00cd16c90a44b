from .compositor import CellCompositor, compose_pages
from .merges import MergeIndex
from .overlay import OverlayStore
from .scope import format_scope, parse_scope, resolve_targets

__all__ = [
    "CellCompositor",
    "MergeIndex",
    "OverlayStore",
    "compose_pages",
    "format_scope",
    "parse_scope",
    "resolve_targets",
]
