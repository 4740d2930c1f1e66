"""Path-tree model and projection for the filesystem explorer."""

from graviton_client.explorer.projection import project_tree
from graviton_client.explorer.tree import (
    children_from_listing,
    clear_children_at,
    find_node,
    is_expanded_at,
    is_loaded_at,
    new_tree,
    set_children_at,
)

__all__ = [
    "children_from_listing",
    "clear_children_at",
    "find_node",
    "is_expanded_at",
    "is_loaded_at",
    "new_tree",
    "project_tree",
    "set_children_at",
]
