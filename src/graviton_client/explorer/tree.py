"""Mutation and query operations on the explorer's path tree.

Every operation is keyed by path string and walks down from the root: at
each level it descends into children whose key is a prefix of the target
path until it finds the exact key. Paths are unique and hierarchical, so at
most one sibling both prefixes and contains the target; the others are
visited and yield nothing.

Mutating an absent path is a silent no-op. A listing can land after the
tree was reset or the parent collapsed, and that is not an error.
"""

from typing import Dict, Iterable, Iterator, Optional

from graviton_client.schemas.core import DirItemInfo
from graviton_client.schemas.tree import PathTree, TreeNode

PATH_SEPARATORS = ("/", "\\")


def new_tree(route: str) -> PathTree:
    """Create a tree holding only the synthetic root for ``route``."""
    return PathTree.for_route(route)


def _find_in(node: TreeNode, path: str) -> Optional[TreeNode]:
    for child_path, child in node.children.items():
        if child_path == path:
            return child
        if path.startswith(child_path):
            found = _find_in(child, path)
            if found is not None:
                return found
    return None


def find_node(tree: PathTree, path: str) -> Optional[TreeNode]:
    """Return the node stored under ``path``, or None when it is not in the tree."""
    if path == tree.route:
        return tree.root
    return _find_in(tree.root, path)


def _ancestor_keys(path: str) -> Iterator[str]:
    """Yield every key ``path`` would be nested under, with and without the trailing separator."""
    for index, char in enumerate(path):
        if char in PATH_SEPARATORS:
            yield path[:index]
            if index + 1 < len(path):
                yield path[: index + 1]


def direct_entries(children: Dict[str, TreeNode]) -> Dict[str, TreeNode]:
    """Keep only the entries that are not nested below another entry of the same level."""
    return {
        path: node
        for path, node in children.items()
        if not any(ancestor in children for ancestor in _ancestor_keys(path))
    }


def set_children_at(tree: PathTree, path: str, children: Dict[str, TreeNode]) -> PathTree:
    """Replace the children of the node at ``path`` in place and mark it loaded.

    Entries nested under another entry of ``children`` are dropped; a
    populate stores a single level and deeper levels arrive when their own
    directory is expanded.
    """
    node = find_node(tree, path)
    if node is not None:
        node.children = direct_entries(children)
        node.loaded = True
    return tree


def clear_children_at(tree: PathTree, path: str) -> PathTree:
    """Collapse the node at ``path``: forget its children but keep the node."""
    node = find_node(tree, path)
    if node is not None:
        node.children = {}
        node.loaded = False
    return tree


def is_expanded_at(tree: PathTree, path: str) -> bool:
    """True iff the node at ``path`` currently has children.

    A loaded directory with zero entries reads as not expanded, same as a
    collapsed one. Use is_loaded_at to tell them apart.
    """
    node = find_node(tree, path)
    return node is not None and node.has_children


def is_loaded_at(tree: PathTree, path: str) -> bool:
    """True iff a listing was applied to ``path`` since it was last collapsed."""
    node = find_node(tree, path)
    return node is not None and node.loaded


def children_from_listing(items: Iterable[DirItemInfo]) -> Dict[str, TreeNode]:
    """Convert a directory listing into a children mapping, keeping listing order."""
    return {item.path: TreeNode(name=item.name, is_file=item.is_file) for item in items}
