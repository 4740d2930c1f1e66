"""Flatten the path tree into display rows."""

from typing import List

from graviton_client.schemas.tree import DisplayRow, PathTree, TreeNode


def _project(rows: List[DisplayRow], node: TreeNode, depth: int) -> List[DisplayRow]:
    for path, child in node.children.items():
        rows.append(DisplayRow(path=path, name=child.name, is_file=child.is_file, depth=depth))
        _project(rows, child, depth + 1)
    return rows


def project_tree(tree: PathTree) -> List[DisplayRow]:
    """Return the rows of ``tree`` in depth-first pre-order.

    The synthetic root is not emitted; its direct children sit at depth 0 and
    an expanded directory's entries follow it contiguously at depth + 1.
    Entries keep the order the Core listed them in.
    """
    return _project([], tree.root, 0)
