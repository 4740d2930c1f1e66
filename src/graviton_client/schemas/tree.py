"""Schemas for the explorer's path tree."""

from typing import Dict

from pydantic import BaseModel, Field


class TreeNode(BaseModel):
    """A filesystem entry already known to the client.

    ``children`` maps child paths to nodes in the order the Core listed them.
    An empty mapping means either "not loaded yet" or "no entries";
    ``loaded`` tells the two apart once a listing has been applied.
    """

    name: str
    is_file: bool = False
    children: Dict[str, "TreeNode"] = Field(default_factory=dict)
    loaded: bool = False

    @property
    def has_children(self) -> bool:
        return bool(self.children)


class PathTree(BaseModel):
    """The partially loaded tree rooted at the explorer's route.

    The root node is synthetic: its name is the route and it is never a file.
    """

    route: str
    root: TreeNode

    @classmethod
    def for_route(cls, route: str) -> "PathTree":
        return cls(route=route, root=TreeNode(name=route, is_file=False))


class DisplayRow(BaseModel):
    """One row of the flattened tree, ready for rendering."""

    path: str
    name: str
    is_file: bool
    depth: int


# Support for recursive model
TreeNode.model_rebuild()
