"""Explorer service: lazy loading of the project tree through the Core."""

from typing import Callable, List, Optional

from loguru import logger

from graviton_client.clients.base import CoreClient
from graviton_client.exceptions import DirectoryListingError
from graviton_client.explorer.projection import project_tree
from graviton_client.explorer.tree import (
    children_from_listing,
    clear_children_at,
    is_expanded_at,
    new_tree,
    set_children_at,
)
from graviton_client.schemas.tree import DisplayRow, PathTree

SelectedCallback = Callable[[DisplayRow], None]


class ExplorerService:
    """Owns the path tree of one explorer and turns expand/collapse intents into Core calls.

    The tree is mutated in place and then republished as a new shallow copy,
    so ``tree`` identity changes on every mutation. Only this service
    mutates it.

    Concurrent expands of the same path are not deduplicated: both listings
    are requested and the last response to land wins. A listing landing after
    a reset or collapse is applied to the current tree, where an absent path
    makes it a no-op.
    """

    def __init__(
        self,
        client: CoreClient,
        route: str,
        filesystem_name: str = "local",
        on_selected: Optional[SelectedCallback] = None,
    ):
        """Initialize the explorer service.

        Args:
            client: Core client used for directory listings
            route: Path the explorer opens in; becomes the synthetic root
            filesystem_name: Name of the filesystem installed in the Core
            on_selected: Called with every row the user clicks
        """
        self.client = client
        self.filesystem_name = filesystem_name
        self.on_selected = on_selected
        self._tree = new_tree(route)

    @property
    def route(self) -> str:
        return self._tree.route

    @property
    def tree(self) -> PathTree:
        return self._tree

    @property
    def rows(self) -> List[DisplayRow]:
        """Flattened rows of the current tree, recomputed on every access."""
        return project_tree(self._tree)

    def _publish(self, tree: PathTree) -> None:
        self._tree = tree.model_copy()

    def reset(self, route: str) -> None:
        """Discard the whole tree and start over at ``route``."""
        logger.debug(f"Explorer reset to {route}")
        self._tree = new_tree(route)

    async def load_root(self) -> List[DisplayRow]:
        """List the route itself and populate the root."""
        await self.expand(self.route)
        return self.rows

    async def expand(self, path: str) -> None:
        """Fetch the children of ``path`` and store them in the tree.

        Raises:
            DirectoryListingError: If the Core answered with an Err; the tree is left untouched
        """
        response = await self.client.list_dir_by_path(path, self.filesystem_name)
        if not response.is_ok:
            logger.warning(f"Listing {path} on {self.filesystem_name} failed: {response.err!r}")
            raise DirectoryListingError(path, response.err)

        children = children_from_listing(response.ok or [])
        self._publish(set_children_at(self._tree, path, children))

    def collapse(self, path: str) -> None:
        """Forget the children of ``path``; the next expand fetches them again."""
        self._publish(clear_children_at(self._tree, path))

    def is_expanded(self, path: str) -> bool:
        return is_expanded_at(self._tree, path)

    async def toggle(self, path: str) -> None:
        """Collapse ``path`` when expanded, expand it otherwise."""
        if is_expanded_at(self._tree, path):
            self.collapse(path)
        else:
            await self.expand(path)

    async def select(self, row: DisplayRow) -> None:
        """Handle a click on ``row``: report it, then toggle it when it is a directory."""
        if self.on_selected is not None:
            self.on_selected(row)
        if not row.is_file:
            await self.toggle(row.path)
