"""Pydantic schemas for graviton-client."""

from graviton_client.schemas.core import (
    CoreResponse,
    DirItemInfo,
    ExtensionInfo,
    FileFormat,
    FileFormatText,
    FileInfo,
    StateData,
)
from graviton_client.schemas.messages import (
    BaseMessage,
    Connected,
    CoreMessage,
    HideStatusBarItem,
    ListenToState,
    ShowPopup,
    ShowStatusBarItem,
    StateUpdated,
    parse_message,
)
from graviton_client.schemas.tree import DisplayRow, PathTree, TreeNode

__all__ = [
    "BaseMessage",
    "Connected",
    "CoreMessage",
    "CoreResponse",
    "DirItemInfo",
    "DisplayRow",
    "ExtensionInfo",
    "FileFormat",
    "FileFormatText",
    "FileInfo",
    "HideStatusBarItem",
    "ListenToState",
    "PathTree",
    "ShowPopup",
    "ShowStatusBarItem",
    "StateData",
    "StateUpdated",
    "TreeNode",
    "parse_message",
]
