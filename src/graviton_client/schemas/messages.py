"""Schemas for messages pushed by the Core.

Inbound frames are JSON envelopes tagged by ``msg_type``:

    {"state_id": 1, "trigger": "core", "msg_type": "ShowPopup", "popup_id": "p1", ...}

``parse_message`` turns an envelope into one member of the closed
``CoreMessage`` union. ``Connected`` is never sent by the Core; clients
synthesize it once their channel is ready.
"""

from typing import Annotated, Any, Literal, Optional, Union

from loguru import logger
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from graviton_client.schemas.core import StateData


class BaseMessage(BaseModel):
    """Fields shared by every push envelope."""

    state_id: int = 0
    trigger: str = "core"


class ShowPopup(BaseMessage):
    msg_type: Literal["ShowPopup"] = "ShowPopup"
    popup_id: str
    title: str
    content: str


class StateUpdated(BaseMessage):
    """Session state changed in the Core; answer to the listen signal."""

    msg_type: Literal["ListenToState", "StateUpdated"] = "StateUpdated"
    state_data: StateData


class ShowStatusBarItem(BaseMessage):
    msg_type: Literal["ShowStatusBarItem"] = "ShowStatusBarItem"
    statusbar_item_id: str
    label: str


class HideStatusBarItem(BaseMessage):
    msg_type: Literal["HideStatusBarItem"] = "HideStatusBarItem"
    statusbar_item_id: str


class Connected(BaseMessage):
    """Local event fired exactly once when a client channel becomes ready."""

    msg_type: Literal["connected"] = "connected"
    trigger: str = "client"


class ListenToState(BaseModel):
    """Outbound signal asking the Core to push state updates for a session."""

    trigger: str = "client"
    msg_type: Literal["ListenToState"] = "ListenToState"
    state_id: int


CoreMessage = Annotated[
    Union[ShowPopup, StateUpdated, ShowStatusBarItem, HideStatusBarItem],
    Field(discriminator="msg_type"),
]

_core_message_adapter: TypeAdapter[CoreMessage] = TypeAdapter(CoreMessage)


def parse_message(envelope: dict[str, Any]) -> Optional[BaseMessage]:
    """Parse a push envelope, returning None for unknown or malformed messages."""
    try:
        return _core_message_adapter.validate_python(envelope)
    except ValidationError as e:
        logger.warning(f"Dropping push message {envelope.get('msg_type')!r}: {e}")
        return None
