"""Typed publish/subscribe dispatch for Core push messages."""

import asyncio
import inspect
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Set, Type, TypeVar, Union

from loguru import logger

from graviton_client.schemas.messages import BaseMessage

M = TypeVar("M", bound=BaseMessage)

MessageHandler = Callable[[M], Union[None, Awaitable[None]]]


class EventEmitter:
    """Dispatch table from message class to registered handlers.

    Handlers are plain callables or coroutine functions. Coroutines are
    scheduled on the running loop and tracked until they finish so their
    failures are logged instead of lost.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[BaseMessage], List[Callable[[Any], Any]]] = defaultdict(list)
        self._pending: Set[asyncio.Task] = set()

    def on(self, message_type: Type[M], handler: MessageHandler[M]) -> Callable[[], None]:
        """Register ``handler`` for ``message_type``; returns a function that unsubscribes it."""
        self._handlers[message_type].append(handler)
        return lambda: self.off(message_type, handler)

    def off(self, message_type: Type[M], handler: MessageHandler[M]) -> None:
        handlers = self._handlers.get(message_type, [])
        if handler in handlers:
            handlers.remove(handler)

    async def once(self, message_type: Type[M]) -> M:
        """Wait for the next message of ``message_type``."""
        future: asyncio.Future = asyncio.get_running_loop().create_future()

        def resolve(message: M) -> None:
            if not future.done():
                future.set_result(message)

        unsubscribe = self.on(message_type, resolve)
        try:
            return await future
        finally:
            unsubscribe()

    def listener_count(self, message_type: Type[BaseMessage]) -> int:
        return len(self._handlers.get(message_type, []))

    def emit(self, message: BaseMessage) -> None:
        """Deliver ``message`` to the handlers registered for its exact class."""
        # Copy so handlers may unsubscribe while being dispatched
        for handler in list(self._handlers.get(type(message), [])):
            try:
                result = handler(message)
            except Exception as e:
                logger.exception(f"Handler for {type(message).__name__} failed: {e}")
                continue
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._pending.add(task)
                task.add_done_callback(self._on_handler_done)

    def _on_handler_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.opt(exception=task.exception()).error("Async message handler failed")

    async def drain(self) -> None:
        """Wait for scheduled coroutine handlers to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
