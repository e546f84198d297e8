"""Interfaces the plugin consumes from the host agent runtime.

The host owns conversation state and the language model; the plugin only
needs the handful of calls below. ``State`` and ``Memory`` are opaque to the
plugin and are passed back to the host unchanged.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional, Protocol, Union

State = Any
Memory = Any
Content = dict[str, Any]
HandlerCallback = Callable[[Content], Union[Awaitable[Any], Any]]

TRANSFER_TEMPLATE_ID = "sonic.transfer"
BALANCE_TEMPLATE_ID = "sonic.balance"

logger = logging.getLogger("sonic_plugin.runtime")


class AgentRuntime(Protocol):
    """The subset of the host runtime used by actions and providers."""

    def get_setting(self, key: str) -> Optional[str]: ...

    async def compose_state(self, message: Memory) -> State: ...

    async def update_recent_message_state(self, state: State) -> State: ...


class IntentExtractor(Protocol):
    """Turns conversation state into raw request fields.

    Implementations are backed by a generative model and return best-effort
    data: fields may be missing, ``None``, or unresolved template
    placeholders.
    """

    async def extract(self, state: State, template_id: str) -> Mapping[str, Any]: ...


async def prepare_state(runtime: AgentRuntime, message: Memory, state: State | None) -> State:
    """Compose a fresh state, or refresh the recent messages of an existing one."""
    if state is None:
        return await runtime.compose_state(message)
    return await runtime.update_recent_message_state(state)


async def emit(callback: HandlerCallback | None, text: str, content: Content | None = None) -> None:
    """Deliver a response to the host, awaiting the callback if it is async.

    A failing callback is logged and never propagates into the handler.
    """
    if callback is None:
        return
    payload: Content = {"text": text}
    if content is not None:
        payload["content"] = content
    try:
        result = callback(payload)
        if inspect.isawaitable(result):
            await result
    except Exception as e:
        logger.error(f"Response callback failed: {e}")
