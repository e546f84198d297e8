"""Base class shared by the plugin's actions."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar

from sonic_plugin.config import SonicSettings, WalletConfig
from sonic_plugin.errors import SonicPluginError
from sonic_plugin.runtime import (
    AgentRuntime,
    HandlerCallback,
    IntentExtractor,
    Memory,
    State,
    emit,
)
from sonic_plugin.wallet.manager import SonicWalletManager

logger = logging.getLogger("sonic_plugin.actions")

WalletFactory = Callable[[WalletConfig], SonicWalletManager]


class Action(ABC):
    """A named unit the host runtime can match against user intent.

    Subclasses declare ``name``, ``description``, ``similes`` (aliases used
    for intent matching) and ``examples``, and implement :meth:`validate` and
    :meth:`handler`. Handlers never raise: failures are reported through the
    callback and a ``False`` return value.
    """

    name: ClassVar[str]
    description: ClassVar[str]
    similes: ClassVar[tuple[str, ...]] = ()
    examples: ClassVar[list[list[dict[str, Any]]]] = []

    def __init__(
        self,
        settings: SonicSettings,
        extractor: IntentExtractor,
        wallet_factory: WalletFactory | None = None,
    ) -> None:
        self.settings = settings
        self.extractor = extractor
        self._wallet_factory = wallet_factory or SonicWalletManager

    def matches(self, name: str) -> bool:
        """Check *name* against the action name and its similes."""
        wanted = name.strip().upper()
        return wanted == self.name or wanted in self.similes

    def build_wallet(self) -> SonicWalletManager:
        """Construct a fresh wallet handle for this invocation."""
        return self._wallet_factory(self.settings.wallet_config())

    @abstractmethod
    async def validate(self, runtime: AgentRuntime, message: Memory) -> bool: ...

    @abstractmethod
    async def handler(
        self,
        runtime: AgentRuntime,
        message: Memory,
        state: State | None = None,
        options: dict[str, Any] | None = None,
        callback: HandlerCallback | None = None,
    ) -> bool: ...

    async def _fail(
        self,
        callback: HandlerCallback | None,
        text: str,
        error: SonicPluginError | str,
    ) -> bool:
        """Report a failure through the callback and return ``False``."""
        marker = getattr(error, "reason", None) or str(error)
        await emit(callback, text, {"error": marker})
        return False
