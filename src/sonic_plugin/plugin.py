"""Plugin object exposing the Sonic actions and providers to the host runtime."""

from __future__ import annotations

from dataclasses import dataclass, field

from sonic_plugin.actions.balance import GetBalanceAction
from sonic_plugin.actions.base import Action
from sonic_plugin.actions.transfer import TransferTokenAction
from sonic_plugin.config import SonicSettings
from sonic_plugin.providers.wallet_status import SonicWalletStatusProvider
from sonic_plugin.runtime import IntentExtractor


@dataclass
class Plugin:
    name: str
    description: str
    actions: list[Action] = field(default_factory=list)
    providers: list[SonicWalletStatusProvider] = field(default_factory=list)

    def find_action(self, name: str) -> Action | None:
        """Return the action whose name or simile matches *name*."""
        for action in self.actions:
            if action.matches(name):
                return action
        return None

    def list_action_names(self) -> list[str]:
        return [action.name for action in self.actions]


def create_sonic_plugin(
    settings: SonicSettings,
    extractor: IntentExtractor,
    *,
    wait_for_confirmation: bool = False,
    detailed_balance: bool = True,
) -> Plugin:
    """Build the plugin with one transfer action, one balance action and the status provider."""
    return Plugin(
        name="sonic",
        description="Sonic blockchain plugin: native S balances and transfers",
        actions=[
            TransferTokenAction(
                settings, extractor, wait_for_confirmation=wait_for_confirmation
            ),
            GetBalanceAction(settings, extractor, detailed=detailed_balance),
        ],
        providers=[SonicWalletStatusProvider(settings)],
    )
