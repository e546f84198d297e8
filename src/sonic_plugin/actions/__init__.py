"""Actions exposed to the host runtime."""

from sonic_plugin.actions.balance import GetBalanceAction
from sonic_plugin.actions.base import Action
from sonic_plugin.actions.transfer import TransferTokenAction

__all__ = ["Action", "GetBalanceAction", "TransferTokenAction"]
