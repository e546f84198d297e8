"""Pydantic models for requests and results flowing through the plugin."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TransferRequest(BaseModel):
    """A validated native transfer request."""

    model_config = ConfigDict(frozen=True)

    recipient_address: str
    amount: str  # decimal, native units
    token_address: Optional[str] = None
    extra_data: Optional[bytes] = None


class BalanceQuery(BaseModel):
    """A validated balance lookup."""

    model_config = ConfigDict(frozen=True)

    address: str


class TransferReceipt(BaseModel):
    """Outcome of a successful on-chain submission."""

    model_config = ConfigDict(frozen=True)

    transaction_hash: str
    from_address: str
    to_address: str
    amount_wei: int = Field(ge=0)
    explorer_url: str
    confirmed: bool = False


class BalanceResult(BaseModel):
    """A formatted balance for one address."""

    model_config = ConfigDict(frozen=True)

    address: str
    balance: str
    network: str
    symbol: str = "S"
