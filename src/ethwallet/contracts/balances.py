"""Balance contracts.

Balances are carried as decimal strings so that wei amounts beyond the
64-bit range survive serialization unchanged.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class BalanceErrorKind(str, Enum):
    """Why a balance could not be resolved."""

    ALL_ENDPOINTS_FAILED = "AllEndpointsFailed"
    INVALID_ADDRESS = "InvalidAddress"
    RESOLVER_FAULT = "ResolverFault"


class BalanceResult(BaseModel):
    """Outcome of one balance resolution."""

    raw_balance_wei: str = Field(..., description="Balance in wei as a decimal integer string")
    balance_in_eth: str = Field(..., description="Balance in ETH as a decimal string")
    succeeded_endpoint: Optional[str] = Field(
        None, description="RPC endpoint that answered"
    )
    error_kind: Optional[BalanceErrorKind] = Field(
        None, description="Failure tag, None on success"
    )
    error: Optional[str] = Field(None, description="Error message if failed")

    @property
    def success(self) -> bool:
        return self.error_kind is None

    @property
    def display(self) -> str:
        """Balance formatted for presentation."""
        from ethwallet.services.balance_resolver import format_balance

        return format_balance(self.balance_in_eth)

    @classmethod
    def failure(cls, kind: BalanceErrorKind, message: str) -> "BalanceResult":
        """Build a zero-balance failure result."""
        return cls(
            raw_balance_wei="0",
            balance_in_eth="0.0",
            error_kind=kind,
            error=message,
        )
