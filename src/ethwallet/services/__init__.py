"""Wallet services."""

from ethwallet.services.balance_resolver import (
    BalanceResolver,
    format_balance,
    get_balance_resolver,
    wei_to_eth,
)
from ethwallet.services.wallet_service import WalletService

__all__ = [
    "BalanceResolver",
    "WalletService",
    "format_balance",
    "get_balance_resolver",
    "wei_to_eth",
]
