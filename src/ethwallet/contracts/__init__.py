"""Data contracts crossing the wallet core boundary."""

from ethwallet.contracts.balances import BalanceErrorKind, BalanceResult

__all__ = ["BalanceErrorKind", "BalanceResult"]
