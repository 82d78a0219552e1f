"""Wallet service composing derivation, storage and balance resolution.

Holds the currently loaded wallet and its last known balance for a
front end. Key material is persisted through WalletStorage only.
"""

import logging
from typing import Optional

from ethwallet.contracts.balances import BalanceErrorKind, BalanceResult
from ethwallet.hdwallet import eth
from ethwallet.hdwallet.base import WalletRecord
from ethwallet.services.balance_resolver import BalanceResolver, get_balance_resolver
from ethwallet.storage import WalletStorage

logger = logging.getLogger(__name__)


def _empty_balance() -> BalanceResult:
    return BalanceResult(raw_balance_wei="0", balance_in_eth="0.0")


class WalletService:
    """Application-facing wallet operations.

    Usage:
        service = WalletService(get_wallet_storage())
        wallet = service.load() or service.create_wallet()
        result = await service.refresh_balance()
    """

    def __init__(
        self,
        storage: WalletStorage,
        resolver: Optional[BalanceResolver] = None,
    ):
        self.storage = storage
        self.resolver = resolver or get_balance_resolver()
        self.wallet: Optional[WalletRecord] = None
        self.balance: BalanceResult = _empty_balance()

    def load(self) -> Optional[WalletRecord]:
        """Load the persisted wallet, if any."""
        self.wallet = self.storage.load_wallet()
        return self.wallet

    def create_wallet(self, words: int = 12) -> WalletRecord:
        """Generate, persist and select a new wallet."""
        return self._adopt(eth.generate_wallet(words))

    def import_wallet(self, phrase: str, passphrase: str = "") -> WalletRecord:
        """Restore, persist and select a wallet from its mnemonic.

        Raises:
            InvalidMnemonicError: If the phrase does not validate
        """
        return self._adopt(eth.import_wallet(phrase, passphrase))

    def _adopt(self, wallet: WalletRecord) -> WalletRecord:
        self.storage.save_wallet(wallet)
        self.storage.set_onboarding_completed()
        self.wallet = wallet
        self.balance = _empty_balance()
        logger.info(f"Wallet {wallet.address} saved")
        return wallet

    def clear_wallet(self) -> None:
        """Forget the wallet locally and in storage."""
        self.storage.clear_wallet()
        self.wallet = None
        self.balance = _empty_balance()

    async def refresh_balance(self) -> Optional[BalanceResult]:
        """Fetch the loaded wallet's balance; None when no wallet is loaded.

        A resolver fault is reported as a ResolverFault result that keeps
        the last known balance figures.
        """
        if self.wallet is None:
            return None

        try:
            result = await self.resolver.get_balance(self.wallet.address)
        except Exception as e:
            logger.error(f"Balance refresh failed for {self.wallet.address}: {e}")
            result = self.balance.model_copy(
                update={
                    "error_kind": BalanceErrorKind.RESOLVER_FAULT,
                    "error": f"Failed to fetch balance: {e}",
                }
            )

        self.balance = result
        return result
