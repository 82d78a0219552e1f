"""HD wallet module for deterministic key derivation."""

from ethwallet.hdwallet.base import (
    DERIVATION_PATH,
    DerivationError,
    InvalidMnemonicError,
    WalletError,
    WalletRecord,
)
from ethwallet.hdwallet.eth import (
    generate_mnemonic,
    generate_wallet,
    get_derivation_path,
    import_wallet,
    is_valid_address,
    to_checksum_address,
    validate_mnemonic,
)

__all__ = [
    "DERIVATION_PATH",
    "DerivationError",
    "InvalidMnemonicError",
    "WalletError",
    "WalletRecord",
    "generate_mnemonic",
    "generate_wallet",
    "get_derivation_path",
    "import_wallet",
    "is_valid_address",
    "to_checksum_address",
    "validate_mnemonic",
]
