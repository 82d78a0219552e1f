"""HD wallet data types and errors.

A wallet is derived from a BIP39 mnemonic along a single BIP44 path:
m/44'/60'/0'/0/0 (Ethereum, account 0, external chain, first index).

Security: WalletRecord carries the private key. The caller owns it once
returned and is responsible for storing it securely.
"""

from dataclasses import asdict, dataclass

DERIVATION_PATH = "m/44'/60'/0'/0/0"

# Word count -> entropy bits
MNEMONIC_STRENGTHS = {12: 128, 15: 160, 18: 192, 21: 224, 24: 256}


class WalletError(Exception):
    """Base class for wallet derivation errors."""

    pass


class InvalidMnemonicError(WalletError, ValueError):
    """Raised when a phrase fails word-list or checksum validation."""

    pass


class DerivationError(WalletError):
    """Raised when a valid mnemonic cannot be turned into a key."""

    pass


@dataclass(frozen=True)
class WalletRecord:
    """Key material for a single wallet."""

    address: str  # EIP-55 checksummed
    mnemonic: str  # the phrase as supplied
    private_key: str  # 0x-prefixed hex

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "WalletRecord":
        return cls(
            address=data["address"],
            mnemonic=data["mnemonic"],
            private_key=data["private_key"],
        )

    def __repr__(self) -> str:
        # Keep secrets out of logs and tracebacks
        return f"WalletRecord(address={self.address!r})"
