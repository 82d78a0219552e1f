"""ETH HD wallet derivation using BIP39 + BIP44.

Derivation path: m/44'/60'/0'/0/0
Address format: 0x... (EIP-55 checksum encoded)

Every function here is pure apart from the entropy draw in
generate_mnemonic(); nothing is cached between calls.
"""

import logging
import secrets

from bip_utils import (
    Bip32Secp256k1,
    Bip39Languages,
    Bip39MnemonicGenerator,
    Bip39MnemonicValidator,
    Bip39SeedGenerator,
    EthAddrEncoder,
)
from eth_utils import is_address
from eth_utils import to_checksum_address as _eth_checksum_address

from ethwallet.hdwallet.base import (
    DERIVATION_PATH,
    MNEMONIC_STRENGTHS,
    DerivationError,
    InvalidMnemonicError,
    WalletRecord,
)

logger = logging.getLogger(__name__)


def normalize_mnemonic(phrase: str) -> str:
    """Lowercase a phrase and collapse its whitespace to single spaces."""
    return " ".join(phrase.lower().split())


def generate_mnemonic(words: int = 12) -> str:
    """Generate a new BIP39 English mnemonic.

    Entropy comes from the ``secrets`` module (OS CSPRNG).

    Args:
        words: Phrase length, 12 (128-bit) or 24 (256-bit)

    Returns:
        Space-separated mnemonic phrase
    """
    if words not in (12, 24):
        raise ValueError(f"Unsupported mnemonic length: {words} (expected 12 or 24)")

    entropy = secrets.token_bytes(MNEMONIC_STRENGTHS[words] // 8)
    mnemonic = Bip39MnemonicGenerator(Bip39Languages.ENGLISH).FromEntropy(entropy)
    return mnemonic.ToStr()


def validate_mnemonic(phrase: str) -> bool:
    """Check word count, word-list membership and checksum.

    Never raises; malformed input simply returns False.
    """
    if not isinstance(phrase, str):
        return False

    normalized = normalize_mnemonic(phrase)
    if len(normalized.split()) not in MNEMONIC_STRENGTHS:
        return False

    try:
        return Bip39MnemonicValidator(Bip39Languages.ENGLISH).IsValid(normalized)
    except ValueError:
        return False


def import_wallet(phrase: str, passphrase: str = "") -> WalletRecord:
    """Derive the wallet for an existing mnemonic.

    Args:
        phrase: 12 or 24 word BIP39 mnemonic
        passphrase: Optional BIP39 passphrase. Used for the seed only,
            never stored in the returned record.

    Returns:
        WalletRecord with checksummed address, the phrase verbatim,
        and the 0x-prefixed private key

    Raises:
        InvalidMnemonicError: If the phrase does not validate
        DerivationError: If key derivation fails for a valid phrase
    """
    if not validate_mnemonic(phrase):
        raise InvalidMnemonicError("Invalid mnemonic phrase")

    try:
        seed = Bip39SeedGenerator(
            normalize_mnemonic(phrase), Bip39Languages.ENGLISH
        ).Generate(passphrase)

        child = Bip32Secp256k1.FromSeed(seed).DerivePath(DERIVATION_PATH)

        # ETH addresses hash the uncompressed public key
        pubkey = child.PublicKey().RawUncompressed().ToBytes()
        address = to_checksum_address(EthAddrEncoder.EncodeKey(pubkey))
        private_key = "0x" + child.PrivateKey().Raw().ToHex()
    except Exception as e:
        raise DerivationError("Failed to create wallet from mnemonic") from e

    logger.info(f"Derived wallet {address} at {DERIVATION_PATH}")

    return WalletRecord(address=address, mnemonic=phrase, private_key=private_key)


def generate_wallet(words: int = 12) -> WalletRecord:
    """Generate a fresh mnemonic and derive its wallet."""
    return import_wallet(generate_mnemonic(words))


def to_checksum_address(address: str) -> str:
    """Apply EIP-55 mixed-case checksum encoding.

    Raises:
        ValueError: If the input is not a 20-byte hex address
    """
    if not isinstance(address, str):
        raise ValueError(f"Address must be a string, got {type(address).__name__}")

    hex_part = address[2:] if address[:2].lower() == "0x" else address
    if len(hex_part) != 40:
        raise ValueError(f"Invalid address length: {address!r}")

    return _eth_checksum_address("0x" + hex_part.lower())


def is_valid_address(address: str) -> bool:
    """Check that a string is a 20-byte hex address.

    All-lowercase and all-uppercase forms are accepted; mixed case
    must carry a correct EIP-55 checksum.
    """
    if not isinstance(address, str):
        return False
    return is_address(address)


def get_derivation_path() -> str:
    """Return the fixed BIP44 path used for every wallet."""
    return DERIVATION_PATH
