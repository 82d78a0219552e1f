"""Cryptographic utilities for the wallet store.

Uses Fernet (AES-128-CBC with HMAC) for symmetric encryption.
"""

from cryptography.fernet import Fernet, InvalidToken

__all__ = ["InvalidToken", "StoreEncryptor", "generate_master_key"]


def generate_master_key() -> str:
    """Generate a new master encryption key.

    Returns:
        Base64-encoded 32-byte key suitable for Fernet
    """
    return Fernet.generate_key().decode()


class StoreEncryptor:
    """Encrypts and decrypts store payloads using Fernet.

    Usage:
        encryptor = StoreEncryptor(master_key)
        token = encryptor.encrypt(b"...")
        payload = encryptor.decrypt(token)
    """

    def __init__(self, master_key: str):
        """Initialize with master encryption key.

        Args:
            master_key: Base64-encoded Fernet key (32 bytes)

        Raises:
            ValueError: If the key is not a valid Fernet key
        """
        self._fernet = Fernet(master_key.encode())

    def encrypt(self, payload: bytes) -> bytes:
        """Encrypt raw bytes into a Fernet token."""
        return self._fernet.encrypt(payload)

    def decrypt(self, token: bytes) -> bytes:
        """Decrypt a Fernet token.

        Raises:
            InvalidToken: If decryption fails (wrong key or corrupted data)
        """
        return self._fernet.decrypt(token)

