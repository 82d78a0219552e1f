"""Secure persistence for wallet key material.

The wallet record (including its private key) and the onboarding flag
live in a key-value store that is encrypted at rest with the master key.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ethwallet.crypto import InvalidToken, StoreEncryptor
from ethwallet.hdwallet.base import WalletRecord

logger = logging.getLogger(__name__)

WALLET_KEY = "wallet_data"
ONBOARDING_KEY = "onboarding_completed"


class StorageError(Exception):
    """Raised when wallet data cannot be persisted."""

    pass


class SecureStore(ABC):
    """Opaque string key-value store."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def delete_item(self, key: str) -> None:
        pass


class EncryptedFileStore(SecureStore):
    """Key-value store kept in a single Fernet-encrypted JSON file.

    The whole document is rewritten on every change, via a temporary
    file created owner-only (0600) and an atomic rename.
    """

    def __init__(self, path: str | Path, master_key: str):
        self.path = Path(path)
        self._encryptor = StoreEncryptor(master_key)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        token = self.path.read_bytes()
        try:
            payload = self._encryptor.decrypt(token)
        except InvalidToken as e:
            raise StorageError(
                f"Cannot decrypt {self.path} (wrong master key or corrupted file)"
            ) from e
        return json.loads(payload)

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.unlink(missing_ok=True)
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        with os.fdopen(fd, "wb") as f:
            f.write(self._encryptor.encrypt(json.dumps(data).encode()))
        os.replace(tmp_path, self.path)

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete_item(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


class WalletStorage:
    """Wallet record and onboarding flag on top of a SecureStore."""

    def __init__(self, store: SecureStore):
        self.store = store

    def save_wallet(self, wallet: WalletRecord) -> None:
        """Persist the wallet record.

        Raises:
            StorageError: If the store rejects the write
        """
        try:
            self.store.set_item(WALLET_KEY, json.dumps(wallet.to_dict()))
        except Exception as e:
            logger.error(f"Failed to save wallet: {e}")
            raise StorageError("Failed to save wallet data") from e

    def load_wallet(self) -> Optional[WalletRecord]:
        """Load the wallet record, or None if absent or unreadable."""
        try:
            raw = self.store.get_item(WALLET_KEY)
            if not raw:
                return None
            return WalletRecord.from_dict(json.loads(raw))
        except Exception as e:
            logger.error(f"Failed to load wallet: {e}")
            return None

    def clear_wallet(self) -> None:
        try:
            self.store.delete_item(WALLET_KEY)
        except Exception as e:
            logger.error(f"Failed to clear wallet: {e}")

    def is_onboarding_completed(self) -> bool:
        try:
            return self.store.get_item(ONBOARDING_KEY) == "true"
        except Exception as e:
            logger.error(f"Failed to check onboarding status: {e}")
            return False

    def set_onboarding_completed(self) -> None:
        try:
            self.store.set_item(ONBOARDING_KEY, "true")
        except Exception as e:
            logger.error(f"Failed to set onboarding completed: {e}")

    def reset_onboarding(self) -> None:
        try:
            self.store.delete_item(ONBOARDING_KEY)
        except Exception as e:
            logger.error(f"Failed to reset onboarding: {e}")


def get_wallet_storage() -> WalletStorage:
    """Build WalletStorage from settings.

    Raises:
        StorageError: If MASTER_KEY is missing or malformed
    """
    from ethwallet.config import get_settings

    settings = get_settings()
    if not settings.master_key:
        raise StorageError("MASTER_KEY is not set; run `ethwallet keygen` to create one")

    try:
        store = EncryptedFileStore(settings.wallet_store_path, settings.master_key)
    except ValueError as e:
        raise StorageError(f"MASTER_KEY is not a valid Fernet key: {e}") from e

    return WalletStorage(store)
