"""
Key store for signing and verification keys
"""

import logging
import threading
from typing import Dict, List, Mapping, Optional, Sequence, Union

from ..exceptions import KeyStoreError
from .key import CryptoKey
from .provider import KeySource

logger = logging.getLogger(__name__)

KeyInput = Union[CryptoKey, KeySource, Sequence[KeySource]]


class KeyStore:
    """
    Registry of keys by key id.

    Keys may be added but never removed. Lookups and additions are
    serialised by a lock so a store can be shared between threads.
    """

    def __init__(self, keys: Optional[Mapping[str, KeyInput]] = None):
        """
        Initialize the key store.

        Args:
            keys: Optional mapping of key id to a CryptoKey or raw key material
        """
        self._keys: Dict[str, CryptoKey] = {}
        self._lock = threading.RLock()
        if keys:
            self.add_keys(keys)

    def fetch(self, key_id: Optional[str] = None) -> CryptoKey:
        """
        Look up a key.

        Args:
            key_id: Key identifier; may be omitted when the store holds exactly one key

        Returns:
            CryptoKey: The stored key

        Raises:
            KeyStoreError: If no key matches
        """
        with self._lock:
            if not key_id and len(self._keys) == 1:
                return next(iter(self._keys.values()))
            try:
                return self._keys[key_id]
            except KeyError:
                raise KeyStoreError(
                    f"Key '{key_id}' not found",
                    "KEY_NOT_FOUND",
                    {"key_id": key_id}
                ) from None

    def add_keys(self, keys: Mapping[str, KeyInput]) -> None:
        """
        Add keys to the store.

        Either every key is added or, on error, none is.

        Raises:
            KeyStoreError: If a key id is already present
            CryptoKeyError: If key material cannot be classified
        """
        with self._lock:
            new_keys: Dict[str, CryptoKey] = {}
            for key_id, value in keys.items():
                if key_id in self._keys or key_id in new_keys:
                    raise KeyStoreError(
                        f"keyId '{key_id}' already in Key Store",
                        "DUPLICATE_KEY_ID",
                        {"key_id": key_id}
                    )
                new_keys[key_id] = self._build_key(key_id, value)
            self._keys.update(new_keys)
        logger.info(f"Added {len(new_keys)} key(s) to key store: {', '.join(new_keys)}")

    def count(self) -> int:
        with self._lock:
            return len(self._keys)

    def key_ids(self) -> List[str]:
        with self._lock:
            return list(self._keys)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, key_id: object) -> bool:
        with self._lock:
            return key_id in self._keys

    @staticmethod
    def _build_key(key_id: str, value: KeyInput) -> CryptoKey:
        if isinstance(value, CryptoKey):
            if value.id != key_id:
                raise KeyStoreError(
                    f"Key registered as '{key_id}' has id '{value.id}'",
                    "KEY_ID_MISMATCH",
                    {"key_id": key_id}
                )
            return value
        return CryptoKey(key_id, value)
