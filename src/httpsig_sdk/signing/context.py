"""
Signing and verification context

A Context bundles keys, algorithm choice, header list and date offsets, and
hands out correctly configured Signer and Verifier instances.
"""

import logging
from typing import TYPE_CHECKING, Iterable, List, Mapping, Optional, Sequence, Union

from ..crypto.key import CryptoKey
from ..crypto.keystore import KeyInput, KeyStore
from ..exceptions import AlgorithmError, ContextError
from ..verification.verifier import Verifier
from .algorithm import HS2019, SUPPORTED_DIGESTS, Algorithm
from .dates import DEFAULT_CREATED_DRIFT, DEFAULT_EXPIRES_DRIFT, OffsetValue, SignatureDates
from .header_list import HeaderList
from .signer import MessageT, Signer
from .signing_string import CREATED

if TYPE_CHECKING:
    from ..config.context_config import ContextConfig

logger = logging.getLogger(__name__)


class Context:
    """
    Convenience façade over Signer and Verifier
    """

    def __init__(
        self,
        keys: Optional[Mapping[str, KeyInput]] = None,
        key_store: Optional[KeyStore] = None,
        algorithm: Optional[str] = HS2019,
        hash_algorithm: Optional[str] = None,
        headers: Union[None, str, Sequence[str]] = None,
        signing_key_id: Optional[str] = None,
        digest_hash_algorithm: Optional[str] = None,
        created: OffsetValue = 'now',
        expires: OffsetValue = 'none',
        created_drift: int = DEFAULT_CREATED_DRIFT,
        expires_drift: int = DEFAULT_EXPIRES_DRIFT,
        allowed_digests: Optional[Iterable[str]] = None,
        enforce_dates: bool = False
    ):
        """
        Initialize the context.

        Args:
            keys: Key id to key material (or CryptoKey); exclusive with ``key_store``
            key_store: Existing key store; exclusive with ``keys``
            algorithm: ``hs2019`` (default) or a legacy ``<family>-<digest>`` name
            hash_algorithm: Digest that replaces the algorithm's own, so a legacy
                ``<family>-<digest>`` name goes on the wire
            headers: Names to cover, as a list or a space-separated string
            signing_key_id: Key used for signing; implicit when only one key exists
            digest_hash_algorithm: Digest used for ``Digest`` headers
            created: Offset for the ``created`` timestamp
            expires: Offset for the ``expires`` timestamp
            created_drift: Tolerated seconds of ``created`` in the future
            expires_drift: Tolerated seconds past ``expires``
            allowed_digests: Digests the verifier accepts from the ``algorithm`` parameter
            enforce_dates: Whether the verifier checks the date window

        Raises:
            ContextError: If both ``keys`` and ``key_store`` are given or the algorithm is unrecognised
            AlgorithmError: If the algorithm's digest is unsupported
        """
        if keys is not None and key_store is not None:
            raise ContextError("Context accepts keys or key_store but not both", "KEYS_AND_KEY_STORE")

        self.algorithm_name = algorithm or HS2019
        self.hash_algorithm = hash_algorithm
        if self.algorithm_name == HS2019:
            self.signature_family: Optional[str] = None
            self.digest_name = HS2019
        else:
            self.signature_family = Algorithm.family_of(self.algorithm_name)
            if self.signature_family is None:
                raise ContextError(
                    f"Unrecognised algorithm: '{self.algorithm_name}'",
                    "UNRECOGNISED_ALGORITHM",
                    {"algorithm": self.algorithm_name}
                )
            self.digest_name = Algorithm.create(self.algorithm_name).digest_name
        if hash_algorithm:
            if hash_algorithm not in SUPPORTED_DIGESTS:
                raise AlgorithmError(
                    f"Unrecognised hash algorithm: '{hash_algorithm}'",
                    "UNSUPPORTED_DIGEST",
                    {"digest": hash_algorithm}
                )
            self.digest_name = hash_algorithm

        if key_store is None:
            key_store = KeyStore()
            if keys:
                key_store.add_keys({
                    key_id: value if isinstance(value, CryptoKey) else CryptoKey(key_id, value)
                    for key_id, value in keys.items()
                })
        self.key_store = key_store

        self.headers = self._parse_headers(headers)
        self.signing_key_id = signing_key_id
        self.digest_hash_algorithm = digest_hash_algorithm
        self.created = created
        self.expires = expires
        self.created_drift = created_drift
        self.expires_drift = expires_drift
        self.allowed_digests = list(allowed_digests) if allowed_digests is not None else None
        self.enforce_dates = enforce_dates

    @classmethod
    def from_config(cls, config: 'ContextConfig', key_store: Optional[KeyStore] = None) -> 'Context':
        """Build a context from loaded configuration."""
        return cls(
            keys=None if key_store is not None else config.keys,
            key_store=key_store,
            algorithm=config.algorithm,
            hash_algorithm=config.hash_algorithm,
            headers=config.headers,
            signing_key_id=config.signing_key_id,
            digest_hash_algorithm=config.digest_hash_algorithm,
            created=config.created,
            expires=config.expires,
            created_drift=config.created_drift,
            expires_drift=config.expires_drift,
            allowed_digests=config.allowed_digests,
            enforce_dates=config.enforce_dates,
        )

    @staticmethod
    def _parse_headers(headers: Union[None, str, Sequence[str]]) -> Optional[List[str]]:
        if headers is None:
            return None
        if isinstance(headers, str):
            return headers.split()
        return list(headers)

    def header_list(self) -> HeaderList:
        """Configured headers (explicit), else the implicit default for the algorithm."""
        if self.headers is not None:
            return HeaderList(self.headers, explicit=True)
        if self.digest_name == HS2019:
            return HeaderList([CREATED], explicit=False)
        return HeaderList(['date'], explicit=False)

    def signature_dates(self, strict: bool = True) -> SignatureDates:
        """
        Resolve the created/expires offsets against the current time.

        Raises:
            SignatureDatesError: If ``strict`` and the resulting window is not open
        """
        dates = SignatureDates.from_offsets(self.created, self.expires)
        dates.created_drift = self.created_drift
        dates.expires_drift = self.expires_drift
        if strict:
            dates.validate()
        return dates

    def signing_key(self) -> CryptoKey:
        """
        Raises:
            ContextError: If no signing key is specified and none is implicit
            KeyStoreError: If the specified key id is unknown
        """
        if self.signing_key_id:
            return self.key_store.fetch(self.signing_key_id)
        if self.key_store.count() == 1:
            return self.key_store.fetch()
        raise ContextError("No implicit or specified signing key", "NO_SIGNING_KEY")

    def signer(self, strict_dates: bool = True) -> Signer:
        """
        Raises:
            ContextError: If the algorithm family does not fit the signing key
        """
        key = self.signing_key()
        family = self.signature_family or key.type
        if family != key.type:
            raise ContextError(
                f"Signature algorithm '{self.algorithm_name}' cannot be used with signing key type '{key.type}'",
                "KEY_ALGORITHM_MISMATCH",
                {"algorithm": self.algorithm_name, "key_type": key.type}
            )
        logger.debug(f"Context signer for key '{key.id}' ({key.type}, {self.digest_name})")
        return Signer(
            key,
            Algorithm(key.type, self.digest_name),
            self.header_list(),
            self.signature_dates(strict_dates),
            self.digest_hash_algorithm,
            strict_dates=strict_dates,
        )

    def verifier(self) -> Verifier:
        return Verifier(self.key_store, allowed_digests=self.allowed_digests, enforce_dates=self.enforce_dates)

    def sign(self, message: MessageT) -> MessageT:
        return self.signer().sign(message)

    def authorize(self, message: MessageT) -> MessageT:
        return self.signer().authorize(message)

    def sign_with_digest(self, message: MessageT) -> MessageT:
        return self.signer().sign_with_digest(message)

    def authorize_with_digest(self, message: MessageT) -> MessageT:
        return self.signer().authorize_with_digest(message)
