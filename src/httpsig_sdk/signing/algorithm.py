"""
Signature algorithms

An Algorithm pairs a signing family (hmac, rsa, dsa, ec) with a digest name.
Legacy wire names spell both (``rsa-sha256``); the unified ``hs2019`` name
spells neither, so the family comes from the key and the effective digest is
sha512.
"""

from dataclasses import dataclass
from typing import Optional, Union

from ..crypto import provider
from ..crypto.provider import PrivateKey, PublicKey
from ..exceptions import AlgorithmError

HS2019 = 'hs2019'
HS2019_DIGEST = 'sha512'

SUPPORTED_DIGESTS = ('sha1', 'sha256', 'sha384', 'sha512', HS2019)
SUPPORTED_FAMILIES = ('hmac', 'rsa', 'dsa', 'ec')

SigningKey = Union[bytes, PrivateKey]
VerifyingKey = Union[bytes, PublicKey]


def effective_digest(digest_name: str) -> str:
    """Map ``hs2019`` to its default digest; other names are returned unchanged."""
    return HS2019_DIGEST if digest_name == HS2019 else digest_name


@dataclass(frozen=True)
class Algorithm:
    """
    Signing family plus digest name

    Attributes:
        family: One of hmac, rsa, dsa, ec
        digest_name: One of sha1, sha256, sha384, sha512, hs2019
    """
    family: str
    digest_name: str

    def __post_init__(self):
        if self.digest_name not in SUPPORTED_DIGESTS:
            raise AlgorithmError(
                f"{self.digest_name} is not a supported hash format",
                "UNSUPPORTED_DIGEST",
                {"digest": self.digest_name}
            )
        if self.family not in SUPPORTED_FAMILIES:
            raise AlgorithmError(
                f"No algorithm family named '{self.family}'",
                "UNSUPPORTED_FAMILY",
                {"family": self.family}
            )

    @classmethod
    def create(cls, name: str, family: Optional[str] = None) -> 'Algorithm':
        """
        Create an algorithm from its wire name.

        Args:
            name: ``<family>-<digest>`` or ``hs2019``
            family: Key family, required for ``hs2019``

        Raises:
            AlgorithmError: If the name is unknown or ``hs2019`` lacks a family
        """
        if name == HS2019:
            if family is None:
                raise AlgorithmError(
                    "Algorithm 'hs2019' needs the signing family of the key",
                    "MISSING_FAMILY"
                )
            return cls(family, HS2019)
        prefix, separator, digest_name = name.partition('-')
        if not separator or prefix not in SUPPORTED_FAMILIES or digest_name not in SUPPORTED_DIGESTS \
                or digest_name == HS2019:
            raise AlgorithmError(f"No algorithm named '{name}'", "UNKNOWN_ALGORITHM", {"algorithm": name})
        return cls(prefix, digest_name)

    @staticmethod
    def family_of(name: str) -> Optional[str]:
        """Family spelled in a legacy name, or None for ``hs2019`` and unknown names."""
        prefix, separator, _ = name.partition('-')
        if separator and prefix in SUPPORTED_FAMILIES:
            return prefix
        return None

    @property
    def name(self) -> str:
        if self.digest_name == HS2019:
            return HS2019
        return f"{self.family}-{self.digest_name}"

    @property
    def is_symmetric(self) -> bool:
        return self.family == 'hmac'

    def sign(self, key: SigningKey, data: Union[str, bytes], digest_override: Optional[str] = None) -> bytes:
        """
        Sign ``data``.

        Args:
            key: Shared secret for hmac, private key handle otherwise
            data: Signing string
            digest_override: Digest that takes precedence over the algorithm's own

        Raises:
            AlgorithmError: If the key cannot sign with this family
        """
        digest_name = effective_digest(digest_override or self.digest_name)
        data = _as_bytes(data)
        if self.is_symmetric:
            if not isinstance(key, (bytes, bytearray)) or not key:
                raise AlgorithmError("HMAC signing requires a shared secret", "UNUSABLE_KEY")
            return provider.hmac_digest(data, bytes(key), digest_name)
        if isinstance(key, (bytes, bytearray)) or self.family not in provider.matching_key_families(key):
            raise AlgorithmError(
                f"Supplied key is not a {self.family} signing key",
                "UNUSABLE_KEY",
                {"family": self.family}
            )
        return provider.asym_sign(data, key, digest_name)

    def verify(
        self,
        message: Union[str, bytes],
        signature: bytes,
        key: VerifyingKey,
        digest_override: Optional[str] = None
    ) -> bool:
        """
        Verify ``signature`` over ``message``.

        Returns:
            bool: True only for a matching signature

        Raises:
            AlgorithmError: If the key cannot verify with this family
        """
        digest_name = effective_digest(digest_override or self.digest_name)
        message = _as_bytes(message)
        if self.is_symmetric:
            if not isinstance(key, (bytes, bytearray)) or not key:
                raise AlgorithmError("HMAC verification requires a shared secret", "UNUSABLE_KEY")
            expected = provider.hmac_digest(message, bytes(key), digest_name)
            return provider.constant_time_equals(expected, signature)
        if isinstance(key, (bytes, bytearray)) or self.family not in provider.matching_key_families(key):
            raise AlgorithmError(
                f"Supplied key is not a {self.family} verifying key",
                "UNUSABLE_KEY",
                {"family": self.family}
            )
        if hasattr(key, 'private_bytes'):
            key = key.public_key()
        return provider.asym_verify(message, signature, key, digest_name)

    def __str__(self) -> str:
        return self.name


def _as_bytes(data: Union[str, bytes]) -> bytes:
    if isinstance(data, str):
        return data.encode('utf-8')
    return bytes(data)
