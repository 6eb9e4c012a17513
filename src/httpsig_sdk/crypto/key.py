"""
Key material classification

A CryptoKey is built from one or more credential blobs (PEM private keys,
PEM public keys, X.509 certificates, files holding any of those, or a raw
shared secret). Each blob is probed in turn and the results are merged into
either a secret key (HMAC) or an asymmetric key (RSA, DSA or EC).
"""

import logging
from enum import Enum
from pathlib import Path
from typing import NamedTuple, Optional, Sequence, Union

from ..exceptions import AlgorithmError, CryptoKeyError
from . import provider
from .provider import KeySource, PrivateKey, PublicKey

logger = logging.getLogger(__name__)

PEM_MARKER = b'-----BEGIN'

SUPPORTED_HASH_ALGORITHMS = ('sha1', 'sha256', 'sha384', 'sha512', 'hs2019')


class KeyClass(str, Enum):
    """Broad class of key material"""
    SECRET = "secret"
    ASYMMETRIC = "asymmetric"


class PkiKey(NamedTuple):
    """Result of probing one blob that holds PKI material"""
    private_key: Optional[PrivateKey]
    public_key: Optional[PublicKey]
    family: str
    curve: Optional[str]


def classify_key_material(material: bytes) -> Optional[PkiKey]:
    """
    Probe ``material`` as a private key, a certificate, then a public key.

    Returns:
        PkiKey or None: None when the material holds no PKI key at all

    Raises:
        CryptoKeyError: If a parsed key belongs to no (or several) known families
    """
    private_key = provider.try_parse_private_key(material)
    public_key = None
    if private_key is None:
        certificate = provider.try_parse_certificate(material)
        if certificate is not None:
            public_key = certificate.public_key()
        else:
            public_key = provider.try_parse_public_key(material)
    if private_key is None and public_key is None:
        return None

    description = provider.describe_key_type(private_key if private_key is not None else public_key)
    return PkiKey(
        private_key=private_key,
        public_key=public_key,
        family=description['family'],
        curve=description['curve'],
    )


class CryptoKey:
    """
    Classified key material identified by a key id.

    Exactly one of (secret) or (private and/or public key) is held.
    Instances are immutable once constructed.
    """

    def __init__(
        self,
        key_id: str,
        keys: Union[KeySource, Sequence[KeySource]],
        hash_algorithm: Optional[str] = None
    ):
        """
        Classify and merge credential blobs into a key.

        Args:
            key_id: Caller-assigned key identifier
            keys: One blob or a sequence of blobs (secret, PEM text, Path, file:// URI)
            hash_algorithm: Optional digest that overrides the algorithm's own for this key

        Raises:
            CryptoKeyError: If the blobs are ambiguous, conflicting or unreadable
            AlgorithmError: If ``hash_algorithm`` is not supported
        """
        if not key_id:
            raise CryptoKeyError("Key ID cannot be empty", "INVALID_KEY_ID")
        if hash_algorithm is not None and hash_algorithm not in SUPPORTED_HASH_ALGORITHMS:
            raise AlgorithmError(
                f"{hash_algorithm} is not a supported hash format",
                "UNSUPPORTED_DIGEST",
                {"key_id": key_id, "digest": hash_algorithm}
            )
        if isinstance(keys, (str, bytes, bytearray, Path)):
            keys = [keys]
        if not keys:
            raise CryptoKeyError(f"No key material provided for key '{key_id}'", "NO_KEY_MATERIAL")

        private_key: Optional[PrivateKey] = None
        public_key: Optional[PublicKey] = None
        family: Optional[str] = None
        curve: Optional[str] = None
        secret: Optional[bytes] = None

        for item in keys:
            material = provider.read_key_material(item)
            pki = classify_key_material(material)
            if pki is None:
                if PEM_MARKER in material:
                    raise CryptoKeyError(
                        f"Input looks like PEM but key not understood for key '{key_id}'",
                        "UNPARSEABLE_PEM",
                        {"key_id": key_id}
                    )
                if secret is not None and secret != material:
                    raise CryptoKeyError("Multiple secrets provided", "MULTIPLE_SECRETS", {"key_id": key_id})
                secret = material
                continue

            if family is not None and pki.family != family:
                raise CryptoKeyError(
                    f"Multiple different key types provided: '{family}' and '{pki.family}'",
                    "MIXED_KEY_TYPES",
                    {"key_id": key_id}
                )
            if pki.public_key is not None:
                if public_key is not None:
                    if provider.export_public_key(public_key) != provider.export_public_key(pki.public_key):
                        raise CryptoKeyError(
                            "Multiple different public keys provided",
                            "MULTIPLE_PUBLIC_KEYS",
                            {"key_id": key_id}
                        )
                else:
                    public_key = pki.public_key
            if pki.private_key is not None:
                if private_key is not None:
                    if provider.export_private_key(private_key) != provider.export_private_key(pki.private_key):
                        raise CryptoKeyError(
                            "Multiple different private keys provided",
                            "MULTIPLE_PRIVATE_KEYS",
                            {"key_id": key_id}
                        )
                else:
                    private_key = pki.private_key
            family = pki.family
            curve = pki.curve

        if private_key is not None or public_key is not None:
            if secret is not None:
                raise CryptoKeyError(
                    "Input has secret(s) and PKI keys, cannot process",
                    "SECRET_AND_PKI_MIXED",
                    {"key_id": key_id}
                )
            self._class = KeyClass.ASYMMETRIC
        elif secret:
            self._class = KeyClass.SECRET
        else:
            raise CryptoKeyError(f"Empty secret provided for key '{key_id}'", "EMPTY_SECRET")

        self._id = key_id
        self._secret = secret
        self._private_key = private_key
        self._public_key = public_key
        self._family = family
        self._curve = curve
        self._hash_algorithm = hash_algorithm
        logger.debug(f"Classified key '{key_id}' as {self.type}{f' ({curve})' if curve else ''}")

    @property
    def id(self) -> str:
        return self._id

    @property
    def key_class(self) -> KeyClass:
        return self._class

    @property
    def is_secret(self) -> bool:
        return self._class == KeyClass.SECRET

    @property
    def type(self) -> str:
        """'hmac' for secrets, otherwise the asymmetric family (rsa, dsa, ec)."""
        if self._class == KeyClass.SECRET:
            return 'hmac'
        return self._family

    @property
    def family(self) -> Optional[str]:
        return self._family

    @property
    def curve(self) -> Optional[str]:
        return self._curve

    @property
    def hash_algorithm(self) -> Optional[str]:
        """Digest that overrides every other setting for this key, if any."""
        return self._hash_algorithm

    @property
    def secret(self) -> Optional[bytes]:
        return self._secret

    @property
    def private_key(self) -> Optional[PrivateKey]:
        return self._private_key

    @property
    def public_key(self) -> Optional[PublicKey]:
        return self._public_key

    @property
    def signing_key(self) -> Union[bytes, PrivateKey, None]:
        """Shared secret for HMAC, private key handle for PKI keys."""
        if self.is_secret:
            return self._secret
        return self._private_key

    @property
    def verifying_key(self) -> Union[bytes, PublicKey, None]:
        """Shared secret for HMAC, public key handle (or the private key's public half) for PKI keys."""
        if self.is_secret:
            return self._secret
        if self._public_key is not None:
            return self._public_key
        if self._private_key is not None:
            return self._private_key.public_key()
        return None

    def export_signing_key(self) -> Optional[bytes]:
        """Shared secret, or the private key as unencrypted PKCS#8 PEM."""
        if self.is_secret:
            return self._secret
        if self._private_key is None:
            return None
        return provider.export_private_key(self._private_key)

    def export_verifying_key(self) -> Optional[bytes]:
        """Shared secret, or the public key as SubjectPublicKeyInfo PEM."""
        verifying_key = self.verifying_key
        if verifying_key is None or self.is_secret:
            return verifying_key
        return provider.export_public_key(verifying_key)

    def __repr__(self) -> str:
        return f"CryptoKey(id={self._id!r}, type={self.type!r})"
