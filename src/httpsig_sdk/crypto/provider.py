"""
Cryptographic primitives for HTTP message signatures

This module wraps the cryptography package: keyed hashing, plain hashing,
asymmetric sign/verify for RSA, DSA and EC keys, and PEM/X.509 probing.
Probing functions return ``None`` for input of the wrong shape instead of
raising, so callers can try each shape in turn.
"""

from pathlib import Path
from typing import Dict, List, Optional, Union

from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import constant_time, hashes, hmac, serialization
from cryptography.hazmat.primitives.asymmetric import dsa, ec, padding, rsa

from ..exceptions import AlgorithmError, CryptoKeyError

FILE_URI_PREFIX = 'file://'

HASH_ALGORITHMS: Dict[str, type] = {
    'sha1': hashes.SHA1,
    'sha256': hashes.SHA256,
    'sha384': hashes.SHA384,
    'sha512': hashes.SHA512,
}

PrivateKey = Union[rsa.RSAPrivateKey, dsa.DSAPrivateKey, ec.EllipticCurvePrivateKey]
PublicKey = Union[rsa.RSAPublicKey, dsa.DSAPublicKey, ec.EllipticCurvePublicKey]
KeySource = Union[str, bytes, Path]

_PROBE_ERRORS = (ValueError, TypeError, UnsupportedAlgorithm)


def get_hash_algorithm(digest_name: str) -> hashes.HashAlgorithm:
    """
    Resolve a digest name to a cryptography hash instance.

    Raises:
        AlgorithmError: If the digest is not supported
    """
    try:
        return HASH_ALGORITHMS[digest_name]()
    except KeyError:
        raise AlgorithmError(
            f"{digest_name} is not a supported hash format",
            "UNSUPPORTED_DIGEST",
            {"digest": digest_name}
        ) from None


def hmac_digest(data: bytes, secret: bytes, digest_name: str) -> bytes:
    h = hmac.HMAC(secret, get_hash_algorithm(digest_name))
    h.update(data)
    return h.finalize()


def hash_digest(data: bytes, digest_name: str) -> bytes:
    h = hashes.Hash(get_hash_algorithm(digest_name))
    h.update(data)
    return h.finalize()


def constant_time_equals(left: bytes, right: bytes) -> bool:
    """Compare two byte strings without short-circuiting on content."""
    return constant_time.bytes_eq(left, right)


def asym_sign(data: bytes, private_key: PrivateKey, digest_name: str) -> bytes:
    """
    Sign ``data`` with an RSA (PKCS#1 v1.5), DSA or ECDSA private key.

    Raises:
        AlgorithmError: If the key type cannot sign
    """
    hash_algorithm = get_hash_algorithm(digest_name)
    if isinstance(private_key, rsa.RSAPrivateKey):
        return private_key.sign(data, padding.PKCS1v15(), hash_algorithm)
    if isinstance(private_key, dsa.DSAPrivateKey):
        return private_key.sign(data, hash_algorithm)
    if isinstance(private_key, ec.EllipticCurvePrivateKey):
        return private_key.sign(data, ec.ECDSA(hash_algorithm))
    raise AlgorithmError(
        f"Unsupported signing key type: {type(private_key).__name__}",
        "UNSUPPORTED_KEY_TYPE"
    )


def asym_verify(data: bytes, signature: bytes, public_key: PublicKey, digest_name: str) -> bool:
    """
    Verify ``signature`` over ``data``.

    Returns:
        bool: True only when the library reports a valid signature
    """
    hash_algorithm = get_hash_algorithm(digest_name)
    try:
        if isinstance(public_key, rsa.RSAPublicKey):
            public_key.verify(signature, data, padding.PKCS1v15(), hash_algorithm)
        elif isinstance(public_key, dsa.DSAPublicKey):
            public_key.verify(signature, data, hash_algorithm)
        elif isinstance(public_key, ec.EllipticCurvePublicKey):
            public_key.verify(signature, data, ec.ECDSA(hash_algorithm))
        else:
            raise AlgorithmError(
                f"Unsupported verifying key type: {type(public_key).__name__}",
                "UNSUPPORTED_KEY_TYPE"
            )
    except InvalidSignature:
        return False
    return True


def read_key_material(source: KeySource) -> bytes:
    """
    Turn a credential blob into bytes, reading files when given a path.

    ``pathlib.Path`` objects and ``file://`` strings are read from disk;
    any other string is taken literally.

    Raises:
        CryptoKeyError: If a referenced file cannot be read
    """
    path: Optional[Path] = None
    if isinstance(source, Path):
        path = source
    elif isinstance(source, str) and source.startswith(FILE_URI_PREFIX):
        path = Path(source[len(FILE_URI_PREFIX):])

    if path is not None:
        try:
            return path.read_bytes()
        except OSError as e:
            raise CryptoKeyError(
                f"Cannot read key file {path}: {e}",
                "KEY_FILE_UNREADABLE",
                {"path": str(path)}
            ) from e

    if isinstance(source, str):
        return source.encode('utf-8')
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    raise CryptoKeyError(
        f"Unsupported key input type: {type(source).__name__}",
        "INVALID_KEY_INPUT"
    )


def try_parse_private_key(material: bytes) -> Optional[PrivateKey]:
    try:
        return serialization.load_pem_private_key(material, password=None)
    except _PROBE_ERRORS:
        return None


def try_parse_certificate(material: bytes) -> Optional[x509.Certificate]:
    try:
        return x509.load_pem_x509_certificate(material)
    except _PROBE_ERRORS:
        return None


def try_parse_public_key(material: bytes) -> Optional[PublicKey]:
    try:
        return serialization.load_pem_public_key(material)
    except _PROBE_ERRORS:
        return None


def matching_key_families(key) -> List[str]:
    """Return every family among rsa/dsa/ec that ``key`` belongs to."""
    families = []
    if isinstance(key, (rsa.RSAPrivateKey, rsa.RSAPublicKey)):
        families.append('rsa')
    if isinstance(key, (dsa.DSAPrivateKey, dsa.DSAPublicKey)):
        families.append('dsa')
    if isinstance(key, (ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey)):
        families.append('ec')
    return families


def describe_key_type(key) -> Dict[str, Optional[str]]:
    """
    Describe the family (and curve, for EC keys) of a key handle.

    Raises:
        CryptoKeyError: If the key matches none or several known families
    """
    families = matching_key_families(key)
    if len(families) > 1:
        raise CryptoKeyError(
            f"Unknown key semantics, multiple recognised key types found: '{','.join(families)}'",
            "AMBIGUOUS_KEY_TYPE"
        )
    if not families:
        raise CryptoKeyError(
            f"Unknown key semantics, no recognised key types found: {type(key).__name__}",
            "UNRECOGNISED_KEY_TYPE"
        )
    family = families[0]
    curve = key.curve.name if family == 'ec' else None
    return {'family': family, 'curve': curve}


def export_private_key(private_key: PrivateKey) -> bytes:
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    )


def export_public_key(public_key: PublicKey) -> bytes:
    return public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    )
