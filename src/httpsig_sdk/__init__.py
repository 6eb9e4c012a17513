"""
HTTP Signatures SDK
Cavage-draft HTTP message signatures with HMAC, RSA, DSA and EC keys
"""

from .version import __version__
from .exceptions import (
    HttpSignaturesError,
    AlgorithmError,
    CryptoKeyError,
    KeyStoreError,
    HeaderError,
    SignedHeaderNotPresentError,
    SignatureParseError,
    DigestError,
    SignatureDatesError,
    ContextError,
    ConfigError,
)
from .message import Headers, HttpRequest, HttpResponse
from .crypto import CryptoKey, KeyStore
# signing must be imported before verification
from .signing import (
    Algorithm,
    SignatureDates,
    HeaderList,
    SigningString,
    BodyDigest,
    SignatureParameters,
    SignatureParametersParser,
    Signer,
    Context,
    HttpSignatureAuth,
    sign_prepared_request,
    create_signing_session,
)
from .verification import Verification, Verifier
from .config import ContextConfig

__all__ = [
    '__version__',
    # Errors
    'HttpSignaturesError',
    'AlgorithmError',
    'CryptoKeyError',
    'KeyStoreError',
    'HeaderError',
    'SignedHeaderNotPresentError',
    'SignatureParseError',
    'DigestError',
    'SignatureDatesError',
    'ContextError',
    'ConfigError',
    # Messages
    'Headers',
    'HttpRequest',
    'HttpResponse',
    # Keys
    'CryptoKey',
    'KeyStore',
    # Signing
    'Algorithm',
    'SignatureDates',
    'HeaderList',
    'SigningString',
    'BodyDigest',
    'SignatureParameters',
    'SignatureParametersParser',
    'Signer',
    'Context',
    'HttpSignatureAuth',
    'sign_prepared_request',
    'create_signing_session',
    # Verification
    'Verification',
    'Verifier',
    # Configuration
    'ContextConfig',
]
