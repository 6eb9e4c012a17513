"""
HTTP Signatures SDK - Signing Module

Cavage-draft HTTP message signatures (legacy algorithm names and hs2019):
signing string construction, algorithms, body digests, signature
parameters and the signer itself.
"""

from .algorithm import Algorithm, HS2019, SUPPORTED_DIGESTS, SUPPORTED_FAMILIES
from .dates import SignatureDates
from .header_list import HeaderList
from .signing_string import SigningString
from .digest import BodyDigest
from .parameters import SignatureParameters, SignatureParametersParser
from .signer import Signer
from .context import Context
from .integration import (
    HttpSignatureAuth,
    sign_prepared_request,
    create_signing_session,
)

__all__ = [
    'Algorithm',
    'HS2019',
    'SUPPORTED_DIGESTS',
    'SUPPORTED_FAMILIES',
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
]
