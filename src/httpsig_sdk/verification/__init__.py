"""
HTTP Signatures SDK - Verification Module

Verification of ``Signature`` and ``Authorization: Signature`` headers and
of ``Digest`` headers against a key store.
"""

from .verification import Verification
from .verifier import Verifier

__all__ = [
    'Verification',
    'Verifier',
]
