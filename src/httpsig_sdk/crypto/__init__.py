"""
Key material for HTTP message signatures

This module classifies credential blobs into keys and keeps them in a
key store addressed by key id.
"""

from .key import CryptoKey, KeyClass, classify_key_material
from .keystore import KeyStore

__all__ = [
    'CryptoKey',
    'KeyClass',
    'KeyStore',
    'classify_key_material',
]
