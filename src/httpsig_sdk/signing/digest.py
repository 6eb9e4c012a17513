"""
Body digest computation and validation for the ``Digest`` header
"""

import base64
from typing import Dict, Optional, Tuple

from ..crypto import provider
from ..exceptions import DigestError
from ..message import HttpMessage
from .header_list import HeaderList

DIGEST_HEADER = 'Digest'
DEFAULT_DIGEST_HASH = 'sha256'

# normalized spec -> (hash name, header prefix)
DIGEST_SPECS: Dict[str, Tuple[str, str]] = {
    'sha': ('sha1', 'SHA'),
    'sha1': ('sha1', 'SHA'),
    'sha256': ('sha256', 'SHA-256'),
    'sha512': ('sha512', 'SHA-512'),
}


def normalize_digest_spec(spec: str) -> str:
    return spec.replace('-', '').lower()


def is_valid_digest_spec(spec: str) -> bool:
    return normalize_digest_spec(spec) in DIGEST_SPECS


class BodyDigest:
    """
    Digest of a message body

    Attributes:
        hash_name: sha1, sha256 or sha512
        prefix: Header prefix (SHA, SHA-256, SHA-512)
    """

    def __init__(self, hash_name: Optional[str] = None):
        """
        Args:
            hash_name: Digest spec such as ``sha256`` or ``SHA-256`` (default sha256)

        Raises:
            DigestError: If the spec is not supported
        """
        if not hash_name:
            hash_name = DEFAULT_DIGEST_HASH
        normalized = normalize_digest_spec(hash_name)
        if normalized not in DIGEST_SPECS:
            raise DigestError(
                f"'{hash_name}' is not a valid Digest algorithm specifier",
                "UNSUPPORTED_DIGEST",
                {"digest": hash_name}
            )
        self.hash_name, self.prefix = DIGEST_SPECS[normalized]

    @classmethod
    def from_hash_name(cls, hash_name: Optional[str] = None) -> 'BodyDigest':
        return cls(hash_name)

    @classmethod
    def from_header_value(cls, header_value: str) -> 'BodyDigest':
        """
        Configure a digest from a received ``Digest`` header value.

        Raises:
            DigestError: If the value is malformed or its prefix is unknown
        """
        prefix, separator, encoded = header_value.strip().partition('=')
        if not prefix or not separator or not encoded:
            raise DigestError(
                "Digest header does not appear to be correctly formatted",
                "MALFORMED_DIGEST_HEADER",
                {"value": header_value}
            )
        if not is_valid_digest_spec(prefix):
            raise DigestError(
                f"'{prefix}' in Digest header is not a valid algorithm",
                "UNSUPPORTED_DIGEST",
                {"digest": prefix}
            )
        return cls(prefix)

    @classmethod
    def from_message(cls, message: HttpMessage) -> 'BodyDigest':
        """
        Configure a digest from the first ``Digest`` header of ``message``.

        Raises:
            DigestError: If the header is missing or malformed
        """
        values = message.get_header(DIGEST_HEADER)
        if not values:
            raise DigestError("No Digest header in message", "MISSING_DIGEST_HEADER")
        return cls.from_header_value(values[0])

    def digest_header_value(self, body: Optional[bytes]) -> str:
        """Header value ``<PREFIX>=<base64 hash>`` for ``body``."""
        digest = provider.hash_digest(body or b'', self.hash_name)
        return f"{self.prefix}={base64.b64encode(digest).decode('ascii')}"

    def set_digest_header(self, message: HttpMessage) -> HttpMessage:
        """Return ``message`` with exactly one ``Digest`` header computed from its body."""
        return message.without_header(DIGEST_HEADER).with_added_header(
            DIGEST_HEADER,
            self.digest_header_value(message.body)
        )

    @staticmethod
    def put_digest_in_header_list(header_list: HeaderList) -> HeaderList:
        return header_list.with_name('digest')

    def is_valid(self, message: HttpMessage) -> bool:
        """True when the first ``Digest`` header matches the body. Never raises."""
        values = message.get_header(DIGEST_HEADER)
        if not values:
            return False
        expected = self.digest_header_value(message.body)
        return provider.constant_time_equals(values[0].strip().encode('utf-8'), expected.encode('utf-8'))

    def __repr__(self) -> str:
        return f"BodyDigest({self.hash_name!r})"
