"""
Message signer for Cavage-style HTTP signatures

The signer builds the signing string for a message, signs it with the
configured key and algorithm, and appends the serialized parameters as a
``Signature`` header or an ``Authorization: Signature`` header.
"""

import logging
from typing import Optional, TypeVar

from ..crypto.key import CryptoKey
from ..exceptions import AlgorithmError
from ..message import HttpMessage
from .algorithm import Algorithm
from .dates import SignatureDates
from .digest import BodyDigest
from .header_list import HeaderList
from .parameters import SignatureParameters
from .signing_string import SigningString

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = 'Signature'
AUTHORIZATION_HEADER = 'Authorization'
AUTHORIZATION_SCHEME = 'Signature'

MessageT = TypeVar('MessageT', bound=HttpMessage)


class Signer:
    """
    Signs HTTP messages with one key and algorithm
    """

    def __init__(
        self,
        key: CryptoKey,
        algorithm: Algorithm,
        header_list: HeaderList,
        signature_dates: Optional[SignatureDates] = None,
        digest_hash_algorithm: Optional[str] = None,
        strict_dates: bool = True
    ):
        """
        Initialize the signer.

        Args:
            key: Signing key
            algorithm: Signature algorithm; its family must match the key type
            header_list: Names to cover
            signature_dates: Timestamps for ``(created)`` / ``(expires)``
            digest_hash_algorithm: Digest used by the ``*_with_digest`` variants
            strict_dates: Refuse to sign outside the dates' validity window

        Raises:
            AlgorithmError: If the algorithm family does not match the key
            DigestError: If ``digest_hash_algorithm`` is not supported
        """
        if algorithm.family != key.type:
            raise AlgorithmError(
                f"Signature algorithm '{algorithm.name}' cannot be used with signing key type '{key.type}'",
                "KEY_ALGORITHM_MISMATCH",
                {"algorithm": algorithm.name, "key_type": key.type}
            )
        self.key = key
        self.algorithm = algorithm
        self.header_list = header_list
        self.signature_dates = signature_dates or SignatureDates()
        self.body_digest = BodyDigest(digest_hash_algorithm)
        self.strict_dates = strict_dates

    def sign(self, message: MessageT) -> MessageT:
        """
        Append a ``Signature`` header to ``message``.

        Raises:
            SignatureDatesError: If strict dates are enforced and the window is not open
            SignedHeaderNotPresentError: If a covered header is missing
            HeaderError: For unusable pseudo-headers
            AlgorithmError: If the key cannot sign
        """
        parameters = self.signature_parameters(message, self.header_list)
        return message.with_added_header(SIGNATURE_HEADER, parameters.string())

    def authorize(self, message: MessageT) -> MessageT:
        """Append an ``Authorization: Signature ...`` header to ``message``."""
        parameters = self.signature_parameters(message, self.header_list)
        return message.with_added_header(AUTHORIZATION_HEADER, f"{AUTHORIZATION_SCHEME} {parameters.string()}")

    def sign_with_digest(self, message: MessageT) -> MessageT:
        """Set the ``Digest`` header, cover it, then sign."""
        header_list = self.body_digest.put_digest_in_header_list(self.header_list)
        message = self.body_digest.set_digest_header(message)
        parameters = self.signature_parameters(message, header_list)
        return message.with_added_header(SIGNATURE_HEADER, parameters.string())

    def authorize_with_digest(self, message: MessageT) -> MessageT:
        header_list = self.body_digest.put_digest_in_header_list(self.header_list)
        message = self.body_digest.set_digest_header(message)
        parameters = self.signature_parameters(message, header_list)
        return message.with_added_header(AUTHORIZATION_HEADER, f"{AUTHORIZATION_SCHEME} {parameters.string()}")

    def get_signing_string(self, message: HttpMessage, header_list: Optional[HeaderList] = None) -> str:
        return SigningString(header_list or self.header_list, message, self.signature_dates).string()

    def signature_parameters(self, message: HttpMessage, header_list: HeaderList) -> SignatureParameters:
        """
        Compute the signature over ``message`` and wrap it in its parameter set.
        """
        if self.strict_dates:
            self.signature_dates.validate()
        signing_string = self.get_signing_string(message, header_list)
        digest_override = self.key.hash_algorithm
        signature = self.algorithm.sign(self.key.signing_key, signing_string, digest_override)
        logger.debug(
            f"Signed message with key '{self.key.id}' using {self.algorithm.name}"
            f"{f' ({digest_override})' if digest_override else ''} over [{header_list.string()}]"
        )
        return SignatureParameters(self.key.id, self.algorithm, header_list, signature, self.signature_dates)
