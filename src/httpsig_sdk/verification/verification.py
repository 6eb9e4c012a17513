"""
Single verification attempt of a signed HTTP message
"""

import base64
import binascii
import logging
from typing import Dict, Iterable, Optional

from ..crypto.key import CryptoKey
from ..crypto.keystore import KeyStore
from ..exceptions import AlgorithmError, HeaderError, KeyStoreError, SignatureParseError
from ..message import HttpMessage
from ..signing.algorithm import HS2019, Algorithm
from ..signing.dates import SignatureDates
from ..signing.header_list import HeaderList
from ..signing.parameters import ParameterValue, SignatureParametersParser
from ..signing.signer import AUTHORIZATION_HEADER, AUTHORIZATION_SCHEME, SIGNATURE_HEADER
from ..signing.signing_string import CREATED, SigningString

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = 'date'


class Verification:
    """
    Verifies the signature carried in one header of a message

    The header is located and parsed on construction; ``verify`` looks up
    the key and checks the signature.
    """

    def __init__(
        self,
        message: HttpMessage,
        key_store: KeyStore,
        header: str,
        allowed_digests: Optional[Iterable[str]] = None,
        enforce_dates: bool = False
    ):
        """
        Args:
            message: Message to verify
            key_store: Source of verification keys
            header: ``Signature`` or ``Authorization``
            allowed_digests: Acceptable digests named by the ``algorithm``
                parameter (``hs2019`` included); None accepts any
            enforce_dates: Reject signatures outside their created/expires window

        Raises:
            HeaderError: If the header is missing, repeated or unknown
            SignatureParseError: If the parameters are malformed
        """
        self.message = message
        self.key_store = key_store
        self.header = header
        self.allowed_digests = frozenset(allowed_digests) if allowed_digests is not None else None
        self.enforce_dates = enforce_dates
        self.parameters: Dict[str, ParameterValue] = SignatureParametersParser(self._signature_line()).parse()

    def _signature_line(self) -> str:
        header = self.header.lower()
        if header == SIGNATURE_HEADER.lower():
            values = self.message.get_header(SIGNATURE_HEADER)
            if not values:
                raise HeaderError(f"Cannot locate header '{SIGNATURE_HEADER}'", "HEADER_NOT_FOUND")
            if len(values) > 1:
                raise HeaderError(f"Multiple headers named '{SIGNATURE_HEADER}'", "MULTIPLE_HEADERS")
            return values[0]
        if header == AUTHORIZATION_HEADER.lower():
            prefix = f"{AUTHORIZATION_SCHEME} "
            values = [v for v in self.message.get_header(AUTHORIZATION_HEADER) if v.startswith(prefix)]
            if not values:
                raise HeaderError(
                    f"Cannot locate header '{AUTHORIZATION_HEADER}' with scheme '{AUTHORIZATION_SCHEME}'",
                    "HEADER_NOT_FOUND"
                )
            if len(values) > 1:
                raise HeaderError(
                    f"Multiple '{AUTHORIZATION_HEADER}' headers with scheme '{AUTHORIZATION_SCHEME}'",
                    "MULTIPLE_HEADERS"
                )
            return values[0][len(prefix):]
        raise HeaderError(f"Unknown header type '{self.header}', cannot verify", "UNKNOWN_HEADER_TYPE")

    @property
    def key_id(self) -> str:
        return self.parameters['keyId']

    @property
    def algorithm_name(self) -> str:
        return self.parameters['algorithm']

    def verify(self) -> bool:
        """
        Check the signature.

        Returns:
            bool: True when the signature matches

        Raises:
            KeyStoreError: If the key id is unknown
            AlgorithmError: If the algorithm is unknown, disallowed or does not fit the key
            SignatureParseError: If the signature is not valid base64
            SignedHeaderNotPresentError: If a covered header is missing
            HeaderError: For unusable pseudo-headers
            SignatureDatesError: If dates are enforced and the window is closed
        """
        key = self.key()
        algorithm = self.get_algorithm(key)
        verifying_key = key.verifying_key
        if verifying_key is None:
            raise AlgorithmError(f"Key '{key.id}' has no verifying material", "UNUSABLE_KEY")
        if self.enforce_dates:
            self.signature_dates().validate()
        result = algorithm.verify(
            self.get_signing_string(),
            self.provided_signature(),
            verifying_key,
            key.hash_algorithm
        )
        if not result:
            logger.warning(f"Signature from key '{key.id}' did not verify")
        return result

    def key(self) -> CryptoKey:
        try:
            return self.key_store.fetch(self.key_id)
        except KeyStoreError as e:
            raise KeyStoreError(
                f"Cannot locate key for supplied keyId '{self.key_id}'",
                e.error_code,
                {"key_id": self.key_id}
            ) from e

    def get_algorithm(self, key: CryptoKey) -> Algorithm:
        """
        Algorithm to verify with: the key's family plus the claimed digest,
        unless the key overrides the digest.
        """
        name = self.algorithm_name
        if name == HS2019:
            claimed_digest = HS2019
        else:
            claimed = Algorithm.create(name)
            if claimed.family != key.type:
                raise AlgorithmError(
                    f"Algorithm '{name}' does not match key type '{key.type}'",
                    "KEY_ALGORITHM_MISMATCH",
                    {"algorithm": name, "key_type": key.type}
                )
            claimed_digest = claimed.digest_name
        if self.allowed_digests is not None and claimed_digest not in self.allowed_digests:
            raise AlgorithmError(
                f"Digest '{claimed_digest}' is not accepted",
                "DIGEST_NOT_ALLOWED",
                {"digest": claimed_digest}
            )
        return Algorithm(key.type, key.hash_algorithm or claimed_digest)

    def signature_dates(self) -> SignatureDates:
        return SignatureDates(created=self.parameters.get('created'), expires=self.parameters.get('expires'))

    def header_list(self) -> HeaderList:
        headers = self.parameters.get('headers')
        if headers is not None:
            return HeaderList.from_string(headers)
        if self.algorithm_name == HS2019 and 'created' in self.parameters:
            return HeaderList([CREATED], explicit=False)
        return HeaderList([DEFAULT_HEADERS], explicit=False)

    def provided_signature(self) -> bytes:
        try:
            return base64.b64decode(self.parameters['signature'], validate=True)
        except (binascii.Error, ValueError) as e:
            raise SignatureParseError(
                "Signature parameter is not valid base64",
                "INVALID_SIGNATURE_ENCODING"
            ) from e

    def get_signing_string(self) -> str:
        return SigningString(self.header_list(), self.message, self.signature_dates()).string()
