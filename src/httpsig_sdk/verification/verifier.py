"""
Verifier façade for signed HTTP messages

The verifier turns the expected verification failures into ``False`` plus a
human-readable status trail. Exceptions of any other kind indicate an
integration fault and propagate after being noted in the status.
"""

import base64
import logging
from typing import Iterable, List, Optional

from ..crypto.keystore import KeyStore
from ..exceptions import (
    AlgorithmError,
    DigestError,
    HeaderError,
    KeyStoreError,
    SignatureDatesError,
    SignatureParseError,
    SignedHeaderNotPresentError,
)
from ..message import HttpMessage
from ..signing.digest import DIGEST_HEADER, BodyDigest
from ..signing.signer import AUTHORIZATION_HEADER, SIGNATURE_HEADER
from .verification import Verification

logger = logging.getLogger(__name__)

EXPECTED_FAILURES = (
    AlgorithmError,
    KeyStoreError,
    SignedHeaderNotPresentError,
    SignatureDatesError,
)


class Verifier:
    """
    Checks ``Signature`` / ``Authorization`` signatures and ``Digest`` headers
    against a key store
    """

    def __init__(
        self,
        key_store: KeyStore,
        allowed_digests: Optional[Iterable[str]] = None,
        enforce_dates: bool = False
    ):
        """
        Initialize the verifier.

        Args:
            key_store: Source of verification keys
            allowed_digests: Digest names accepted from the ``algorithm``
                parameter (e.g. ``['sha256', 'sha512', 'hs2019']``); None accepts all
            enforce_dates: Also reject signatures whose created/expires window is closed
        """
        self.key_store = key_store
        self.allowed_digests = list(allowed_digests) if allowed_digests is not None else None
        self.enforce_dates = enforce_dates
        self._status: List[str] = []

    def is_signed(self, message: HttpMessage) -> bool:
        """True when the message carries exactly one valid ``Signature`` header."""
        self._status = []
        return self._check_signature(message, SIGNATURE_HEADER)

    def is_authorized(self, message: HttpMessage) -> bool:
        """True when exactly one ``Authorization: Signature`` value is valid."""
        self._status = []
        return self._check_signature(message, AUTHORIZATION_HEADER)

    def is_valid_digest(self, message: HttpMessage) -> bool:
        """True when the ``Digest`` header exists and matches the body."""
        self._status = []
        return self._check_digest(message)

    def is_signed_with_digest(self, message: HttpMessage) -> bool:
        self._status = []
        return self._check_digest(message) and self._check_signature(message, SIGNATURE_HEADER)

    def is_authorized_with_digest(self, message: HttpMessage) -> bool:
        self._status = []
        return self._check_digest(message) and self._check_signature(message, AUTHORIZATION_HEADER)

    def get_status(self) -> List[str]:
        """Diagnostic trail of the latest check."""
        return list(self._status)

    def _check_digest(self, message: HttpMessage) -> bool:
        if not message.has_header(DIGEST_HEADER):
            self._fail('Digest header missing')
            return False
        try:
            body_digest = BodyDigest.from_message(message)
        except DigestError as e:
            self._fail(e.message)
            return False
        if not body_digest.is_valid(message):
            self._fail('Digest header invalid')
            return False
        return True

    def _check_signature(self, message: HttpMessage, header: str) -> bool:
        try:
            verification = Verification(
                message,
                self.key_store,
                header,
                allowed_digests=self.allowed_digests,
                enforce_dates=self.enforce_dates
            )
            result = verification.verify()
            signing_string = verification.get_signing_string()
            self._status.append(
                f"Message SigningString: '{base64.b64encode(signing_string.encode('utf-8')).decode('ascii')}'"
            )
            if not result:
                self._status.append(f"{header} signature invalid")
            return result
        except HeaderError as e:
            if e.error_code in ('HEADER_NOT_FOUND', 'MULTIPLE_HEADERS'):
                self._fail(f"{header} header not found")
            else:
                self._fail(e.message)
            return False
        except SignatureParseError:
            self._fail(f"{header} header malformed")
            return False
        except EXPECTED_FAILURES as e:
            self._fail(e.message)
            return False
        except Exception as e:
            self._status.append(f"Unknown exception {type(e).__name__}: {e}")
            raise

    def _fail(self, reason: str) -> None:
        logger.warning(f"Verification failed: {reason}")
        self._status.append(reason)
