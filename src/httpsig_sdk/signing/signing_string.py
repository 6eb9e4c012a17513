"""
Signing string construction

The signing string is one ``name: value`` line per entry of the header list,
joined with ``\\n`` and without a trailing newline. Signer and verifier must
build it byte-for-byte identically.
"""

import logging
import re
from typing import List, Optional

from ..exceptions import HeaderError, SignedHeaderNotPresentError
from ..message import HttpMessage, HttpRequest
from .dates import SignatureDates
from .header_list import HeaderList

logger = logging.getLogger(__name__)

PSEUDO_HEADER_PATTERN = re.compile(r'^\(.*\)$')

REQUEST_TARGET = '(request-target)'
CREATED = '(created)'
EXPIRES = '(expires)'


class SigningString:
    """
    Canonical signing string builder for one message
    """

    def __init__(
        self,
        header_list: HeaderList,
        message: HttpMessage,
        signature_dates: Optional[SignatureDates] = None
    ):
        """
        Initialize signing string builder.

        Args:
            header_list: Names to cover, in line order
            message: Request or response being signed or verified
            signature_dates: Source of ``(created)`` / ``(expires)`` values
        """
        self.header_list = header_list
        self.message = message
        self.signature_dates = signature_dates or SignatureDates()

    def string(self) -> str:
        """
        Build the signing string.

        Raises:
            HeaderError: For unsupported or unavailable pseudo-headers
            SignedHeaderNotPresentError: If a listed header is missing from the message
        """
        signing_string = '\n'.join(self.lines())
        logger.debug(f"Built signing string over [{self.header_list.string()}]")
        return signing_string

    def lines(self) -> List[str]:
        return [self._line(name) for name in self.header_list]

    def _line(self, name: str) -> str:
        if PSEUDO_HEADER_PATTERN.match(name):
            if name == REQUEST_TARGET:
                return f"{name}: {self._request_target()}"
            if name == CREATED:
                return f"{name}: {self._timestamp(name, self.signature_dates.created)}"
            if name == EXPIRES:
                return f"{name}: {self._timestamp(name, self.signature_dates.expires)}"
            raise HeaderError(f"Special header '{name}' not understood", "UNKNOWN_PSEUDO_HEADER", {"header": name})
        return f"{name}: {self._header_value(name)}"

    def _request_target(self) -> str:
        if not isinstance(self.message, HttpRequest):
            raise HeaderError(
                "Special header (request-target) is only allowed for requests",
                "REQUEST_TARGET_ON_RESPONSE"
            )
        return f"{self.message.method.lower()} {self.message.request_target}"

    @staticmethod
    def _timestamp(name: str, value: Optional[int]) -> int:
        if value is None:
            raise HeaderError(
                f"Special header '{name}' requires a timestamp but none is set",
                "MISSING_TIMESTAMP",
                {"header": name}
            )
        return value

    def _header_value(self, name: str) -> str:
        values = self.message.get_header(name)
        if not values:
            raise SignedHeaderNotPresentError(f"Header '{name}' not in message", details={"header": name})
        return ', '.join(values)
