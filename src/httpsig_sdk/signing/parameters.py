"""
Signature parameter serialization and parsing

Wire form::

    keyId="...",algorithm="...",[created=N,][expires=N,][headers="...",]signature="<base64>"
"""

import base64
import re
from typing import Dict, List, Optional, Tuple, Union

from ..exceptions import SignatureParseError
from .algorithm import HS2019, Algorithm
from .dates import SignatureDates
from .header_list import HeaderList
from .signing_string import CREATED, EXPIRES

STRING_SEGMENT_PATTERN = re.compile(r'\A(keyId|algorithm|headers|signature)="(.*)"\Z', re.DOTALL)
INTEGER_SEGMENT_PATTERN = re.compile(r'\A(created|expires)=(\d+)\Z')

REQUIRED_PARAMETERS = ('keyId', 'algorithm', 'signature')

ParameterValue = Union[str, int]


class SignatureParameters:
    """
    Parameter set of one produced signature
    """

    def __init__(
        self,
        key_id: str,
        algorithm: Algorithm,
        header_list: HeaderList,
        signature: bytes,
        signature_dates: Optional[SignatureDates] = None
    ):
        self.key_id = key_id
        self.algorithm = algorithm
        self.header_list = header_list
        self.signature = signature
        self.signature_dates = signature_dates

    def components(self) -> List[str]:
        """
        Parameter components in emission order.

        ``created``/``expires`` are emitted only for hs2019, only when the
        matching pseudo-header is covered, and only when the date is set.
        """
        components = [f'keyId="{self.key_id}"', f'algorithm="{self.algorithm.name}"']
        if self.algorithm.name == HS2019 and self.signature_dates is not None:
            if CREATED in self.header_list and self.signature_dates.created is not None:
                components.append(f'created={self.signature_dates.created}')
            if EXPIRES in self.header_list and self.signature_dates.expires is not None:
                components.append(f'expires={self.signature_dates.expires}')
        if self.header_list.explicit:
            components.append(f'headers="{self.header_list.string()}"')
        components.append(f'signature="{self.signature_base64()}"')
        return components

    def signature_base64(self) -> str:
        return base64.b64encode(self.signature).decode('ascii')

    def string(self) -> str:
        return ','.join(self.components())

    def __str__(self) -> str:
        return self.string()


class SignatureParametersParser:
    """
    Parser for a ``Signature`` header value (or the part of an
    ``Authorization`` value after the ``Signature`` scheme token)
    """

    def __init__(self, value: str):
        self.value = value

    def parse(self) -> Dict[str, ParameterValue]:
        """
        Parse the parameter set.

        Returns:
            Dict: Parameter name to string value (int for created/expires)

        Raises:
            SignatureParseError: For a malformed segment, a repeated
                parameter, or missing mandatory parameters
        """
        result: Dict[str, ParameterValue] = {}
        for segment in self.value.split(','):
            name, value = self._pair(segment.strip())
            if name in result:
                raise SignatureParseError(
                    f"Signature parameter '{name}' given more than once",
                    "DUPLICATE_PARAMETER",
                    {"parameter": name}
                )
            result[name] = value
        self._validate(result)
        return result

    @staticmethod
    def _pair(segment: str) -> Tuple[str, ParameterValue]:
        match = STRING_SEGMENT_PATTERN.match(segment)
        if match:
            return match.group(1), match.group(2)
        match = INTEGER_SEGMENT_PATTERN.match(segment)
        if match:
            return match.group(1), int(match.group(2))
        raise SignatureParseError(
            f"Signature parameters segment '{segment}' invalid",
            "INVALID_SEGMENT",
            {"segment": segment}
        )

    @staticmethod
    def _validate(result: Dict[str, ParameterValue]) -> None:
        missing = [name for name in REQUIRED_PARAMETERS if name not in result]
        if missing:
            raise SignatureParseError(
                f"Missing keys {', '.join(missing)}",
                "MISSING_PARAMETERS",
                {"missing": missing}
            )
