"""
Signature timestamps and drift-tolerant validity checks
"""

import time
from dataclasses import dataclass
from typing import Optional, Union

from ..exceptions import SignatureDatesError

OffsetValue = Union[None, int, str]

DEFAULT_CREATED_DRIFT = 1
DEFAULT_EXPIRES_DRIFT = 0


def current_timestamp() -> int:
    """Current Unix timestamp in whole seconds."""
    return int(time.time())


@dataclass
class SignatureDates:
    """
    Created/expires pair carried by a signature.

    An unset timestamp is not enforced. ``created_drift`` tolerates a
    ``created`` slightly in the future; ``expires_drift`` tolerates an
    ``expires`` slightly in the past.
    """
    created: Optional[int] = None
    expires: Optional[int] = None
    created_drift: int = DEFAULT_CREATED_DRIFT
    expires_drift: int = DEFAULT_EXPIRES_DRIFT

    @staticmethod
    def offset(value: OffsetValue, start: Optional[int] = None) -> Optional[int]:
        """
        Resolve an offset specification to a timestamp.

        Args:
            value: ``'now'``, ``'none'``, an absolute int, ``'+N'`` / ``'-N'``
                relative to ``start``, or a numeric string
            start: Reference timestamp (default: current time)

        Returns:
            int or None: Timestamp, or None for ``'none'``

        Raises:
            SignatureDatesError: If the value cannot be interpreted
        """
        if start is None:
            start = current_timestamp()
        if value is None or value == 'none':
            return None
        if value == 'now':
            return start
        if isinstance(value, bool):
            raise SignatureDatesError(f"Invalid date offset: {value!r}", "INVALID_OFFSET")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            text = value.strip()
            try:
                if text.startswith('+'):
                    return start + int(text[1:])
                if text.startswith('-'):
                    return start - int(text[1:])
                return int(text)
            except ValueError:
                pass
        raise SignatureDatesError(
            f"Invalid date offset: {value!r}",
            "INVALID_OFFSET",
            {"offset": value}
        )

    @classmethod
    def from_offsets(
        cls,
        created: OffsetValue = 'now',
        expires: OffsetValue = 'none',
        start: Optional[int] = None
    ) -> 'SignatureDates':
        """Build dates from two offset specifications sharing one reference time."""
        if start is None:
            start = current_timestamp()
        return cls(created=cls.offset(created, start), expires=cls.offset(expires, start))

    def set_drift(self, drift: int = 0) -> None:
        self.created_drift = drift
        self.expires_drift = drift

    def set_created_drift(self, drift: int = 0) -> None:
        self.created_drift = drift

    def set_expires_drift(self, drift: int = 0) -> None:
        self.expires_drift = drift

    def unset_created(self) -> None:
        self.created = None

    def unset_expires(self) -> None:
        self.expires = None

    def has_started(self, at_time: Optional[int] = None) -> bool:
        """True when ``created`` is unset or not beyond ``at_time`` plus the created drift."""
        if self.created is None:
            return True
        if at_time is None:
            at_time = current_timestamp()
        return self.created <= at_time + self.created_drift

    def has_expired(self, at_time: Optional[int] = None) -> bool:
        """True when ``expires`` is set and ``at_time`` is past it plus the expires drift."""
        if self.expires is None:
            return False
        if at_time is None:
            at_time = current_timestamp()
        return at_time > self.expires + self.expires_drift

    def since_created(self, at_time: Optional[int] = None) -> Optional[int]:
        if self.created is None:
            return None
        if at_time is None:
            at_time = current_timestamp()
        return at_time - self.created

    def to_expire(self, at_time: Optional[int] = None) -> Optional[int]:
        if self.expires is None:
            return None
        if at_time is None:
            at_time = current_timestamp()
        return self.expires - at_time

    def validate(self, at_time: Optional[int] = None) -> None:
        """
        Check the window against ``at_time``.

        Raises:
            SignatureDatesError: If not yet started or already expired
        """
        if at_time is None:
            at_time = current_timestamp()
        if not self.has_started(at_time):
            raise SignatureDatesError(
                f"Signature created time {self.created} is in the future",
                "NOT_YET_VALID",
                {"created": self.created, "at_time": at_time, "drift": self.created_drift}
            )
        if self.has_expired(at_time):
            raise SignatureDatesError(
                f"Signature expired at {self.expires}",
                "EXPIRED",
                {"expires": self.expires, "at_time": at_time, "drift": self.expires_drift}
            )

    def copy(self) -> 'SignatureDates':
        return SignatureDates(self.created, self.expires, self.created_drift, self.expires_drift)
