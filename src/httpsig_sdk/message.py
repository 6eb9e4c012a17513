"""
HTTP message values used for signing and verification

Requests and responses are immutable: every mutation helper returns a new
message, so a signed copy never aliases the message it was derived from.
Header collections keep their original order and allow repeated names.
"""

from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import urlsplit

from requests.models import PreparedRequest, Response


HeaderInput = Union[None, 'Headers', Mapping[str, Union[str, Sequence[str]]], Iterable[Tuple[str, str]]]
BodyInput = Union[None, str, bytes, bytearray]


class Headers:
    """
    Ordered, case-insensitive, multi-valued header collection.

    Each entry is one header instance; ``get_all`` returns the values of every
    instance of a name in the order they were added.
    """

    __slots__ = ('_items',)

    def __init__(self, headers: HeaderInput = None):
        items: List[Tuple[str, str]] = []
        if headers is None:
            pass
        elif isinstance(headers, Headers):
            items = list(headers._items)
        elif isinstance(headers, Mapping):
            for name, value in headers.items():
                if isinstance(value, (list, tuple)):
                    items.extend((name, str(v)) for v in value)
                else:
                    items.append((name, str(value)))
        else:
            for name, value in headers:
                items.append((name, str(value)))
        self._items: Tuple[Tuple[str, str], ...] = tuple(items)

    def get_all(self, name: str) -> List[str]:
        target = name.lower()
        return [value for key, value in self._items if key.lower() == target]

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the first value for ``name``."""
        values = self.get_all(name)
        return values[0] if values else default

    def has(self, name: str) -> bool:
        target = name.lower()
        return any(key.lower() == target for key, _ in self._items)

    def with_added(self, name: str, value: str) -> 'Headers':
        """Return a copy with one more instance of ``name``."""
        return Headers(self._items + ((name, str(value)),))

    def without(self, name: str) -> 'Headers':
        target = name.lower()
        return Headers(item for item in self._items if item[0].lower() != target)

    def with_replaced(self, name: str, value: str) -> 'Headers':
        """Return a copy where ``name`` has exactly one instance, ``value``."""
        target = name.lower()
        items = []
        inserted = False
        for key, existing in self._items:
            if key.lower() != target:
                items.append((key, existing))
            elif not inserted:
                items.append((name, str(value)))
                inserted = True
        if not inserted:
            items.append((name, str(value)))
        return Headers(items)

    def items(self) -> List[Tuple[str, str]]:
        return list(self._items)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        return f"Headers({list(self._items)!r})"


def _coerce_body(body: BodyInput) -> bytes:
    if body is None:
        return b""
    if isinstance(body, str):
        return body.encode('utf-8')
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    raise ValueError(f"Body must be string, bytes, or None, got {type(body)}")


class _MessageMixin:
    """Copy-on-write header helpers shared by requests and responses"""

    headers: Headers
    body: bytes

    def get_header(self, name: str) -> List[str]:
        return self.headers.get_all(name)

    def has_header(self, name: str) -> bool:
        return self.headers.has(name)

    def with_added_header(self, name: str, value: str):
        return replace(self, headers=self.headers.with_added(name, value))

    def without_header(self, name: str):
        return replace(self, headers=self.headers.without(name))

    def with_header(self, name: str, value: str):
        return replace(self, headers=self.headers.with_replaced(name, value))

    def with_body(self, body: BodyInput):
        return replace(self, body=body)


@dataclass(frozen=True)
class HttpRequest(_MessageMixin):
    """
    HTTP request to be signed or verified

    Attributes:
        method: HTTP method (GET, POST, etc.)
        url: Absolute URL or origin-form request target (``/path?query``)
        headers: Request headers
        body: Request body bytes
    """
    method: str
    url: str
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""

    def __post_init__(self):
        """Validate and normalise request after initialization"""
        if not self.method:
            raise ValueError("Request method cannot be empty")
        if not self.url:
            raise ValueError("Request URL cannot be empty")
        object.__setattr__(self, 'method', self.method.upper())
        if not isinstance(self.headers, Headers):
            object.__setattr__(self, 'headers', Headers(self.headers))
        object.__setattr__(self, 'body', _coerce_body(self.body))

    @property
    def request_target(self) -> str:
        """Path and query of the request, as sent on the request line."""
        parsed = urlsplit(self.url)
        if not parsed.scheme and not parsed.netloc:
            return self.url
        target = parsed.path or "/"
        if parsed.query:
            target = f"{target}?{parsed.query}"
        return target

    @classmethod
    def from_prepared_request(cls, prepared: PreparedRequest) -> 'HttpRequest':
        """
        Build a request value from a ``requests.PreparedRequest``.

        ``str`` bodies are encoded as ISO-8859-1, the encoding ``http.client``
        uses when it sends them.
        """
        body = prepared.body
        if body is not None and not isinstance(body, (str, bytes, bytearray)):
            raise ValueError("Streamed request bodies cannot be signed")
        if isinstance(body, str):
            try:
                body = body.encode('iso-8859-1')
            except UnicodeEncodeError as e:
                raise ValueError("String request bodies must be ISO-8859-1 encodable; pass bytes instead") from e
        return cls(
            method=prepared.method,
            url=prepared.url,
            headers=Headers(prepared.headers or {}),
            body=body,
        )


@dataclass(frozen=True)
class HttpResponse(_MessageMixin):
    """
    HTTP response to be signed or verified

    Attributes:
        status_code: HTTP status code
        headers: Response headers
        body: Response body bytes
    """
    status_code: int
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""

    def __post_init__(self):
        """Validate response data"""
        if not isinstance(self.status_code, int) or self.status_code < 100 or self.status_code >= 600:
            raise ValueError("Status must be a valid HTTP status code")
        if not isinstance(self.headers, Headers):
            object.__setattr__(self, 'headers', Headers(self.headers))
        object.__setattr__(self, 'body', _coerce_body(self.body))

    @classmethod
    def from_requests_response(cls, response: Response) -> 'HttpResponse':
        """Build a response value from a ``requests.Response``."""
        return cls(
            status_code=response.status_code,
            headers=Headers(response.headers),
            body=response.content,
        )


HttpMessage = Union[HttpRequest, HttpResponse]
