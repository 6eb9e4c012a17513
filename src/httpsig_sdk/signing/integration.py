"""
requests integration for request signing

This module connects the signer to the requests library: an ``AuthBase``
implementation for automatic signing of outbound requests, a helper that
signs a single ``PreparedRequest``, and a session factory.
"""

import logging
from typing import Optional

import requests
from requests.auth import AuthBase
from requests.models import PreparedRequest
from requests.structures import CaseInsensitiveDict

from ..exceptions import HttpSignaturesError
from ..message import HttpRequest
from .digest import DIGEST_HEADER
from .signer import AUTHORIZATION_HEADER, SIGNATURE_HEADER, Signer

logger = logging.getLogger(__name__)

MODE_SIGNATURE = 'signature'
MODE_AUTHORIZATION = 'authorization'
SIGNING_MODES = (MODE_SIGNATURE, MODE_AUTHORIZATION)


def _validate_mode(mode: str) -> None:
    if mode not in SIGNING_MODES:
        raise HttpSignaturesError(
            f"Unknown signing mode '{mode}', expected one of {', '.join(SIGNING_MODES)}",
            "INVALID_SIGNING_MODE",
            {"mode": mode}
        )


def sign_prepared_request(
    prepared_request: PreparedRequest,
    signer: Signer,
    mode: str = MODE_SIGNATURE,
    with_digest: bool = False
) -> PreparedRequest:
    """
    Sign a prepared request in place.

    requests keeps one value per header name, so a pre-existing header of the
    same name is replaced by the one produced here.

    Args:
        prepared_request: Prepared request to sign
        signer: Configured signer
        mode: ``signature`` for a ``Signature`` header, ``authorization`` for
            ``Authorization: Signature``
        with_digest: Also set and cover a ``Digest`` header

    Returns:
        PreparedRequest: The same request with signature headers added

    Raises:
        HttpSignaturesError: If signing fails
    """
    _validate_mode(mode)
    message = HttpRequest.from_prepared_request(prepared_request)

    if mode == MODE_AUTHORIZATION:
        header_name = AUTHORIZATION_HEADER
        signed = signer.authorize_with_digest(message) if with_digest else signer.authorize(message)
    else:
        header_name = SIGNATURE_HEADER
        signed = signer.sign_with_digest(message) if with_digest else signer.sign(message)

    if prepared_request.headers is None:
        prepared_request.headers = CaseInsensitiveDict()
    for name in (DIGEST_HEADER, header_name):
        values = signed.get_header(name)
        if values and values != message.get_header(name):
            prepared_request.headers[name] = values[-1]

    logger.debug(f"Signed {message.method} {message.request_target} with key '{signer.key.id}'")
    return prepared_request


class HttpSignatureAuth(AuthBase):
    """
    requests authentication handler that signs every outbound request.

    Example::

        session.auth = HttpSignatureAuth(context.signer(), mode="authorization")
    """

    def __init__(self, signer: Signer, mode: str = MODE_SIGNATURE, with_digest: bool = False):
        _validate_mode(mode)
        self.signer = signer
        self.mode = mode
        self.with_digest = with_digest

    def __call__(self, request: PreparedRequest) -> PreparedRequest:
        return sign_prepared_request(request, self.signer, self.mode, self.with_digest)


def create_signing_session(
    signer: Signer,
    mode: str = MODE_SIGNATURE,
    with_digest: bool = False,
    session: Optional[requests.Session] = None
) -> requests.Session:
    """
    Return a requests session whose requests are signed automatically.

    Args:
        signer: Configured signer
        mode: ``signature`` or ``authorization``
        with_digest: Also set and cover a ``Digest`` header
        session: Existing session to configure (a new one by default)
    """
    session = session or requests.Session()
    session.auth = HttpSignatureAuth(signer, mode, with_digest)
    logger.info(f"Configured request signing for key ID: {signer.key.id}")
    return session
