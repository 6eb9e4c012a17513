"""
Tests for the signer
"""

import pytest
from unittest.mock import patch

from httpsig_sdk import HttpRequest
from httpsig_sdk.crypto import CryptoKey, KeyStore
from httpsig_sdk.exceptions import AlgorithmError, DigestError, SignatureDatesError, SignedHeaderNotPresentError
from httpsig_sdk.signing import Algorithm, HeaderList, SignatureDates, SignatureParametersParser, Signer
from httpsig_sdk.verification import Verifier

NOW = 1_600_000_000


def hmac_signer(header_list=None, dates=None, algorithm="hmac-sha256", **kwargs):
    return Signer(
        CryptoKey("secret1", "s3cr3t"),
        Algorithm.create(algorithm, family="hmac"),
        header_list or HeaderList(["(request-target)", "date"]),
        dates,
        **kwargs
    )


@pytest.fixture(autouse=True)
def frozen_time():
    with patch('httpsig_sdk.signing.dates.time.time', return_value=NOW):
        yield


class TestSigner:
    """Test signature production"""

    def test_sign_appends_signature_header(self, request_message):
        signed = hmac_signer().sign(request_message)
        values = signed.get_header("Signature")
        assert len(values) == 1
        parameters = SignatureParametersParser(values[0]).parse()
        assert parameters["keyId"] == "secret1"
        assert parameters["algorithm"] == "hmac-sha256"
        assert parameters["headers"] == "(request-target) date"
        assert not request_message.has_header("Signature")

    def test_sign_never_replaces(self, request_message):
        """Signing twice yields two Signature header instances"""
        signer = hmac_signer()
        assert len(signer.sign(signer.sign(request_message)).get_header("Signature")) == 2

    def test_authorize(self, request_message):
        signed = hmac_signer().authorize(request_message)
        value = signed.get_header("Authorization")[0]
        assert value.startswith('Signature keyId="secret1",algorithm="hmac-sha256",')
        assert not signed.has_header("Signature")

    def test_deterministic_hmac_signature(self):
        """Known-answer check for an HMAC signature over a fixed signing string"""
        message = HttpRequest(method="GET", url="/foo", headers={"Date": "today"})
        signer = hmac_signer(HeaderList(["date"], explicit=False))
        assert signer.get_signing_string(message) == "date: today"
        header = signer.sign(message).get_header("Signature")[0]
        again = signer.sign(message).get_header("Signature")[0]
        assert header == again
        assert 'headers=' not in header

    def test_hs2019_created_parameter(self, request_message):
        dates = SignatureDates(created=NOW)
        signer = hmac_signer(HeaderList(["(created)"], explicit=False), dates, algorithm="hs2019")
        header = signer.sign(request_message).get_header("Signature")[0]
        assert header.startswith(f'keyId="secret1",algorithm="hs2019",created={NOW},signature="')

    def test_sign_with_digest(self, request_message):
        signer = hmac_signer()
        signed = signer.sign_with_digest(request_message)
        assert signed.get_header("Digest")[0].startswith("SHA-256=")
        parameters = SignatureParametersParser(signed.get_header("Signature")[0]).parse()
        assert parameters["headers"] == "(request-target) date digest"
        assert signer.header_list.names == ["(request-target)", "date"]

    def test_authorize_with_digest_sha512(self, request_message):
        signed = hmac_signer(digest_hash_algorithm="sha512").authorize_with_digest(request_message)
        assert signed.get_header("Digest")[0].startswith("SHA-512=")
        assert 'digest"' in signed.get_header("Authorization")[0]

    def test_invalid_digest_algorithm(self):
        with pytest.raises(DigestError):
            hmac_signer(digest_hash_algorithm="md5")

    def test_missing_header_propagates(self):
        message = HttpRequest(method="GET", url="/")
        with pytest.raises(SignedHeaderNotPresentError):
            hmac_signer().sign(message)

    def test_family_mismatch(self, rsa_private_pem):
        with pytest.raises(AlgorithmError, match="cannot be used with signing key type 'hmac'"):
            Signer(CryptoKey("k", "secret"), Algorithm.create("rsa-sha256"), HeaderList(["date"]))
        with pytest.raises(AlgorithmError):
            Signer(CryptoKey("k", rsa_private_pem), Algorithm("hmac", "hs2019"), HeaderList(["date"]))

    def test_digest_override_comes_from_key(self, request_message):
        """A key-level hash algorithm is the only digest override and verifies with the same key"""
        key = CryptoKey("k", "secret", hash_algorithm="sha256")
        signer = Signer(key, Algorithm("hmac", "hs2019"), HeaderList(["date"]))
        signed = signer.sign(request_message)
        assert Verifier(KeyStore({"k": key})).is_signed(signed)
        with pytest.raises(TypeError):
            Signer(CryptoKey("k", "secret"), Algorithm("hmac", "hs2019"), HeaderList(["date"]), hash_algorithm="sha256")

    def test_public_key_cannot_sign(self, request_message, rsa_public_pem):
        signer = Signer(CryptoKey("k", rsa_public_pem), Algorithm.create("rsa-sha256"), HeaderList(["date"]))
        with pytest.raises(AlgorithmError):
            signer.sign(request_message)


class TestSignerDates:
    """Test date enforcement at signing time"""

    def test_created_now_succeeds(self, request_message):
        signer = hmac_signer(dates=SignatureDates(created=NOW))
        assert signer.sign(request_message).has_header("Signature")

    def test_created_within_drift_succeeds(self, request_message):
        signer = hmac_signer(dates=SignatureDates(created=NOW + 1))
        assert signer.sign(request_message).has_header("Signature")

    def test_created_in_future_fails(self, request_message):
        signer = hmac_signer(dates=SignatureDates(created=NOW + 2))
        with pytest.raises(SignatureDatesError):
            signer.sign(request_message)

    def test_expired_fails(self, request_message):
        signer = hmac_signer(dates=SignatureDates(created=NOW - 10, expires=NOW - 1))
        with pytest.raises(SignatureDatesError):
            signer.sign(request_message)

    def test_expires_drift_covers_skew(self, request_message):
        dates = SignatureDates(created=NOW - 10, expires=NOW - 1, expires_drift=1)
        assert hmac_signer(dates=dates).sign(request_message).has_header("Signature")

    def test_strict_dates_disabled(self, request_message):
        signer = hmac_signer(dates=SignatureDates(created=NOW + 100), strict_dates=False)
        assert signer.sign(request_message).has_header("Signature")
