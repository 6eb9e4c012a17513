"""
Tests for signature parameter serialization and parsing
"""

import pytest

from httpsig_sdk.exceptions import SignatureParseError
from httpsig_sdk.signing import Algorithm, HeaderList, SignatureDates, SignatureParameters, SignatureParametersParser


class TestSignatureParameters:
    """Test parameter serialization"""

    def test_legacy_explicit_headers(self):
        parameters = SignatureParameters(
            "key1", Algorithm.create("hmac-sha256"), HeaderList(["(request-target)", "date"]), b"signature"
        )
        assert parameters.string() == (
            'keyId="key1",algorithm="hmac-sha256",headers="(request-target) date",signature="c2lnbmF0dXJl"'
        )

    def test_implicit_headers_omitted(self):
        parameters = SignatureParameters(
            "key1", Algorithm.create("rsa-sha256"), HeaderList(["date"], explicit=False), b"signature"
        )
        assert parameters.string() == 'keyId="key1",algorithm="rsa-sha256",signature="c2lnbmF0dXJl"'

    def test_hs2019_dates(self):
        """hs2019 emits created/expires when covered and set"""
        dates = SignatureDates(created=1402170695, expires=1402170699)
        parameters = SignatureParameters(
            "key1", Algorithm("hmac", "hs2019"), HeaderList(["(created)", "(expires)", "digest"]), b"signature", dates
        )
        assert parameters.components() == [
            'keyId="key1"',
            'algorithm="hs2019"',
            'created=1402170695',
            'expires=1402170699',
            'headers="(created) (expires) digest"',
            'signature="c2lnbmF0dXJl"',
        ]

    def test_dates_not_emitted_when_not_covered(self):
        dates = SignatureDates(created=1402170695, expires=1402170699)
        parameters = SignatureParameters(
            "key1", Algorithm("hmac", "hs2019"), HeaderList(["(created)"], explicit=False), b"s", dates
        )
        assert parameters.components()[2] == 'created=1402170695'
        assert not any(c.startswith('expires=') for c in parameters.components())

    def test_dates_not_emitted_for_legacy_names(self):
        dates = SignatureDates(created=1402170695)
        parameters = SignatureParameters(
            "key1", Algorithm.create("hmac-sha256"), HeaderList(["(created)"]), b"s", dates
        )
        assert not any(c.startswith('created=') for c in parameters.components())


class TestSignatureParametersParser:
    """Test parameter parsing"""

    def test_parse_minimal(self):
        result = SignatureParametersParser(
            'keyId="k",algorithm="hmac-sha256",signature="c2lnbmF0dXJl"'
        ).parse()
        assert result == {"keyId": "k", "algorithm": "hmac-sha256", "signature": "c2lnbmF0dXJl"}

    def test_parse_full_any_order(self):
        result = SignatureParametersParser(
            'signature="c2ln",headers="(created) digest",expires=1402170699,'
            'created=1402170695,algorithm="hs2019",keyId="k"'
        ).parse()
        assert result["created"] == 1402170695
        assert result["expires"] == 1402170699
        assert result["headers"] == "(created) digest"

    def test_whitespace_between_segments(self):
        result = SignatureParametersParser('keyId="k", algorithm="hs2019", signature="c2ln"').parse()
        assert result["algorithm"] == "hs2019"

    def test_missing_signature(self):
        with pytest.raises(SignatureParseError, match="Missing keys signature"):
            SignatureParametersParser('keyId="k",algorithm="hmac-sha256"').parse()

    def test_missing_several(self):
        with pytest.raises(SignatureParseError, match="Missing keys keyId, algorithm"):
            SignatureParametersParser('signature="c2ln"').parse()

    @pytest.mark.parametrize("segment", [
        'foo="bar"',
        'keyId=k',
        'created="123"',
        'created=abc',
        'keyId="k"extra',
        '',
    ])
    def test_invalid_segment(self, segment):
        value = f'keyId="k",algorithm="hs2019",signature="c2ln",{segment}'
        with pytest.raises(SignatureParseError, match="segment .* invalid"):
            SignatureParametersParser(value).parse()

    def test_duplicate_parameter(self):
        with pytest.raises(SignatureParseError, match="more than once"):
            SignatureParametersParser('keyId="a",keyId="b",algorithm="hs2019",signature="c2ln"').parse()
